"""Shared fixtures: a throwaway SQLite database and marketplace actors.

Environment variables are set before any application module is imported
so the engines and table names pick them up.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="marketplace-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["USE_SIMPLE_COLLECTION_PATH"] = "true"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["GOOGLE_MAPS_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from database import reset_db
from database.database import WriteSessionLocal
from database.models import ROLE_FARMER, ROLE_GENERATOR
from helpers import FARMER_HOME, NEARBY, make_profile
from services.listings import create_listing


@pytest.fixture(autouse=True)
def clean_db():
    reset_db()
    yield


@pytest.fixture
def db():
    session = WriteSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from main import app
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def generator(db):
    return make_profile(db, "gen-1", ROLE_GENERATOR, location=NEARBY, name="Nasi Kandar House")


@pytest.fixture
def farmer(db):
    return make_profile(db, "farmer-1", ROLE_FARMER, location=FARMER_HOME, radius=10, name="Green Acres")


@pytest.fixture
def second_farmer(db):
    return make_profile(db, "farmer-2", ROLE_FARMER, location=FARMER_HOME, radius=10, name="Sunny Fields")


@pytest.fixture
def listing(db, generator):
    return create_listing(
        db, generator, "Vegetable trimmings", "10 kg", "Jalan Bukit Bintang", NEARBY[0], NEARBY[1]
    )
