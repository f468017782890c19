"""SQLAlchemy ORM models for the marketplace.

Each table stands for one logical collection: listings, claims, orders,
users and ratings. Table names follow `core.config.collection_name` so a
deployment can be namespaced by app id. Models carry no business logic;
the rules live in `services`.
"""

import uuid
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text
from sqlalchemy.orm import declarative_base
from datetime import datetime

from core.config import collection_name

Base = declarative_base()

LISTING_ACTIVE = "active"
LISTING_CLAIMED = "claimed"

ORDER_RESERVED = "reserved"
ORDER_COMPLETED = "completed"

ROLE_GENERATOR = "generator"
ROLE_FARMER = "farmer"


def new_id() -> str:
    return uuid.uuid4().hex


class UserProfile(Base):
    """Identity and role record; the id is the auth provider's user id.

    Location and search radius drive listing visibility for farmers; the
    rating aggregate is only maintained for generators.
    """

    __tablename__ = collection_name("users")
    id = Column(String, primary_key=True)
    email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    role = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address = Column(Text, nullable=True)
    search_radius_km = Column(Float, nullable=True)
    average_rating = Column(Float, nullable=True)
    total_ratings = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Listing(Base):
    """An offer of surplus food or waste.

    `version` is the optimistic concurrency counter: every UPDATE is
    conditioned on the version the writer read.
    """

    __tablename__ = collection_name("listings")
    id = Column(String, primary_key=True, default=new_id)
    generator_id = Column(String, ForeignKey(f"{collection_name('users')}.id"), nullable=False, index=True)
    generator_name = Column(String, nullable=True)
    generator_contact = Column(String, nullable=True)
    title = Column(String, nullable=False)
    quantity = Column(String, nullable=False)
    remaining_quantity = Column(String, nullable=False)
    address = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    image_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default=LISTING_ACTIVE, index=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}


class Claim(Base):
    """A farmer's commitment against a listing. Rows are never updated."""

    __tablename__ = collection_name("claims")
    id = Column(String, primary_key=True, default=new_id)
    listing_id = Column(String, ForeignKey(f"{collection_name('listings')}.id"), nullable=False, index=True)
    claimer_id = Column(String, nullable=False, index=True)
    claimer_name = Column(String, nullable=True)
    claimer_contact = Column(String, nullable=True)
    quantity = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Order(Base):
    """Pickup order created alongside a claim and completed by the generator."""

    __tablename__ = collection_name("orders")
    id = Column(String, primary_key=True, default=new_id)
    listing_id = Column(String, ForeignKey(f"{collection_name('listings')}.id"), nullable=False, index=True)
    claim_id = Column(String, ForeignKey(f"{collection_name('claims')}.id"), nullable=False)
    generator_id = Column(String, nullable=False, index=True)
    farmer_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    quantity = Column(String, nullable=False)
    status = Column(String, nullable=False, default=ORDER_RESERVED)
    rating_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)


class Rating(Base):
    """A farmer's star rating (1-5) for a completed order."""

    __tablename__ = collection_name("ratings")
    id = Column(String, primary_key=True, default=new_id)
    order_id = Column(String, ForeignKey(f"{collection_name('orders')}.id"), nullable=False, unique=True)
    listing_id = Column(String, nullable=False)
    generator_id = Column(String, nullable=False, index=True)
    farmer_id = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
