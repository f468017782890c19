"""Tests for one-time role assignment and the role guard."""
from types import SimpleNamespace

import pytest

from core.exceptions import ValidationError
from database.models import UserProfile
from services.roles import (
    LOGIN_PATH,
    ROLE_SELECTION_PATH,
    RoleAssignment,
    assign_role_once,
    resolve_access,
)


def test_first_assignment_creates_profile(db):
    outcome = assign_role_once(db, "u-1", "farmer", name="Green Acres", email="g@example.com")

    assert outcome is RoleAssignment.ASSIGNED
    profile = db.get(UserProfile, "u-1")
    assert profile.role == "farmer"
    assert profile.name == "Green Acres"


def test_assignment_on_existing_profile_without_role(db):
    db.add(UserProfile(id="u-2", name="Before"))
    db.commit()

    outcome = assign_role_once(db, "u-2", "generator", contact="+60 1")

    assert outcome is RoleAssignment.ASSIGNED
    profile = db.get(UserProfile, "u-2")
    assert profile.role == "generator"
    assert profile.name == "Before"


def test_role_assignment_is_idempotent(db):
    assign_role_once(db, "u-3", "generator")

    again = assign_role_once(db, "u-3", "generator")
    switched = assign_role_once(db, "u-3", "farmer", name="Should not be written")

    assert again is RoleAssignment.ALREADY_ASSIGNED
    assert switched is RoleAssignment.ALREADY_ASSIGNED
    db.expire_all()
    profile = db.get(UserProfile, "u-3")
    assert profile.role == "generator"
    assert profile.name is None


def test_unknown_role_is_rejected(db):
    with pytest.raises(ValidationError):
        assign_role_once(db, "u-4", "admin")
    assert db.get(UserProfile, "u-4") is None


def test_guard_sends_anonymous_sessions_to_login():
    decision = resolve_access(None, None, ["farmer"])
    assert not decision.allowed
    assert decision.redirect_to == LOGIN_PATH


def test_guard_sends_unassigned_sessions_to_role_selection():
    assert resolve_access("u", None, ["farmer"]).redirect_to == ROLE_SELECTION_PATH
    no_role = SimpleNamespace(role=None)
    assert resolve_access("u", no_role, ["farmer"]).redirect_to == ROLE_SELECTION_PATH


def test_guard_sends_other_roles_to_their_workspace():
    generator = SimpleNamespace(role="generator")
    farmer = SimpleNamespace(role="farmer")

    assert resolve_access("u", generator, ["farmer"]).redirect_to == "/generator"
    assert resolve_access("u", farmer, ["generator"]).redirect_to == "/farmer"


def test_guard_admits_allowed_role():
    decision = resolve_access("u", SimpleNamespace(role="farmer"), ["generator", "farmer"])
    assert decision.allowed
    assert decision.redirect_to is None
