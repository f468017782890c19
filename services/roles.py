"""Role assignment and role-based access decisions.

Every user holds exactly one marketplace role, chosen once during
onboarding. The role decides which workspace (generator or farmer) a
session may enter.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.logger import get_logger
from database.models import UserProfile, ROLE_FARMER, ROLE_GENERATOR

logger = get_logger("services.roles")

ROLES = (ROLE_GENERATOR, ROLE_FARMER)

LOGIN_PATH = "/login"
ROLE_SELECTION_PATH = "/onboarding/role"
ROLE_HOME = {
    ROLE_GENERATOR: "/generator",
    ROLE_FARMER: "/farmer",
}


class RoleAssignment(str, enum.Enum):
    ASSIGNED = "assigned"
    ALREADY_ASSIGNED = "already_assigned"


@dataclass
class AccessDecision:
    allowed: bool
    redirect_to: Optional[str] = None
    reason: Optional[str] = None


def validate_role(role: str) -> str:
    if role not in ROLES:
        raise ValidationError(f"Unknown role '{role}'. Expected one of: {', '.join(ROLES)}", field="role")
    return role


def assign_role_once(session: Session, user_id: str, role: str, **profile_fields) -> RoleAssignment:
    """Persist `role` for `user_id` unless the user already has one.

    Non-None `profile_fields` (email, name, contact) are written in the same
    statement as the role. The update only matches a row whose role is still
    NULL, so of two concurrent assignments exactly one succeeds.

    Returns:
        `RoleAssignment.ASSIGNED` when the role was stored, otherwise
        `RoleAssignment.ALREADY_ASSIGNED` with the stored role left as is.
    """
    validate_role(role)
    fields = {k: v for k, v in profile_fields.items() if v is not None}

    profile = session.get(UserProfile, user_id)
    if profile is None:
        session.add(UserProfile(id=user_id, role=role, **fields))
        try:
            session.commit()
            logger.info("Created profile %s with role %s", user_id, role)
            return RoleAssignment.ASSIGNED
        except IntegrityError:
            # Another request created the profile first.
            session.rollback()
            profile = session.get(UserProfile, user_id)

    if profile.role:
        logger.info("Role for %s already set to %s; requested %s", user_id, profile.role, role)
        return RoleAssignment.ALREADY_ASSIGNED

    result = session.execute(
        update(UserProfile)
        .where(UserProfile.id == user_id, UserProfile.role.is_(None))
        .values(role=role, updated_at=datetime.utcnow(), **fields)
    )
    session.commit()

    if result.rowcount == 0:
        logger.warning("Concurrent role assignment for %s; keeping the stored role", user_id)
        return RoleAssignment.ALREADY_ASSIGNED

    logger.info("Assigned role %s to %s", role, user_id)
    return RoleAssignment.ASSIGNED


def resolve_access(user_id: Optional[str], profile: Optional[UserProfile], allowed_roles: Iterable[str]) -> AccessDecision:
    """Decide whether a session may enter a section reserved for `allowed_roles`.

    Unauthenticated sessions go to the login page, sessions without a role
    go to role selection and sessions with another role go to their own
    workspace.
    """
    allowed_roles = tuple(allowed_roles)
    if not user_id:
        return AccessDecision(False, LOGIN_PATH, "unauthenticated")
    if profile is None or not profile.role:
        return AccessDecision(False, ROLE_SELECTION_PATH, "role_not_assigned")
    if profile.role not in allowed_roles:
        return AccessDecision(False, ROLE_HOME.get(profile.role, ROLE_SELECTION_PATH), "role_not_allowed")
    return AccessDecision(True)


__all__ = [
    "ROLES",
    "ROLE_HOME",
    "LOGIN_PATH",
    "ROLE_SELECTION_PATH",
    "RoleAssignment",
    "AccessDecision",
    "validate_role",
    "assign_role_once",
    "resolve_access",
]
