"""User profile and onboarding API router.

The caller's own profile lives under `/api/users/me`. Onboarding assigns
the marketplace role exactly once; later profile edits cannot touch it.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from api.deps import require_user
from api.serializers import profile_to_response
from core.exceptions import RoleAlreadyAssignedError
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas import ProfileUpdateRequest, RoleAssignRequest, RoleAssignResponse, UserProfileResponse
from services.profiles import get_profile, update_profile
from services.roles import RoleAssignment, assign_role_once

logger = get_logger("api.users")
router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserProfileResponse)
def read_my_profile(user_id: str = Depends(require_user), db: Session = Depends(get_db_read)):
    """Return the caller's profile.

    Raises:
        NotFoundError: If the caller has not been onboarded yet.
    """
    return profile_to_response(get_profile(db, user_id))


@router.patch("/me", response_model=UserProfileResponse)
def update_my_profile(
    payload: ProfileUpdateRequest,
    user_id: str = Depends(require_user),
    db: Session = Depends(get_db_write),
):
    """Update name, contact, home location or (farmers only) search radius."""
    profile = update_profile(db, user_id, **payload.model_dump(exclude_unset=True))
    return profile_to_response(profile)


@router.post("/me/role", response_model=RoleAssignResponse, status_code=status.HTTP_201_CREATED)
def choose_role(
    payload: RoleAssignRequest,
    response: Response,
    user_id: str = Depends(require_user),
    db: Session = Depends(get_db_write),
):
    """Assign the caller's marketplace role.

    Returns 201 when the role is stored and 200 when the same role was
    already set.

    Raises:
        RoleAlreadyAssignedError: If a different role is already stored.
    """
    outcome = assign_role_once(
        db, user_id, payload.role, email=payload.email, name=payload.name, contact=payload.contact
    )
    profile = get_profile(db, user_id)

    if outcome is RoleAssignment.ALREADY_ASSIGNED:
        if profile.role != payload.role:
            raise RoleAlreadyAssignedError(user_id, profile.role)
        response.status_code = status.HTTP_200_OK

    return RoleAssignResponse(status=outcome.value, role=profile.role, profile=profile_to_response(profile))
