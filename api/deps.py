"""Request-scoped dependencies: caller identity, role guard and clients.

Identity comes from the external auth provider and reaches the API as the
`X-User-Id` header. The role guard re-reads the caller's profile on every
protected request.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from core.exceptions import AuthenticationError, ForbiddenError
from core.logger import get_logger
from database.deps import get_db_write
from database.models import UserProfile
from services.geocoder import ReverseGeocoder
from services.listing_feed import ListingFeed
from services.roles import resolve_access

logger = get_logger("api.deps")


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def require_user(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    """Authenticated caller id; 401 with a login redirect otherwise."""
    if not user_id:
        raise AuthenticationError()
    return user_id


def require_role(*allowed_roles: str):
    """Build a dependency admitting only callers whose role is in `allowed_roles`.

    The dependency returns the caller's profile. Rejections carry the page
    the client should navigate to in `details.redirect_to`.
    """

    def dependency(
        user_id: Optional[str] = Depends(get_current_user_id),
        db: Session = Depends(get_db_write),
    ) -> UserProfile:
        profile = db.get(UserProfile, user_id) if user_id else None
        decision = resolve_access(user_id, profile, allowed_roles)
        if decision.allowed:
            return profile

        logger.info("Access denied for %s (%s) -> %s", user_id, decision.reason, decision.redirect_to)
        if decision.reason == "unauthenticated":
            raise AuthenticationError(redirect_to=decision.redirect_to)
        if decision.reason == "role_not_assigned":
            raise ForbiddenError("Choose a role before continuing", redirect_to=decision.redirect_to)
        raise ForbiddenError(
            f"This section is only available to {' or '.join(allowed_roles)} accounts",
            redirect_to=decision.redirect_to,
        )

    return dependency


def get_listing_feed(request: Request) -> ListingFeed:
    return request.app.state.listing_feed


def get_geocoder(request: Request) -> ReverseGeocoder:
    return request.app.state.geocoder
