"""User profile reads and updates (everything except the role)."""

from typing import Optional

from sqlalchemy.orm import Session

from core.config import MIN_SEARCH_RADIUS_KM, MAX_SEARCH_RADIUS_KM
from core.exceptions import ValidationError
from core.logger import get_logger
from core.repository import get_or_404, save
from database.models import UserProfile, ROLE_FARMER

logger = get_logger("services.profiles")


def get_profile(session: Session, user_id: str) -> UserProfile:
    return get_or_404(session, UserProfile, user_id, "UserProfile")


def update_profile(
    session: Session,
    user_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    contact: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    address: Optional[str] = None,
    search_radius_km: Optional[float] = None,
) -> UserProfile:
    """Merge the given fields into the profile, creating it if missing.

    Fields left as None are not touched. Latitude and longitude must be
    given together. The search radius is a farmer-only preference.
    """
    if (latitude is None) != (longitude is None):
        raise ValidationError("Latitude and longitude must be provided together", field="location")

    profile = session.get(UserProfile, user_id)
    if profile is None:
        profile = UserProfile(id=user_id)

    if search_radius_km is not None:
        if profile.role != ROLE_FARMER:
            raise ValidationError("Only farmers can set a search radius", field="search_radius_km")
        if not MIN_SEARCH_RADIUS_KM <= search_radius_km <= MAX_SEARCH_RADIUS_KM:
            raise ValidationError(
                f"Search radius must be between {MIN_SEARCH_RADIUS_KM} and {MAX_SEARCH_RADIUS_KM} km",
                field="search_radius_km",
            )
        profile.search_radius_km = search_radius_km

    for field, value in (("email", email), ("name", name), ("contact", contact), ("address", address)):
        if value is not None:
            setattr(profile, field, value)
    if latitude is not None:
        profile.latitude = latitude
        profile.longitude = longitude

    profile = save(session, profile)
    logger.info("Profile %s updated", user_id)
    return profile
