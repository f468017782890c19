"""Shared test data: actor locations, profile factory and auth headers."""
from database.models import UserProfile

# Farmer home in Kuala Lumpur city centre.
FARMER_HOME = (3.1390, 101.6869)
NEARBY = (3.1500, 101.7000)
FAR_AWAY = (3.3000, 101.9000)


def make_profile(session, user_id, role, location=None, radius=None, name=None):
    profile = UserProfile(
        id=user_id,
        email=f"{user_id}@example.com",
        name=name or user_id.title(),
        contact="+60 12-000 0000",
        role=role,
        latitude=location[0] if location else None,
        longitude=location[1] if location else None,
        search_radius_km=radius,
    )
    session.add(profile)
    session.commit()
    return profile


def auth(user_id):
    return {"X-User-Id": user_id}
