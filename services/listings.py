"""Listing creation, edits and queries."""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import ConflictError, ForbiddenError, ValidationError
from core.logger import get_logger
from core.repository import get_or_404, save
from database.models import Listing, UserProfile, LISTING_ACTIVE
from services.quantity import parse_positive_quantity
from services.visibility import farmer_search_area, sort_by_distance, visible_listings

logger = get_logger("services.listings")


def create_listing(
    session: Session,
    generator: UserProfile,
    title: str,
    quantity: str,
    address: str,
    latitude: float,
    longitude: float,
    image_url: Optional[str] = None,
) -> Listing:
    """Publish a new active listing owned by `generator`.

    The generator's name and contact are copied onto the listing so farmers
    can see them without reading the generator's profile.
    """
    if not title or not title.strip():
        raise ValidationError("Title is required", field="title")
    parsed = parse_positive_quantity(quantity)

    listing = Listing(
        generator_id=generator.id,
        generator_name=generator.name,
        generator_contact=generator.contact,
        title=title.strip(),
        quantity=str(parsed),
        remaining_quantity=str(parsed),
        address=address,
        latitude=latitude,
        longitude=longitude,
        image_url=image_url,
        status=LISTING_ACTIVE,
    )
    listing = save(session, listing)
    logger.info("Listing %s created by %s (%s)", listing.id, generator.id, listing.quantity)
    return listing


def get_listing(session: Session, listing_id: str) -> Listing:
    return get_or_404(session, Listing, listing_id, "Listing")


def update_listing(
    session: Session,
    listing_id: str,
    generator_id: str,
    title: Optional[str] = None,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    image_url: Optional[str] = None,
) -> Listing:
    """Edit the descriptive fields of a generator's own active listing.

    Quantities are not editable here; they only change through claims.

    Raises:
        NotFoundError: The listing does not exist.
        ForbiddenError: The listing belongs to another generator.
        ValidationError: The listing is no longer active, the title is blank
            or only one of latitude and longitude was given.
        ConflictError: A claim changed the listing while it was being edited.
    """
    listing = get_listing(session, listing_id)
    if listing.generator_id != generator_id:
        raise ForbiddenError("You can only edit your own listings")
    if listing.status != LISTING_ACTIVE:
        raise ValidationError("Only active listings can be edited", field="listing_id")
    if (latitude is None) != (longitude is None):
        raise ValidationError("Latitude and longitude must be provided together", field="location")

    if title is not None:
        if not title.strip():
            raise ValidationError("Title is required", field="title")
        listing.title = title.strip()
    if address is not None:
        listing.address = address
    if latitude is not None:
        listing.latitude = latitude
        listing.longitude = longitude
    if image_url is not None:
        listing.image_url = image_url

    try:
        listing = save(session, listing)
    except StaleDataError:
        session.rollback()
        raise ConflictError(
            "The listing changed while editing; please reload and try again",
            details={"listing_id": listing_id},
        )
    logger.info("Listing %s edited by %s", listing.id, generator_id)
    return listing


def list_generator_listings(session: Session, generator_id: str) -> List[Listing]:
    return (
        session.query(Listing)
        .filter(Listing.generator_id == generator_id)
        .order_by(Listing.created_at.desc())
        .all()
    )


def list_active_listings(session: Session) -> List[Listing]:
    return session.query(Listing).filter(Listing.status == LISTING_ACTIVE).all()


def farmer_feed(session: Session, farmer: Optional[UserProfile]) -> Tuple[List[Tuple[Listing, Optional[float]]], Optional[float]]:
    """Active listings visible to `farmer`, nearest first.

    Returns the ranked `(listing, distance_km)` pairs and the radius that
    was applied (None when the filter failed open).
    """
    origin, radius = farmer_search_area(farmer)
    visible = visible_listings(list_active_listings(session), origin, radius)
    return sort_by_distance(visible, origin), radius
