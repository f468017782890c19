"""Listings API router.

Generators publish, edit and review their listings; farmers browse the feed
filtered to their search radius and claim stock. Every change is
published to the live listing feed after it has been committed.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_listing_feed, require_role, require_user
from api.serializers import claim_to_response, feed_listing, listing_to_response
from core.exceptions import ForbiddenError
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from database.models import ROLE_FARMER, ROLE_GENERATOR, UserProfile
from schemas import (
    ClaimCreateRequest,
    ClaimResponse,
    ClaimResultResponse,
    FeedResponse,
    ListingCreateRequest,
    ListingResponse,
    ListingUpdateRequest,
)
from services.claims import ClaimerInfo, claim_listing, list_farmer_claims, list_listing_claims
from services.listing_feed import ListingFeed, listing_event
from services.listings import create_listing, farmer_feed, get_listing, list_generator_listings, update_listing

logger = get_logger("api.listings")
router = APIRouter(prefix="/api/listings", tags=["listings"])


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
def publish_listing(
    payload: ListingCreateRequest,
    generator: UserProfile = Depends(require_role(ROLE_GENERATOR)),
    db: Session = Depends(get_db_write),
    feed: ListingFeed = Depends(get_listing_feed),
):
    """Create a new active listing for the calling generator."""
    listing = create_listing(db, generator, **payload.model_dump())
    feed.publish(listing_event(listing, "listing_created"))
    return listing_to_response(listing)


@router.get("/mine", response_model=List[ListingResponse])
def my_listings(
    generator: UserProfile = Depends(require_role(ROLE_GENERATOR)),
    db: Session = Depends(get_db_read),
):
    """All listings of the calling generator, newest first, including claimed ones."""
    return [listing_to_response(listing) for listing in list_generator_listings(db, generator.id)]


@router.get("/feed", response_model=FeedResponse)
def listing_feed(
    farmer: UserProfile = Depends(require_role(ROLE_FARMER)),
    db: Session = Depends(get_db_read),
):
    """Active listings within the farmer's search radius, nearest first.

    Farmers without a home location see every active listing.
    """
    ranked, radius = farmer_feed(db, farmer)
    listings = [feed_listing(listing, distance) for listing, distance in ranked]
    return FeedResponse(count=len(listings), radius_km=radius, listings=listings)


@router.get("/claims/mine", response_model=List[ClaimResponse])
def my_claims(
    farmer: UserProfile = Depends(require_role(ROLE_FARMER)),
    db: Session = Depends(get_db_read),
):
    """Claims made by the calling farmer, newest first."""
    return [claim_to_response(c) for c in list_farmer_claims(db, farmer.id)]


@router.get("/{listing_id}", response_model=ListingResponse)
def read_listing(listing_id: str, user_id: str = Depends(require_user), db: Session = Depends(get_db_read)):
    """Return one listing.

    Raises:
        NotFoundError: If the listing does not exist.
    """
    return listing_to_response(get_listing(db, listing_id))


@router.patch("/{listing_id}", response_model=ListingResponse)
def edit_listing(
    listing_id: str,
    payload: ListingUpdateRequest,
    generator: UserProfile = Depends(require_role(ROLE_GENERATOR)),
    db: Session = Depends(get_db_write),
    feed: ListingFeed = Depends(get_listing_feed),
):
    """Edit title, address, location or image of one of the caller's active listings."""
    listing = update_listing(db, listing_id, generator.id, **payload.model_dump(exclude_unset=True))
    feed.publish(listing_event(listing))
    return listing_to_response(listing)


@router.post("/{listing_id}/claims", response_model=ClaimResultResponse, status_code=status.HTTP_201_CREATED)
def claim(
    listing_id: str,
    payload: ClaimCreateRequest,
    farmer: UserProfile = Depends(require_role(ROLE_FARMER)),
    db: Session = Depends(get_db_write),
    feed: ListingFeed = Depends(get_listing_feed),
):
    """Claim part or all of a listing's remaining quantity.

    Raises:
        ValidationError: Own listing, fully claimed listing, unreadable
            quantity or more than remains. Nothing is written.
        NotFoundError: If the listing does not exist.
        ConflictError: If concurrent claims kept winning the race.
    """
    result = claim_listing(
        db,
        listing_id,
        farmer.id,
        ClaimerInfo(name=farmer.name, contact=farmer.contact),
        payload.quantity,
    )
    feed.publish(listing_event(result.listing))
    return ClaimResultResponse(
        claim=claim_to_response(result.claim),
        listing=listing_to_response(result.listing),
        order_id=result.order.id,
    )


@router.get("/{listing_id}/claims", response_model=List[ClaimResponse])
def listing_claims(
    listing_id: str,
    generator: UserProfile = Depends(require_role(ROLE_GENERATOR)),
    db: Session = Depends(get_db_read),
):
    """Claims against one of the caller's listings, oldest first."""
    listing = get_listing(db, listing_id)
    if listing.generator_id != generator.id:
        raise ForbiddenError("You can only view claims on your own listings")
    return [claim_to_response(c) for c in list_listing_claims(db, listing_id)]
