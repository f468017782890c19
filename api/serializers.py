"""Conversion of ORM rows into response schemas."""

from typing import Optional

from database import models
from schemas import (
    ClaimResponse,
    FeedListing,
    ListingResponse,
    OrderResponse,
    RatingResponse,
    UserProfileResponse,
)
from schemas.user_schema import LocationDetail


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def listing_to_response(listing: models.Listing) -> ListingResponse:
    return ListingResponse(
        id=listing.id,
        generator_id=listing.generator_id,
        generator_name=listing.generator_name,
        generator_contact=listing.generator_contact,
        title=listing.title,
        quantity=listing.quantity,
        remaining_quantity=listing.remaining_quantity,
        address=listing.address,
        latitude=listing.latitude,
        longitude=listing.longitude,
        image_url=listing.image_url,
        status=listing.status,
        created_at=_iso(listing.created_at),
    )


def feed_listing(listing: models.Listing, distance_km: Optional[float]) -> FeedListing:
    return FeedListing(
        **listing_to_response(listing).model_dump(),
        distance_km=round(distance_km, 2) if distance_km is not None else None,
    )


def claim_to_response(claim: models.Claim) -> ClaimResponse:
    return ClaimResponse(
        id=claim.id,
        listing_id=claim.listing_id,
        claimer_id=claim.claimer_id,
        claimer_name=claim.claimer_name,
        claimer_contact=claim.claimer_contact,
        quantity=claim.quantity,
        created_at=_iso(claim.created_at),
    )


def order_to_response(order: models.Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        listing_id=order.listing_id,
        claim_id=order.claim_id,
        generator_id=order.generator_id,
        farmer_id=order.farmer_id,
        title=order.title,
        quantity=order.quantity,
        status=order.status,
        rating_id=order.rating_id,
        created_at=_iso(order.created_at),
        completed_at=_iso(order.completed_at),
    )


def rating_to_response(rating: models.Rating) -> RatingResponse:
    return RatingResponse(
        id=rating.id,
        order_id=rating.order_id,
        listing_id=rating.listing_id,
        generator_id=rating.generator_id,
        farmer_id=rating.farmer_id,
        rating=rating.rating,
        comment=rating.comment,
        created_at=_iso(rating.created_at),
    )


def profile_to_response(profile: models.UserProfile) -> UserProfileResponse:
    location = None
    if profile.latitude is not None and profile.longitude is not None:
        location = LocationDetail(latitude=profile.latitude, longitude=profile.longitude, address=profile.address)
    return UserProfileResponse(
        id=profile.id,
        email=profile.email,
        name=profile.name,
        contact=profile.contact,
        role=profile.role,
        location=location,
        search_radius_km=profile.search_radius_km,
        average_rating=profile.average_rating,
        total_ratings=profile.total_ratings,
        created_at=_iso(profile.created_at),
    )
