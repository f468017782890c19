"""Pydantic schema package for request and response models."""

from .user_schema import RoleAssignRequest, ProfileUpdateRequest, UserProfileResponse, RoleAssignResponse
from .listing_schema import ListingCreateRequest, ListingUpdateRequest, ListingResponse, FeedListing, FeedResponse
from .claim_schema import ClaimCreateRequest, ClaimResponse, ClaimResultResponse
from .order_schema import OrderResponse, OrderListResponse
from .rating_schema import RatingCreateRequest, RatingResponse, GeneratorRatingResponse
from .geocode_schema import ReverseGeocodeRequest, ReverseGeocodeResponse

__all__ = [
    "RoleAssignRequest",
    "ProfileUpdateRequest",
    "UserProfileResponse",
    "RoleAssignResponse",
    "ListingCreateRequest",
    "ListingUpdateRequest",
    "ListingResponse",
    "FeedListing",
    "FeedResponse",
    "ClaimCreateRequest",
    "ClaimResponse",
    "ClaimResultResponse",
    "OrderResponse",
    "OrderListResponse",
    "RatingCreateRequest",
    "RatingResponse",
    "GeneratorRatingResponse",
    "ReverseGeocodeRequest",
    "ReverseGeocodeResponse",
]
