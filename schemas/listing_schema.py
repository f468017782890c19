"""Schemas for listings and the farmer feed."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ListingCreateRequest(BaseModel):
    """Payload a generator submits to publish surplus food."""

    title: str = Field(..., min_length=1, examples=["Vegetable trimmings"])
    quantity: str = Field(..., min_length=1, examples=["20 kg"], description="Amount with unit, e.g. '20 kg' or '10 servings'")
    address: str = Field(..., min_length=1, examples=["Jalan Bukit Bintang, Kuala Lumpur"])
    latitude: float = Field(..., ge=-90, le=90, examples=[3.15])
    longitude: float = Field(..., ge=-180, le=180, examples=[101.7])
    image_url: Optional[str] = Field(None, examples=["https://example.com/trimmings.jpg"])


class ListingUpdateRequest(BaseModel):
    """Fields a generator may change on an active listing. Quantities are not editable."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, examples=["Vegetable trimmings"])
    address: Optional[str] = Field(None, min_length=1, examples=["Jalan Bukit Bintang, Kuala Lumpur"])
    latitude: Optional[float] = Field(None, ge=-90, le=90, examples=[3.15])
    longitude: Optional[float] = Field(None, ge=-180, le=180, examples=[101.7])
    image_url: Optional[str] = None


class ListingResponse(BaseModel):
    id: str
    generator_id: str
    generator_name: Optional[str] = None
    generator_contact: Optional[str] = None
    title: str
    quantity: str
    remaining_quantity: str
    address: str
    latitude: float
    longitude: float
    image_url: Optional[str] = None
    status: str
    created_at: str


class FeedListing(ListingResponse):
    """Listing in a farmer's feed with its distance from the farmer."""

    distance_km: Optional[float] = None


class FeedResponse(BaseModel):
    count: int
    radius_km: Optional[float] = Field(None, description="Radius applied; null when no location is set and all listings are shown")
    listings: List[FeedListing]
