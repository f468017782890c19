"""Schemas for ratings and generator rating aggregates."""

from pydantic import BaseModel, Field
from typing import Optional


class RatingCreateRequest(BaseModel):
    """Payload for rating a completed order."""

    order_id: str = Field(..., examples=["3f2c9a..."], description="Completed order being rated")
    rating: int = Field(..., ge=1, le=5, examples=[4], description="Stars from 1 (poor) to 5 (excellent)")
    comment: Optional[str] = Field(None, max_length=2000, examples=["Clean and well packed"])


class RatingResponse(BaseModel):
    id: str
    order_id: str
    listing_id: str
    generator_id: str
    farmer_id: str
    rating: int
    comment: Optional[str] = None
    created_at: str


class GeneratorRatingResponse(BaseModel):
    generator_id: str
    average_rating: float
    total_ratings: int
