"""Schemas for claims."""

from pydantic import BaseModel, Field
from typing import Optional

from .listing_schema import ListingResponse


class ClaimCreateRequest(BaseModel):
    """Quantity to claim. Leave empty to take everything still available."""

    quantity: Optional[str] = Field(None, examples=["5 kg"], description="Amount to claim, defaults to the full remaining quantity")


class ClaimResponse(BaseModel):
    id: str
    listing_id: str
    claimer_id: str
    claimer_name: Optional[str] = None
    claimer_contact: Optional[str] = None
    quantity: str
    created_at: str


class ClaimResultResponse(BaseModel):
    """Outcome of a successful claim."""

    claim: ClaimResponse
    listing: ListingResponse
    order_id: str
