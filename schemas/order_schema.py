"""Schemas for pickup orders."""

from pydantic import BaseModel
from typing import List, Optional


class OrderResponse(BaseModel):
    id: str
    listing_id: str
    claim_id: str
    generator_id: str
    farmer_id: str
    title: str
    quantity: str
    status: str
    rating_id: Optional[str] = None
    created_at: str
    completed_at: Optional[str] = None


class OrderListResponse(BaseModel):
    total: int
    orders: List[OrderResponse]
