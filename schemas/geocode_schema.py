"""Schemas for the reverse-geocoding endpoint."""

from pydantic import BaseModel
from typing import Optional


class ReverseGeocodeRequest(BaseModel):
    # Both optional so a missing coordinate is answered with 400, not 422.
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ReverseGeocodeResponse(BaseModel):
    address: str
    latitude: float
    longitude: float
