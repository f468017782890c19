"""Schemas for profile and role requests and responses."""

from pydantic import BaseModel, Field
from typing import Literal, Optional


class RoleAssignRequest(BaseModel):
    """Role chosen during onboarding, with optional profile details."""

    role: Literal["generator", "farmer"] = Field(..., examples=["farmer"], description="Marketplace role, set once")
    email: Optional[str] = Field(None, examples=["farm@example.com"])
    name: Optional[str] = Field(None, examples=["Green Acres Farm"])
    contact: Optional[str] = Field(None, examples=["+60 12-345 6789"])


class ProfileUpdateRequest(BaseModel):
    """Profile fields a user may change. The role is not one of them."""

    email: Optional[str] = None
    name: Optional[str] = None
    contact: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90, examples=[3.139])
    longitude: Optional[float] = Field(None, ge=-180, le=180, examples=[101.6869])
    address: Optional[str] = Field(None, examples=["Kuala Lumpur, Malaysia"])
    search_radius_km: Optional[float] = Field(None, ge=1, le=20, examples=[10], description="Farmer search radius (1-20 km)")


class LocationDetail(BaseModel):
    latitude: float
    longitude: float
    address: Optional[str] = None


class UserProfileResponse(BaseModel):
    """Profile as returned to its owner."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    contact: Optional[str] = None
    role: Optional[str] = None
    location: Optional[LocationDetail] = None
    search_radius_km: Optional[float] = None
    average_rating: Optional[float] = None
    total_ratings: Optional[int] = None
    created_at: Optional[str] = None


class RoleAssignResponse(BaseModel):
    status: Literal["assigned", "already_assigned"]
    role: str
    profile: UserProfileResponse
