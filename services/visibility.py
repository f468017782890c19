"""Listing visibility for farmers.

A farmer sees the listings inside their search radius around their home
location. When either is missing the filter fails open and every listing
is visible.
"""

from typing import Iterable, List, Optional, Tuple, TypeVar

from core.config import DEFAULT_SEARCH_RADIUS_KM
from core.logger import get_logger
from services.geo import distance_km

logger = get_logger("services.visibility")

Coordinate = Tuple[float, float]
L = TypeVar("L")


def visible_listings(
    listings: Iterable[L],
    farmer_location: Optional[Coordinate],
    radius_km: Optional[float],
) -> List[L]:
    """Return the listings within `radius_km` of `farmer_location`.

    Listings are any objects exposing `latitude` and `longitude`. The input
    order is preserved.
    """
    listings = list(listings)
    if farmer_location is None or radius_km is None:
        return listings

    lat, lon = farmer_location
    visible = [
        listing for listing in listings
        if distance_km(lat, lon, listing.latitude, listing.longitude) <= radius_km
    ]
    logger.debug("%s of %s listings within %s km", len(visible), len(listings), radius_km)
    return visible


def sort_by_distance(listings: Iterable[L], origin: Optional[Coordinate]) -> List[Tuple[L, Optional[float]]]:
    """Pair each listing with its distance from `origin`, nearest first.

    Without an origin the distances are None and the order is unchanged.
    """
    if origin is None:
        return [(listing, None) for listing in listings]
    lat, lon = origin
    ranked = [(listing, distance_km(lat, lon, listing.latitude, listing.longitude)) for listing in listings]
    ranked.sort(key=lambda pair: pair[1])
    return ranked


def farmer_search_area(profile) -> Tuple[Optional[Coordinate], Optional[float]]:
    """Resolve a profile's search centre and radius.

    A profile without a location has no search area. A located farmer with
    no configured radius gets the default radius.
    """
    if profile is None or profile.latitude is None or profile.longitude is None:
        return None, None
    radius = profile.search_radius_km if profile.search_radius_km else DEFAULT_SEARCH_RADIUS_KM
    return (profile.latitude, profile.longitude), radius
