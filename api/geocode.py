"""Reverse-geocoding endpoint.

Answers with ``{"address", "latitude", "longitude"}`` or a flat
``{"error": "..."}`` body: 400 for missing coordinates or an upstream
failure, 500 for misconfiguration or an unexpected exception.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_geocoder
from core.exceptions import ConfigurationError, UpstreamServiceError
from core.logger import get_logger
from schemas import ReverseGeocodeRequest, ReverseGeocodeResponse
from services.geocoder import ReverseGeocoder

logger = get_logger("api.geocode")
router = APIRouter(prefix="/api", tags=["geocoding"])


@router.post("/reverse-geocode", response_model=ReverseGeocodeResponse)
def reverse_geocode(payload: ReverseGeocodeRequest, geocoder: ReverseGeocoder = Depends(get_geocoder)):
    if payload.latitude is None or payload.longitude is None:
        return JSONResponse(status_code=400, content={"error": "Latitude and longitude are required"})

    try:
        address = geocoder.reverse_geocode(payload.latitude, payload.longitude)
    except ConfigurationError as exc:
        return JSONResponse(status_code=500, content={"error": exc.message})
    except UpstreamServiceError as exc:
        return JSONResponse(status_code=400, content={"error": exc.message})
    except Exception:
        logger.exception("Reverse geocoding error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return ReverseGeocodeResponse(address=address, latitude=payload.latitude, longitude=payload.longitude)
