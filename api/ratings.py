"""Ratings API router.

Farmers rate completed orders; anyone signed in can read a generator's
aggregate. The recompute endpoint re-derives a generator's aggregate
when an earlier recompute failed.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import require_role, require_user
from api.serializers import rating_to_response
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from database.models import ROLE_FARMER, ROLE_GENERATOR, UserProfile
from schemas import GeneratorRatingResponse, RatingCreateRequest, RatingResponse
from services.ratings import generator_rating, recompute_generator_rating, submit_rating

logger = get_logger("api.ratings")
router = APIRouter(prefix="/api", tags=["ratings"])


@router.post("/ratings", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
def rate_order(
    payload: RatingCreateRequest,
    farmer: UserProfile = Depends(require_role(ROLE_FARMER)),
    db: Session = Depends(get_db_write),
):
    """Rate a completed order and refresh the generator's average.

    Raises:
        NotFoundError: If the order does not exist.
        ConflictError: If the order was already rated.
    """
    rating = submit_rating(db, payload.order_id, farmer.id, payload.rating, payload.comment)
    return rating_to_response(rating)


@router.get("/generators/{generator_id}/rating", response_model=GeneratorRatingResponse)
def read_generator_rating(generator_id: str, user_id: str = Depends(require_user), db: Session = Depends(get_db_read)):
    average, count = generator_rating(db, generator_id)
    return GeneratorRatingResponse(generator_id=generator_id, average_rating=average, total_ratings=count)


@router.post("/generators/me/rating/recompute", response_model=GeneratorRatingResponse)
def recompute_my_rating(
    generator: UserProfile = Depends(require_role(ROLE_GENERATOR)),
    db: Session = Depends(get_db_write),
):
    generator_id = generator.id
    average, count = recompute_generator_rating(db, generator_id)
    return GeneratorRatingResponse(generator_id=generator_id, average_rating=average, total_ratings=count)
