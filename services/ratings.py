"""Rating submission and generator rating aggregation.

A farmer rates a completed order once. The generator's average rating is
then recomputed from all of their ratings. The recompute runs after the
rating has been committed; if it fails the rating stands and the
aggregate is left stale until `recompute_generator_rating` runs again.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import AppException, ConflictError, ForbiddenError, ValidationError
from core.logger import get_logger
from core.repository import get_or_404
from database.models import Order, Rating, UserProfile, new_id, ORDER_COMPLETED

logger = get_logger("services.ratings")

MIN_STARS = 1
MAX_STARS = 5


def average_rating(values: Iterable[int]) -> Tuple[float, int]:
    """Mean of `values` rounded half-up to one decimal, with the count.

    An empty input gives ``(0.0, 0)``.
    """
    values = list(values)
    if not values:
        return 0.0, 0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)), len(values)


def recompute_generator_rating(session: Session, generator_id: str) -> Tuple[float, int]:
    """Store the generator's current average rating and rating count."""
    profile = get_or_404(session, UserProfile, generator_id, "UserProfile")
    rows = session.query(Rating.rating).filter(Rating.generator_id == generator_id).all()
    average, count = average_rating(row.rating for row in rows)

    profile.average_rating = average
    profile.total_ratings = count
    session.commit()
    logger.info("Generator %s rating recomputed: %s over %s ratings", generator_id, average, count)
    return average, count


def submit_rating(
    session: Session,
    order_id: str,
    farmer_id: str,
    stars: int,
    comment: Optional[str] = None,
) -> Rating:
    """Record `farmer_id`'s rating of a completed order.

    Raises:
        ValidationError: Stars outside 1-5 or the order is not completed.
        NotFoundError: The order does not exist.
        ForbiddenError: The farmer did not place the order.
        ConflictError: The order has already been rated.
    """
    if not MIN_STARS <= stars <= MAX_STARS:
        raise ValidationError(f"Rating must be between {MIN_STARS} and {MAX_STARS}", field="rating")

    order = get_or_404(session, Order, order_id, "Order")
    if order.farmer_id != farmer_id:
        raise ForbiddenError("Only the farmer who placed the order can rate it")
    if order.status != ORDER_COMPLETED:
        raise ValidationError("Only completed orders can be rated", field="order_id")
    if order.rating_id:
        raise ConflictError("This order has already been rated", details={"rating_id": order.rating_id})

    rating = Rating(
        id=new_id(),
        order_id=order.id,
        listing_id=order.listing_id,
        generator_id=order.generator_id,
        farmer_id=farmer_id,
        rating=stars,
        comment=(comment or "").strip() or None,
    )
    session.add(rating)
    order.rating_id = rating.id
    try:
        session.commit()
    except IntegrityError:
        # ratings.order_id is unique: a concurrent submission won.
        session.rollback()
        raise ConflictError("This order has already been rated", details={"order_id": order_id})
    logger.info("Rating %s (%s stars) submitted for order %s", rating.id, stars, order_id)

    try:
        recompute_generator_rating(session, rating.generator_id)
    except (SQLAlchemyError, AppException):
        session.rollback()
        logger.exception("Rating %s saved but generator %s aggregate was not updated", rating.id, rating.generator_id)

    return rating


def generator_rating(session: Session, generator_id: str) -> Tuple[float, int]:
    """Stored aggregate for a generator, zeros when nothing was recorded yet."""
    profile = get_or_404(session, UserProfile, generator_id, "UserProfile")
    return profile.average_rating or 0.0, profile.total_ratings or 0
