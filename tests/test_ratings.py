"""Tests for order completion, rating submission and aggregation."""
import pytest
from sqlalchemy.exc import SQLAlchemyError

import services.ratings as ratings_service
from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from database.models import Order, Rating, UserProfile, ORDER_COMPLETED
from services.claims import ClaimerInfo, claim_listing
from services.orders import complete_order, list_orders
from services.ratings import average_rating, recompute_generator_rating, submit_rating


def _completed_order(db, listing, farmer, quantity="1 kg"):
    result = claim_listing(db, listing.id, farmer.id, ClaimerInfo(farmer.name), quantity)
    return complete_order(db, result.order.id, listing.generator_id)


def test_average_of_five_four_three_is_four():
    assert average_rating([5, 4, 3]) == (4.0, 3)


def test_average_without_ratings_is_zero():
    assert average_rating([]) == (0.0, 0)


def test_average_rounds_half_up_to_one_decimal():
    assert average_rating([5, 4, 4, 4]) == (4.3, 4)  # 4.25
    assert average_rating([5, 5, 4]) == (4.7, 3)  # 4.666...


def test_complete_order_only_by_its_generator(db, listing, farmer):
    result = claim_listing(db, listing.id, farmer.id, ClaimerInfo(), "1 kg")

    with pytest.raises(ForbiddenError):
        complete_order(db, result.order.id, farmer.id)

    order = complete_order(db, result.order.id, listing.generator_id)
    assert order.status == ORDER_COMPLETED
    assert order.completed_at is not None

    with pytest.raises(ValidationError):
        complete_order(db, result.order.id, listing.generator_id)


def test_list_orders_for_both_sides(db, listing, farmer, second_farmer):
    claim_listing(db, listing.id, farmer.id, ClaimerInfo(), "1 kg")
    claim_listing(db, listing.id, second_farmer.id, ClaimerInfo(), "2 kg")

    assert len(list_orders(db, farmer.id)) == 1
    assert len(list_orders(db, listing.generator_id)) == 2


def test_ratings_update_generator_average(db, listing, farmer, second_farmer, generator):
    for stars in (5, 4, 3):
        order = _completed_order(db, listing, farmer)
        submit_rating(db, order.id, farmer.id, stars, "ok")

    db.expire_all()
    profile = db.get(UserProfile, generator.id)
    assert profile.average_rating == 4.0
    assert profile.total_ratings == 3


def test_rating_is_linked_to_order(db, listing, farmer):
    order = _completed_order(db, listing, farmer)

    rating = submit_rating(db, order.id, farmer.id, 5, "  Great produce  ")

    assert db.get(Order, order.id).rating_id == rating.id
    assert rating.comment == "Great produce"
    assert rating.listing_id == listing.id
    assert rating.generator_id == listing.generator_id


def test_second_rating_for_same_order_is_rejected(db, listing, farmer):
    order = _completed_order(db, listing, farmer)
    submit_rating(db, order.id, farmer.id, 4)

    with pytest.raises(ConflictError):
        submit_rating(db, order.id, farmer.id, 1)
    assert db.query(Rating).count() == 1


def test_rating_requires_existing_completed_order_of_the_farmer(db, listing, farmer, second_farmer):
    with pytest.raises(NotFoundError):
        submit_rating(db, "no-such-order", farmer.id, 5)

    reserved = claim_listing(db, listing.id, farmer.id, ClaimerInfo(), "1 kg").order
    with pytest.raises(ValidationError):
        submit_rating(db, reserved.id, farmer.id, 5)

    completed = complete_order(db, reserved.id, listing.generator_id)
    with pytest.raises(ForbiddenError):
        submit_rating(db, completed.id, second_farmer.id, 5)


@pytest.mark.parametrize("stars", [0, 6, -1])
def test_stars_out_of_range_are_rejected(db, listing, farmer, stars):
    order = _completed_order(db, listing, farmer)
    with pytest.raises(ValidationError):
        submit_rating(db, order.id, farmer.id, stars)


def test_failed_recompute_keeps_the_rating(db, listing, farmer, generator, monkeypatch):
    order = _completed_order(db, listing, farmer)

    def broken_recompute(session, generator_id):
        raise SQLAlchemyError("aggregate write failed")

    monkeypatch.setattr(ratings_service, "recompute_generator_rating", broken_recompute)
    rating = submit_rating(db, order.id, farmer.id, 2)

    assert db.get(Rating, rating.id) is not None
    assert db.get(UserProfile, generator.id).total_ratings is None

    # A later reconcile pass repairs the aggregate.
    assert recompute_generator_rating(db, generator.id) == (2.0, 1)
