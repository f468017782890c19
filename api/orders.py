"""Orders API router: the caller's orders and pickup completion."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import require_role
from api.serializers import order_to_response
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from database.models import ROLE_FARMER, ROLE_GENERATOR, UserProfile
from schemas import OrderListResponse, OrderResponse
from services.orders import complete_order, list_orders

logger = get_logger("api.orders")
router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=OrderListResponse)
def my_orders(
    profile: UserProfile = Depends(require_role(ROLE_GENERATOR, ROLE_FARMER)),
    db: Session = Depends(get_db_read),
):
    """Orders the caller placed (farmer) or received (generator), newest first."""
    orders = [order_to_response(o) for o in list_orders(db, profile.id)]
    return OrderListResponse(total=len(orders), orders=orders)


@router.post("/{order_id}/complete", response_model=OrderResponse)
def mark_completed(
    order_id: str,
    generator: UserProfile = Depends(require_role(ROLE_GENERATOR)),
    db: Session = Depends(get_db_write),
):
    """Mark an order as picked up so the farmer can rate it.

    Raises:
        NotFoundError: If the order does not exist.
        ForbiddenError: If the caller is not the order's generator.
        ValidationError: If the order is not reserved.
    """
    return order_to_response(complete_order(db, order_id, generator.id))
