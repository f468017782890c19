"""Pickup orders created by claims."""

from datetime import datetime
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.exceptions import ForbiddenError, ValidationError
from core.logger import get_logger
from core.repository import get_or_404, save
from database.models import Order, ORDER_COMPLETED, ORDER_RESERVED

logger = get_logger("services.orders")


def get_order(session: Session, order_id: str) -> Order:
    return get_or_404(session, Order, order_id, "Order")


def list_orders(session: Session, user_id: str) -> List[Order]:
    """Orders where the user is either the farmer or the generator, newest first."""
    return (
        session.query(Order)
        .filter(or_(Order.farmer_id == user_id, Order.generator_id == user_id))
        .order_by(Order.created_at.desc())
        .all()
    )


def complete_order(session: Session, order_id: str, generator_id: str) -> Order:
    """Mark a reserved order as picked up. Only the listing's generator may do this."""
    order = get_order(session, order_id)
    if order.generator_id != generator_id:
        raise ForbiddenError("Only the generator of this listing can complete the order")
    if order.status != ORDER_RESERVED:
        raise ValidationError(f"Order is already {order.status}", field="status")

    order.status = ORDER_COMPLETED
    order.completed_at = datetime.utcnow()
    order = save(session, order)
    logger.info("Order %s completed by %s", order.id, generator_id)
    return order
