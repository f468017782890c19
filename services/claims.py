"""Claim lifecycle: record a farmer's claim against a listing.

A claim, the listing's recomputed remaining quantity and status, and the
pickup order are written in one transaction. The listing UPDATE is
conditioned on the version that was read (SQLAlchemy `version_id_col`),
so two farmers racing for the same stock cannot both commit against the
same remaining quantity. The loser's transaction is rolled back and the
whole claim is re-evaluated against fresh state.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from core.config import CLAIM_MAX_RETRIES
from core.exceptions import ConflictError, ValidationError
from core.logger import get_logger
from core.repository import get_or_404
from database.models import Claim, Listing, Order, LISTING_ACTIVE, LISTING_CLAIMED, ORDER_RESERVED
from services.quantity import (
    Quantity,
    ZERO,
    format_quantity,
    parse_positive_quantity,
    parse_quantity,
    remaining_quantity,
)

logger = get_logger("services.claims")


@dataclass
class ClaimerInfo:
    name: Optional[str] = None
    contact: Optional[str] = None


@dataclass
class ClaimResult:
    claim: Claim
    listing: Listing
    order: Order


def claimed_amounts(session: Session, listing_id: str) -> List:
    rows = session.query(Claim.quantity).filter(Claim.listing_id == listing_id).all()
    return [parse_quantity(row.quantity).amount for row in rows]


def _apply_claim(
    session: Session,
    listing_id: str,
    claimer_id: str,
    claimer: ClaimerInfo,
    requested: Optional[Quantity],
) -> ClaimResult:
    listing = get_or_404(session, Listing, listing_id, "Listing")

    if listing.generator_id == claimer_id:
        raise ValidationError("You cannot claim your own listing", field="listing_id")
    if listing.status != LISTING_ACTIVE:
        raise ValidationError("This listing has already been fully claimed", field="listing_id")

    original = parse_quantity(listing.quantity)
    available = remaining_quantity(original, claimed_amounts(session, listing.id))
    if available <= ZERO:
        raise ValidationError("This listing has already been fully claimed", field="listing_id")

    if requested is None:
        amount = available
    else:
        if requested.unit and original.unit and not requested.same_unit(original):
            raise ValidationError(
                f"Quantity must be given in '{original.unit}', got '{requested.unit}'",
                field="quantity",
            )
        amount = requested.amount
    if amount > available:
        raise ValidationError(
            f"Cannot claim {format_quantity(amount, original.unit)}. "
            f"Only {format_quantity(available, original.unit)} available.",
            field="quantity",
        )

    claim = Claim(
        listing_id=listing.id,
        claimer_id=claimer_id,
        claimer_name=claimer.name,
        claimer_contact=claimer.contact,
        quantity=format_quantity(amount, original.unit),
    )
    session.add(claim)

    left = available - amount
    listing.remaining_quantity = format_quantity(left, original.unit)
    if left <= ZERO:
        listing.status = LISTING_CLAIMED

    # Flushing issues the versioned listing UPDATE and assigns the claim id.
    session.flush()

    order = Order(
        listing_id=listing.id,
        claim_id=claim.id,
        generator_id=listing.generator_id,
        farmer_id=claimer_id,
        title=listing.title,
        quantity=claim.quantity,
        status=ORDER_RESERVED,
    )
    session.add(order)
    return ClaimResult(claim=claim, listing=listing, order=order)


def claim_listing(
    session: Session,
    listing_id: str,
    claimer_id: str,
    claimer: ClaimerInfo,
    quantity: Optional[str] = None,
    max_attempts: int = CLAIM_MAX_RETRIES,
) -> ClaimResult:
    """Claim `quantity` of a listing for `claimer_id`.

    Omitting `quantity` claims everything that is still available.

    Raises:
        ValidationError: Unreadable or non-positive quantity, own listing,
            fully claimed listing, unit mismatch or more than remains.
        NotFoundError: The listing does not exist.
        ConflictError: Every attempt lost a concurrent update race.
    """
    requested = parse_positive_quantity(quantity) if quantity is not None else None

    attempt = 0
    while True:
        attempt += 1
        try:
            result = _apply_claim(session, listing_id, claimer_id, claimer, requested)
            session.commit()
        except StaleDataError:
            session.rollback()
            if attempt >= max_attempts:
                logger.error("Claim on %s by %s failed after %s attempts", listing_id, claimer_id, attempt)
                raise ConflictError(
                    "The listing changed while claiming; please try again",
                    details={"listing_id": listing_id},
                )
            logger.warning("Concurrent update on listing %s; retrying claim (attempt %s)", listing_id, attempt + 1)
            continue
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Claim %s: %s claimed %s of listing %s, %s remaining",
            result.claim.id, claimer_id, result.claim.quantity, listing_id, result.listing.remaining_quantity,
        )
        return result


def list_listing_claims(session: Session, listing_id: str) -> List[Claim]:
    return (
        session.query(Claim)
        .filter(Claim.listing_id == listing_id)
        .order_by(Claim.created_at)
        .all()
    )


def list_farmer_claims(session: Session, farmer_id: str) -> List[Claim]:
    return (
        session.query(Claim)
        .filter(Claim.claimer_id == farmer_id)
        .order_by(Claim.created_at.desc())
        .all()
    )
