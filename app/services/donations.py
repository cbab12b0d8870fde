"""
The only sanctioned write path for donation rows.

record_donation, amend_donation and remove_donation each run the donation
write and the owner's total recomputation in one transaction and commit them
together. Session listeners reject any ORM flush or bulk statement that
touches a Donation outside these functions, so a forgotten recomputation fails loudly instead of
silently desynchronizing users.total_donations.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    AggregateRecomputationFailure,
    ConstraintViolation,
    RecordNotFound,
    translate_data_error,
    translate_integrity_error,
)
from app.models.donation import Donation, MANAGED_WRITE_KEY
from app.services.donation_totals import recompute_user_totals

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")

AMENDABLE_FIELDS = frozenset({
    "user_id",
    "amount",
    "donation_number",
    "donor_name",
    "donor_email",
    "message",
    "donation_date",
})


@contextmanager
def managed_donation_write(db: Session):
    """Mark the session so the flush guard lets donation writes through."""
    db.info[MANAGED_WRITE_KEY] = True
    try:
        yield db
    finally:
        db.info.pop(MANAGED_WRITE_KEY, None)


@contextmanager
def _donation_transaction(db: Session, action: str):
    """
    Run a donation write plus recomputation, then commit.

    Any failure rolls the session back. Integrity and data errors come out as
    the matching ParticipantDataError; other database errors are re-raised
    unchanged after the rollback.
    """
    try:
        with managed_donation_write(db):
            yield
        db.commit()
    except AggregateRecomputationFailure:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Donation {action} rejected by the database: {e.orig}")
        raise translate_integrity_error(e) from e
    except DataError as e:
        db.rollback()
        logger.error(f"Donation {action} rejected by the database: {e.orig}")
        raise translate_data_error(e) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Donation {action} failed: {e}")
        raise


def _normalize_amount(amount: Any) -> Decimal:
    """Coerce to Decimal and check it fits NUMERIC(10, 2)."""
    if amount is None:
        raise ConstraintViolation("Donation amount is required")
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ConstraintViolation(f"Invalid donation amount: {amount!r}") from e
    if not value.is_finite() or abs(value) > MAX_AMOUNT or value != value.quantize(CENT):
        raise ConstraintViolation(f"Donation amount out of range for NUMERIC(10, 2): {amount!r}")
    return value


def record_donation(
    db: Session,
    amount: Any,
    user_id: Optional[int] = None,
    donor_name: Optional[str] = None,
    donor_email: Optional[str] = None,
    message: Optional[str] = None,
    donation_date: Optional[datetime] = None,
    donation_number: Optional[int] = None,
) -> Donation:
    """
    Insert a donation and update its owner's total atomically.

    Args:
        db: Database session; committed on success, rolled back on failure
        amount: Donation amount, anything Decimal accepts
        user_id: Owning user, or None for an anonymous gift

    Returns:
        The persisted donation

    Raises:
        ReferentialError: user_id does not reference an existing user
        ConstraintViolation: amount missing or otherwise rejected
        AggregateRecomputationFailure: the owner's total could not be recomputed
    """
    donation = Donation(
        user_id=user_id,
        amount=_normalize_amount(amount),
        donor_name=donor_name,
        donor_email=donor_email,
        message=message,
        donation_date=donation_date,
        donation_number=donation_number,
    )

    with _donation_transaction(db, "insert"):
        db.add(donation)
        db.flush()
        recompute_user_totals(db, donation.user_id)

    db.refresh(donation)
    logger.info(f"Donation recorded: id={donation.id} user_id={donation.user_id} amount={donation.amount}")
    return donation


def get_donation(db: Session, donation_id: int) -> Donation:
    donation = db.get(Donation, donation_id)
    if donation is None:
        raise RecordNotFound(f"Donation {donation_id} not found")
    return donation


def amend_donation(db: Session, donation_id: int, **changes: Any) -> Donation:
    """
    Update a donation and recompute every affected owner.

    When user_id changes, both the previous and the new owner are recomputed,
    so the gift leaves one total and joins the other in the same transaction.

    Raises:
        RecordNotFound: no donation with that id
        ConstraintViolation: an unknown field was passed
        ReferentialError: the new user_id does not reference an existing user
        AggregateRecomputationFailure: a total could not be recomputed
    """
    unknown = set(changes) - AMENDABLE_FIELDS
    if unknown:
        raise ConstraintViolation(f"Cannot amend donation field(s): {', '.join(sorted(unknown))}")
    if "amount" in changes:
        changes["amount"] = _normalize_amount(changes["amount"])

    donation = get_donation(db, donation_id)
    previous_user_id = donation.user_id

    with _donation_transaction(db, "update"):
        for field, value in changes.items():
            setattr(donation, field, value)
        db.flush()
        recompute_user_totals(db, previous_user_id, donation.user_id)

    db.refresh(donation)
    logger.info(
        f"Donation amended: id={donation.id} user_id={previous_user_id}->{donation.user_id} "
        f"amount={donation.amount}"
    )
    return donation


def remove_donation(db: Session, donation_id: int) -> None:
    """Delete a donation and take its amount out of the former owner's total."""
    donation = get_donation(db, donation_id)
    previous_user_id = donation.user_id

    with _donation_transaction(db, "delete"):
        db.delete(donation)
        db.flush()
        recompute_user_totals(db, previous_user_id)

    logger.info(f"Donation removed: id={donation_id} user_id={previous_user_id}")


def list_donations(db: Session, user_id: Optional[int] = None, skip: int = 0, limit: int = 100) -> List[Donation]:
    """Donations newest first, with the owning user eagerly loaded."""
    query = select(Donation).options(joinedload(Donation.user)).order_by(Donation.created_at.desc(), Donation.id.desc())
    if user_id is not None:
        query = query.where(Donation.user_id == user_id)
    return list(db.execute(query.offset(skip).limit(limit)).scalars().all())


def donation_summary(db: Session) -> Dict[str, Any]:
    """Headline numbers for the admin donations page."""
    donations = db.execute(select(Donation.amount, Donation.user_id)).all()
    total = sum((Decimal(amount) for amount, _ in donations), Decimal("0"))
    anonymous = sum(1 for _, user_id in donations if user_id is None)
    return {
        "count": len(donations),
        "total_amount": total,
        "anonymous_count": anonymous,
    }
