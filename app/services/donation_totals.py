"""
Keeps users.total_donations equal to the sum of the user's donation amounts.

The maintainer recomputes from the source rows instead of applying deltas, so
an update that changes an amount or moves a donation between users needs no
bookkeeping of old values: both affected users are simply recomputed.

All functions take the caller's session and run inside the caller's
transaction. They never commit; the donation service commits once the
donation write and the recomputation have both succeeded.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import AggregateRecomputationFailure
from app.models.donation import Donation
from app.models.user import User

logger = logging.getLogger(__name__)


def _donation_sum(user_id):
    """Correlated COALESCE(SUM(amount), 0) for one user id or column."""
    return (
        select(func.coalesce(func.sum(Donation.amount), 0))
        .where(Donation.user_id == user_id)
        .scalar_subquery()
    )


def affected_user_ids(*user_ids: Optional[int]) -> List[int]:
    """Distinct non-null ids in ascending order (the lock order)."""
    return sorted({user_id for user_id in user_ids if user_id is not None})


def recompute_user_totals(db: Session, *user_ids: Optional[int]) -> Dict[int, Decimal]:
    """
    Recompute total_donations for each given user.

    Each user row is locked before its sum is read, so concurrent donation
    writes for the same user serialize here and the sum includes whatever the
    previous lock holder committed. Ids are locked in ascending order.

    The lock is FOR NO KEY UPDATE: the flushed donation already holds
    FOR KEY SHARE on the user through its foreign key check, and a plain
    FOR UPDATE would conflict with the other writer's key share.

    Args:
        db: Session whose transaction already contains the donation write
        user_ids: Owners to recompute; None entries are ignored

    Returns:
        Mapping of user id to the freshly stored total

    Raises:
        AggregateRecomputationFailure: a user row is missing or the update failed
    """
    totals: Dict[int, Decimal] = {}

    for user_id in affected_user_ids(*user_ids):
        try:
            locked = db.execute(
                select(User.id).where(User.id == user_id).with_for_update(key_share=True)
            ).scalar_one_or_none()
            if locked is None:
                raise AggregateRecomputationFailure(
                    f"Cannot recompute donation total: user {user_id} does not exist",
                    user_id=user_id,
                )

            db.execute(
                update(User)
                .where(User.id == user_id)
                .values(total_donations=_donation_sum(user_id))
                .execution_options(synchronize_session="fetch")
            )
            total = db.execute(
                select(User.total_donations).where(User.id == user_id)
            ).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Donation total recomputation failed for user {user_id}: {e}")
            raise AggregateRecomputationFailure(
                f"Donation total recomputation failed for user {user_id}",
                user_id=user_id,
            ) from e

        totals[user_id] = Decimal(total)
        logger.info(f"Recomputed total_donations for user {user_id}: {totals[user_id]}")

    return totals


def rebuild_all_donation_totals(db: Session) -> int:
    """
    Recompute every user's total in a single statement.

    Used after raw SQL imports that bypassed the donation service. The caller
    commits.

    Returns:
        Number of user rows updated
    """
    try:
        result = db.execute(
            update(User)
            .values(total_donations=_donation_sum(User.id))
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        logger.error(f"Rebuilding donation totals failed: {e}")
        raise AggregateRecomputationFailure("Rebuilding donation totals failed") from e

    # In-session users now hold stale totals
    for obj in db.identity_map.values():
        if isinstance(obj, User):
            db.expire(obj, ["total_donations"])

    logger.info(f"Rebuilt total_donations for {result.rowcount} user(s)")
    return result.rowcount


def find_total_mismatches(db: Session) -> List[Tuple[int, Decimal, Decimal]]:
    """Return (user_id, stored_total, actual_total) for every out-of-sync user."""
    actual = _donation_sum(User.id)
    rows = db.execute(
        select(User.id, User.total_donations, actual)
        .where(User.total_donations != actual)
        .order_by(User.id)
    ).all()
    return [(user_id, Decimal(stored), Decimal(expected)) for user_id, stored, expected in rows]

