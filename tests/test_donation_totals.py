"""users.total_donations stays equal to the sum of the user's donations."""
from decimal import Decimal

import pytest
from sqlalchemy import delete, insert, text, update
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    AggregateRecomputationFailure,
    ConstraintViolation,
    RecordNotFound,
    ReferentialError,
    UnmanagedDonationWrite,
)
from app.models.donation import Donation
from app.models.user import User
from app.services import donations as donation_service
from app.services.donation_totals import (
    find_total_mismatches,
    rebuild_all_donation_totals,
    recompute_user_totals,
)
from app.services.users import delete_user


def total(db, user_id):
    db.expire_all()
    return Decimal(db.get(User, user_id).total_donations)


def test_new_user_starts_at_zero(db, user):
    assert total(db, user.id) == Decimal("0")


def test_inserts_accumulate(db, user):
    donation_service.record_donation(db, amount=100, user_id=user.id)
    assert total(db, user.id) == Decimal("100")

    donation_service.record_donation(db, amount="50.00", user_id=user.id)
    assert total(db, user.id) == Decimal("150")


def test_amount_update_recomputes(db, user):
    first = donation_service.record_donation(db, amount=100, user_id=user.id)
    second = donation_service.record_donation(db, amount=50, user_id=user.id)

    donation_service.amend_donation(db, second.id, amount=30)
    assert total(db, user.id) == Decimal("130")

    donation_service.amend_donation(db, first.id, amount=50)
    assert total(db, user.id) == Decimal("80")


def test_reassignment_updates_both_users(db, user, other_user):
    donation_service.record_donation(db, amount=100, user_id=user.id)
    moved = donation_service.record_donation(db, amount=30, user_id=user.id)
    assert total(db, user.id) == Decimal("130")

    donation_service.amend_donation(db, moved.id, user_id=other_user.id)

    assert total(db, user.id) == Decimal("100")
    assert total(db, other_user.id) == Decimal("30")


def test_reassignment_to_anonymous(db, user):
    donation = donation_service.record_donation(db, amount=40, user_id=user.id)
    donation_service.amend_donation(db, donation.id, user_id=None)
    assert total(db, user.id) == Decimal("0")


def test_delete_recomputes_former_owner(db, user):
    donation_service.record_donation(db, amount=100, user_id=user.id)
    donation = donation_service.record_donation(db, amount=50, user_id=user.id)

    donation_service.remove_donation(db, donation.id)
    assert total(db, user.id) == Decimal("100")


def test_anonymous_donation_touches_no_user(db, user):
    donation = donation_service.record_donation(db, amount=75)
    assert donation.user_id is None
    assert total(db, user.id) == Decimal("0")


def test_user_delete_keeps_donation_anonymous(db, user):
    donation = donation_service.record_donation(db, amount=25, user_id=user.id)

    delete_user(db, user.id)

    db.expire_all()
    kept = db.get(Donation, donation.id)
    assert kept is not None
    assert kept.user_id is None
    assert kept.amount == Decimal("25")


def test_unknown_user_is_referential_error(db, user):
    with pytest.raises(ReferentialError):
        donation_service.record_donation(db, amount=10, user_id=user.id + 999)
    assert db.query(Donation).count() == 0


def test_missing_amount_rejected(db, user):
    with pytest.raises(ConstraintViolation):
        donation_service.record_donation(db, amount=None, user_id=user.id)
    with pytest.raises(ConstraintViolation):
        donation_service.record_donation(db, amount="ten", user_id=user.id)


def test_amount_must_fit_numeric_10_2(db, user):
    with pytest.raises(ConstraintViolation):
        donation_service.record_donation(db, amount="123456789012", user_id=user.id)
    with pytest.raises(ConstraintViolation):
        donation_service.record_donation(db, amount="10.005", user_id=user.id)

    # The session is still usable afterwards
    donation_service.record_donation(db, amount="99999999.99", user_id=user.id)
    assert total(db, user.id) == Decimal("99999999.99")


def test_recompute_failure_rolls_back_the_donation(db, user, monkeypatch):
    donation_service.record_donation(db, amount=100, user_id=user.id)

    def fail(session, *user_ids):
        raise AggregateRecomputationFailure("boom", user_id=user_ids[0])

    monkeypatch.setattr(donation_service, "recompute_user_totals", fail)

    with pytest.raises(AggregateRecomputationFailure):
        donation_service.record_donation(db, amount=50, user_id=user.id)

    assert db.query(Donation).count() == 1
    assert total(db, user.id) == Decimal("100")


def test_recompute_failure_rolls_back_an_amendment(db, user, monkeypatch):
    donation = donation_service.record_donation(db, amount=100, user_id=user.id)

    def fail(session, *user_ids):
        raise AggregateRecomputationFailure("boom")

    monkeypatch.setattr(donation_service, "recompute_user_totals", fail)

    with pytest.raises(AggregateRecomputationFailure):
        donation_service.amend_donation(db, donation.id, amount=5)

    db.expire_all()
    assert db.get(Donation, donation.id).amount == Decimal("100")
    assert total(db, user.id) == Decimal("100")


def test_recompute_missing_user_raises(db):
    with pytest.raises(AggregateRecomputationFailure) as excinfo:
        recompute_user_totals(db, 4242)
    assert excinfo.value.user_id == 4242


def test_amend_rejects_unknown_fields(db, user):
    donation = donation_service.record_donation(db, amount=10, user_id=user.id)
    with pytest.raises(ConstraintViolation):
        donation_service.amend_donation(db, donation.id, created_at=None)


def test_amend_missing_donation(db):
    with pytest.raises(RecordNotFound):
        donation_service.amend_donation(db, 999, amount=1)


def test_unmanaged_insert_is_rejected(db, user):
    db.add(Donation(amount=Decimal("10"), user_id=user.id))
    with pytest.raises(UnmanagedDonationWrite):
        db.commit()
    db.rollback()
    assert total(db, user.id) == Decimal("0")


def test_unmanaged_update_and_delete_are_rejected(db, user):
    donation = donation_service.record_donation(db, amount=10, user_id=user.id)

    donation.amount = Decimal("99")
    with pytest.raises(UnmanagedDonationWrite):
        db.flush()
    db.rollback()

    db.delete(db.get(Donation, donation.id))
    with pytest.raises(UnmanagedDonationWrite):
        db.flush()
    db.rollback()


def test_rebuild_repairs_raw_sql_drift(db, user, other_user):
    donation_service.record_donation(db, amount=100, user_id=user.id)
    # Raw SQL bypasses the maintainer
    db.execute(
        text("INSERT INTO donations (user_id, amount) VALUES (:uid, 20)"),
        {"uid": other_user.id},
    )
    db.commit()

    mismatches = find_total_mismatches(db)
    assert [m[0] for m in mismatches] == [other_user.id]
    assert mismatches[0][2] == Decimal("20")

    rebuild_all_donation_totals(db)
    db.commit()

    assert find_total_mismatches(db) == []
    assert total(db, other_user.id) == Decimal("20")
    assert total(db, user.id) == Decimal("100")


def test_summary_and_listing(db, user):
    donation_service.record_donation(db, amount=50, user_id=user.id)
    donation_service.record_donation(db, amount=75)

    summary = donation_service.donation_summary(db)
    assert summary["count"] == 2
    assert summary["total_amount"] == Decimal("125")
    assert summary["anonymous_count"] == 1

    mine = donation_service.list_donations(db, user_id=user.id)
    assert [d.amount for d in mine] == [Decimal("50")]


def test_database_error_during_remove_rolls_back(db, user, monkeypatch):
    donation = donation_service.record_donation(db, amount=40, user_id=user.id)

    def fail(session, *user_ids):
        raise OperationalError("UPDATE users", {}, Exception("connection lost"))

    monkeypatch.setattr(donation_service, "recompute_user_totals", fail)

    with pytest.raises(OperationalError):
        donation_service.remove_donation(db, donation.id)

    assert db.get(Donation, donation.id) is not None
    assert total(db, user.id) == Decimal("40")


def test_bulk_donation_statements_are_rejected(db, user):
    donation_service.record_donation(db, amount=50, user_id=user.id)

    with pytest.raises(UnmanagedDonationWrite):
        db.execute(update(Donation).values(amount=999))
    db.rollback()

    with pytest.raises(UnmanagedDonationWrite):
        db.execute(insert(Donation).values(user_id=user.id, amount=7))
    db.rollback()

    with pytest.raises(UnmanagedDonationWrite):
        db.execute(delete(Donation).where(Donation.user_id == user.id))
    db.rollback()

    assert find_total_mismatches(db) == []
    assert total(db, user.id) == Decimal("50")
