"""Sample data loading."""
from decimal import Decimal

from app.models import Donation, Event, Milestone, Program, ProgramEnrollment, User
from app.models.user import UserRole
from app.services.donation_totals import find_total_mismatches
from app.services.seed import seed_database
from app.services.users import get_user_by_email


def test_seed_loads_sample_data(db):
    counts = seed_database(db)

    assert counts == {
        "users": 5,
        "milestones": 10,
        "event_templates": 3,
        "events": 3,
        "programs": 3,
        "program_enrollments": 5,
        "donations": 3,
    }
    assert get_user_by_email(db, "admin@ellarises.org").role == UserRole.ADMIN
    assert db.query(Event).filter(Event.event_template_id.isnot(None)).count() == 3


def test_seed_donations_update_totals(db):
    seed_database(db)

    jane = get_user_by_email(db, "jane.doe@example.com")
    sarah = get_user_by_email(db, "sarah.johnson@example.com")
    emily = get_user_by_email(db, "emily.chen@example.com")
    assert Decimal(jane.total_donations) == Decimal("50")
    assert Decimal(sarah.total_donations) == Decimal("25")
    assert Decimal(emily.total_donations) == Decimal("0")
    assert db.query(Donation).filter(Donation.user_id.is_(None)).count() == 1
    assert find_total_mismatches(db) == []


def test_seed_is_idempotent(db):
    seed_database(db)
    counts = seed_database(db)

    assert set(counts.values()) == {0}
    assert db.query(User).count() == 5
    assert db.query(Milestone).count() == 10
    assert db.query(Program).count() == 3
    assert db.query(ProgramEnrollment).count() == 5
    assert db.query(Donation).count() == 3
