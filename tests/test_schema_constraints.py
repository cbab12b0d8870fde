"""Database constraints surface as typed errors."""
from datetime import datetime

import pytest

from app.core.exceptions import ConflictError, ConstraintViolation, ReferentialError
from app.services import events as event_service
from app.services import milestones as milestone_service
from app.services import programs as program_service
from app.services import surveys as survey_service
from app.services.users import create_user


@pytest.fixture
def event(db):
    return event_service.create_event(db, title="Monthly Support Group", start_time=datetime(2030, 3, 20, 19, 0))


def test_duplicate_email_conflicts(db, user):
    with pytest.raises(ConflictError):
        create_user(db, email="JANE.DOE@example.com", name="Jane Again", password="participant123")


def test_role_outside_enum_rejected(db):
    with pytest.raises(ConstraintViolation):
        create_user(db, email="x@example.com", name="X", password="participant123", role="superuser")


def test_duplicate_registration_conflicts(db, user, event):
    event_service.register_for_event(db, user.id, event.id)
    with pytest.raises(ConflictError):
        event_service.register_for_event(db, user.id, event.id)


def test_registration_for_unknown_user(db, event):
    with pytest.raises(ReferentialError):
        event_service.register_for_event(db, 12345, event.id)


@pytest.mark.parametrize("column", [
    "satisfaction_rating",
    "usefulness_rating",
    "instructor_rating",
    "recommendation_rating",
])
def test_rating_out_of_range(db, user, event, column):
    event_service.register_for_event(db, user.id, event.id)
    ratings = {column: 6}
    with pytest.raises(ConstraintViolation):
        survey_service.submit_survey(db, user.id, event.id, **ratings)


def test_rating_zero_rejected(db, user, event):
    event_service.register_for_event(db, user.id, event.id)
    with pytest.raises(ConstraintViolation):
        survey_service.submit_survey(db, user.id, event.id, satisfaction_rating=0)


def test_duplicate_milestone_title(db):
    milestone_service.create_milestone(db, "Internship")
    with pytest.raises(ConflictError):
        milestone_service.create_milestone(db, "Internship")


def test_award_unknown_milestone(db, user):
    with pytest.raises(ReferentialError):
        milestone_service.award_milestone(db, user.id, 999)


def test_duplicate_enrollment_conflicts(db, user):
    program = program_service.create_program(db, title="Mariachi")
    program_service.enroll_in_program(db, user.id, program.id)
    with pytest.raises(ConflictError):
        program_service.enroll_in_program(db, user.id, program.id)


def test_event_requires_title(db):
    with pytest.raises(ConstraintViolation):
        event_service.create_event(db, start_time=datetime(2030, 1, 1))
