"""Referential actions on delete."""
from datetime import datetime

from app.models import (
    Donation,
    Event,
    EventRegistration,
    ParticipantMilestone,
    ProgramEnrollment,
    Survey,
    User,
)
from app.services import donations as donation_service
from app.services import events as event_service
from app.services import milestones as milestone_service
from app.services import programs as program_service
from app.services import surveys as survey_service
from app.services.users import delete_user


def _participant_history(db, user):
    template = event_service.create_event_template(db, name="Career Development Seminar", default_capacity=100)
    event = event_service.create_event(db, start_time=datetime(2030, 4, 10, 18, 30), event_template_id=template.id)
    event_service.register_for_event(db, user.id, event.id)
    survey_service.submit_survey(db, user.id, event.id, satisfaction_rating=5, recommendation_rating=5)
    milestone = milestone_service.create_milestone(db, "Career")
    milestone_service.award_milestone(db, user.id, milestone.id)
    program = program_service.create_program(db, title="Ballet Folklorico")
    program_service.enroll_in_program(db, user.id, program.id)
    donation = donation_service.record_donation(db, amount=50, user_id=user.id)
    return template, event, donation


def test_event_delete_removes_registrations_and_surveys(db, user):
    _, event, donation = _participant_history(db, user)

    event_service.delete_event(db, event.id)

    assert db.query(EventRegistration).count() == 0
    assert db.query(Survey).count() == 0
    # Unrelated rows survive
    assert db.query(ParticipantMilestone).count() == 1
    assert db.get(Donation, donation.id) is not None


def test_template_delete_keeps_events(db, user):
    template, event, _ = _participant_history(db, user)

    event_service.delete_event_template(db, template.id)

    db.expire_all()
    kept = db.get(Event, event.id)
    assert kept is not None
    assert kept.event_template_id is None
    assert db.query(EventRegistration).count() == 1


def test_user_delete_cascades_and_anonymizes(db, user, other_user):
    _, _, donation = _participant_history(db, user)

    delete_user(db, user.id)

    db.expire_all()
    assert db.get(User, user.id) is None
    assert db.query(EventRegistration).count() == 0
    assert db.query(Survey).count() == 0
    assert db.query(ParticipantMilestone).count() == 0
    assert db.query(ProgramEnrollment).count() == 0
    assert db.get(Donation, donation.id).user_id is None
    assert db.get(User, other_user.id) is not None


def test_cancelling_registration_removes_its_survey(db, user):
    _, event, _ = _participant_history(db, user)

    event_service.cancel_registration(db, user.id, event.id)

    assert db.query(Survey).count() == 0
