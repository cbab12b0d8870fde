"""Event templates, scheduling and registration rules."""
from datetime import datetime

import pytest

from app.core.exceptions import RecordNotFound, RegistrationClosed
from app.services import events as event_service


def test_event_defaults_from_template(db):
    template = event_service.create_event_template(
        db, name="Monthly Support Group", type="Meeting", recurrence_pattern="monthly",
        default_capacity=20, description="A safe space to connect."
    )
    event = event_service.create_event(db, start_time=datetime(2030, 3, 20, 19, 0), event_template_id=template.id)

    assert event.title == "Monthly Support Group"
    assert event.capacity == 20
    assert event.description == "A safe space to connect."


def test_explicit_values_override_template(db):
    template = event_service.create_event_template(db, name="Workshop", default_capacity=50)
    event = event_service.create_event(
        db, title="Spring Workshop", capacity=10, start_time=datetime(2030, 3, 1), event_template_id=template.id
    )
    assert (event.title, event.capacity) == ("Spring Workshop", 10)


def test_list_upcoming(db):
    event_service.create_event(db, title="Past", start_time=datetime(2020, 1, 1))
    event_service.create_event(db, title="Future", start_time=datetime(2030, 1, 1))

    upcoming = event_service.list_events(db, upcoming_only=True, now=datetime(2025, 1, 1))
    assert [e.title for e in upcoming] == ["Future"]
    assert len(event_service.list_events(db)) == 2


def test_registration_closes_after_deadline(db, user):
    event = event_service.create_event(
        db, title="Seminar", start_time=datetime(2030, 4, 10), registration_deadline=datetime(2030, 4, 1)
    )
    with pytest.raises(RegistrationClosed):
        event_service.register_for_event(db, user.id, event.id, now=datetime(2030, 4, 2))

    event_service.register_for_event(db, user.id, event.id, now=datetime(2030, 3, 31))


def test_registration_respects_capacity(db, user, other_user):
    event = event_service.create_event(db, title="Small Group", capacity=1, start_time=datetime(2030, 5, 1))
    event_service.register_for_event(db, user.id, event.id)

    with pytest.raises(RegistrationClosed):
        event_service.register_for_event(db, other_user.id, event.id)
    assert event_service.registration_count(db, event.id) == 1


def test_cancel_frees_a_place(db, user, other_user):
    event = event_service.create_event(db, title="Small Group", capacity=1, start_time=datetime(2030, 5, 1))
    event_service.register_for_event(db, user.id, event.id)
    event_service.cancel_registration(db, user.id, event.id)

    event_service.register_for_event(db, other_user.id, event.id)
    assert [r.user_id for r in event.registrations] == [other_user.id]


def test_register_for_missing_event(db, user):
    with pytest.raises(RecordNotFound):
        event_service.register_for_event(db, user.id, 999)


def test_cancel_without_registration(db, user):
    event = event_service.create_event(db, title="Any", start_time=datetime(2030, 5, 1))
    with pytest.raises(RecordNotFound):
        event_service.cancel_registration(db, user.id, event.id)


def test_user_registrations_in_date_order(db, user):
    later = event_service.create_event(db, title="Later", start_time=datetime(2030, 6, 1))
    sooner = event_service.create_event(db, title="Sooner", start_time=datetime(2030, 5, 1))
    event_service.register_for_event(db, user.id, later.id)
    event_service.register_for_event(db, user.id, sooner.id)

    registrations = event_service.list_user_registrations(db, user.id)
    assert [r.event_id for r in registrations] == [sooner.id, later.id]
