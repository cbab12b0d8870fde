"""
Event templates, scheduled events and event registration.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    RecordNotFound,
    RegistrationClosed,
    translate_integrity_error,
)
from app.models.event import Event, EventTemplate
from app.models.registration import EventRegistration

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"{what} rejected by the database: {e.orig}")
        raise translate_integrity_error(e) from e


# --------- templates ---------


def create_event_template(
    db: Session,
    name: str,
    type: Optional[str] = None,
    description: Optional[str] = None,
    recurrence_pattern: Optional[str] = None,
    default_capacity: Optional[int] = None,
) -> EventTemplate:
    template = EventTemplate(
        name=name,
        type=type,
        description=description,
        recurrence_pattern=recurrence_pattern,
        default_capacity=default_capacity,
    )
    db.add(template)
    _commit(db, "Event template")
    db.refresh(template)
    logger.info(f"Event template created: {template.name} (id={template.id})")
    return template


def delete_event_template(db: Session, template_id: int) -> None:
    """Delete a template; its events survive with event_template_id cleared."""
    template = db.get(EventTemplate, template_id)
    if not template:
        raise RecordNotFound(f"Event template {template_id} not found")
    db.delete(template)
    _commit(db, "Event template delete")
    logger.info(f"Event template deleted: id={template_id}")


# --------- events ---------


def create_event(
    db: Session,
    start_time: datetime,
    title: Optional[str] = None,
    event_template_id: Optional[int] = None,
    description: Optional[str] = None,
    end_time: Optional[datetime] = None,
    location: Optional[str] = None,
    capacity: Optional[int] = None,
    registration_deadline: Optional[datetime] = None,
    image_url: Optional[str] = None,
) -> Event:
    """
    Schedule an event, optionally from a template.

    Title, description and capacity fall back to the template's name,
    description and default capacity when not given.
    """
    if event_template_id is not None:
        template = db.get(EventTemplate, event_template_id)
        if template is not None:
            title = title or template.name
            description = description if description is not None else template.description
            capacity = capacity if capacity is not None else template.default_capacity

    event = Event(
        event_template_id=event_template_id,
        title=title,
        description=description,
        start_time=start_time,
        end_time=end_time,
        location=location,
        capacity=capacity,
        registration_deadline=registration_deadline,
        image_url=image_url,
    )
    db.add(event)
    _commit(db, "Event")
    db.refresh(event)
    logger.info(f"Event created: {event.title} at {event.start_time} (id={event.id})")
    return event


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise RecordNotFound(f"Event {event_id} not found")
    return event


def list_events(db: Session, upcoming_only: bool = False, now: Optional[datetime] = None) -> List[Event]:
    query = select(Event).order_by(Event.start_time.asc())
    if upcoming_only:
        query = query.where(Event.start_time >= (now or datetime.now()))
    return list(db.execute(query).scalars().all())


def delete_event(db: Session, event_id: int) -> None:
    """Delete an event together with its registrations and surveys."""
    event = get_event(db, event_id)
    db.delete(event)
    _commit(db, "Event delete")
    logger.info(f"Event deleted: id={event_id}")


# --------- registration ---------


def registration_count(db: Session, event_id: int) -> int:
    return db.execute(
        select(func.count(EventRegistration.id)).where(EventRegistration.event_id == event_id)
    ).scalar_one()


def get_registration(db: Session, user_id: int, event_id: int) -> Optional[EventRegistration]:
    return db.execute(
        select(EventRegistration).where(
            EventRegistration.user_id == user_id,
            EventRegistration.event_id == event_id,
        )
    ).scalars().first()


def register_for_event(
    db: Session,
    user_id: int,
    event_id: int,
    now: Optional[datetime] = None,
) -> EventRegistration:
    """
    Register a user for an event.

    Capacity and registration deadline are checked here; the database only
    guarantees one registration per (user, event).

    Raises:
        RecordNotFound: no such event
        RegistrationClosed: the deadline has passed or the event is full
        ConflictError: the user is already registered
        ReferentialError: no such user
    """
    event = get_event(db, event_id)
    now = now or datetime.now()

    if event.registration_deadline is not None and now > event.registration_deadline:
        raise RegistrationClosed(f"Registration for '{event.title}' closed at {event.registration_deadline}")
    if event.capacity is not None and registration_count(db, event_id) >= event.capacity:
        raise RegistrationClosed(f"'{event.title}' is full ({event.capacity} places)")

    registration = EventRegistration(user_id=user_id, event_id=event_id)
    db.add(registration)
    _commit(db, "Registration")
    db.refresh(registration)
    logger.info(f"User {user_id} registered for event {event_id}")
    return registration


def cancel_registration(db: Session, user_id: int, event_id: int) -> None:
    """Withdraw a registration; any survey attached to it goes too."""
    registration = get_registration(db, user_id, event_id)
    if not registration:
        raise RecordNotFound(f"User {user_id} is not registered for event {event_id}")
    db.delete(registration)
    _commit(db, "Registration cancel")
    logger.info(f"User {user_id} cancelled registration for event {event_id}")


def list_user_registrations(db: Session, user_id: int) -> List[EventRegistration]:
    return list(
        db.execute(
            select(EventRegistration)
            .join(Event, EventRegistration.event_id == Event.id)
            .where(EventRegistration.user_id == user_id)
            .order_by(Event.start_time.asc())
        ).scalars().all()
    )
