"""
Idempotent sample data for development and demo databases.

Every step checks for existing rows by natural key before inserting, so the
seed can be re-run against a partially seeded database. Sample donations are
written through the donation service so user totals come out right.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.donation import Donation
from app.models.event import Event, EventTemplate
from app.models.program import Program
from app.models.user import UserRole
from app.services import donations as donation_service
from app.services import events as event_service
from app.services import programs as program_service
from app.services.milestones import ensure_milestone_catalog
from app.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)

# Pre-hashed bcrypt credentials: admin123 and participant123
ADMIN_PASSWORD_HASH = "$2a$10$dCwAFOvD0JYo3i/ztF2dxOxltLa.u6l8mYBx2b2jHmeeBEH3q8jGS"
PARTICIPANT_PASSWORD_HASH = "$2a$10$TbsWcoitH0zrzBW1k67xM.7i3VQRLEHPiioDbfBIORwheLA.SptDe"

ADMIN_ACCOUNT = {"email": "admin@ellarises.org", "name": "Admin User"}

SAMPLE_PARTICIPANTS = (
    {"email": "jane.doe@example.com", "name": "Jane Doe", "city": "Provo", "state": "UT",
     "field_of_interest": "Education"},
    {"email": "sarah.johnson@example.com", "name": "Sarah Johnson", "city": "Orem", "state": "UT",
     "field_of_interest": "Business"},
    {"email": "emily.chen@example.com", "name": "Emily Chen", "city": "Spanish Fork", "state": "UT",
     "field_of_interest": "Technology"},
    {"email": "maria.garcia@example.com", "name": "Maria Garcia", "city": "Springville", "state": "UT",
     "field_of_interest": "Arts"},
)

SAMPLE_TEMPLATES = (
    {"name": "Women in Leadership Workshop", "type": "Workshop", "recurrence_pattern": "monthly",
     "default_capacity": 50,
     "description": "Leadership skills and professional development with successful women leaders."},
    {"name": "Monthly Support Group", "type": "Meeting", "recurrence_pattern": "monthly",
     "default_capacity": 20,
     "description": "A safe space to connect, share experiences, and support each other."},
    {"name": "Career Development Seminar", "type": "Seminar", "recurrence_pattern": "quarterly",
     "default_capacity": 100,
     "description": "Career opportunities, resume building, and networking strategies."},
)

SAMPLE_EVENTS = (
    {
        "title": "Women in Leadership Workshop",
        "description": "Join us for an empowering workshop on leadership skills and professional "
                       "development. Learn from successful women leaders and network with peers.",
        "start_time": datetime(2025, 3, 15, 18, 0),
        "end_time": datetime(2025, 3, 15, 20, 0),
        "location": "123 Community Center, Provo",
        "capacity": 50,
    },
    {
        "title": "Monthly Support Group",
        "description": "A safe space to connect, share experiences, and support each other. "
                       "Open to all women in our community.",
        "start_time": datetime(2025, 3, 20, 19, 0),
        "end_time": datetime(2025, 3, 20, 21, 0),
        "location": "Ella Rises Community Room",
        "capacity": 20,
    },
    {
        "title": "Career Development Seminar",
        "description": "Learn about career opportunities, resume building, and networking strategies. "
                       "Includes guest speakers from various industries.",
        "start_time": datetime(2025, 4, 10, 18, 30),
        "end_time": datetime(2025, 4, 10, 20, 30),
        "location": "Provo Library Auditorium",
        "capacity": 60,
    },
)

SAMPLE_PROGRAMS = (
    {
        "title": "Ballet Folklorico",
        "description": "Experience the vibrant culture and traditions of Mexican folk dance. Learn authentic "
                       "choreography, develop performance skills, and connect with your heritage through "
                       "movement and music.",
        "age_range": "Girls ages 11-18 years old",
        "schedule": "Mondays at 7:00 PM",
        "fee": None,
        "additional_info": "Auditions for 2026 begin in May. No prior dance experience required - just bring "
                           "your enthusiasm and willingness to learn!",
    },
    {
        "title": "Summit + Educational Pathways",
        "description": "Day camp packed with activities to give a glimpse of the Ella Rises Experience: art, "
                       "STEM, and a focus on education! Conclude the day camp with a tour of a local "
                       "university or technical college.",
        "age_range": "Girls ages 11-18 years old",
        "schedule": "Summer day camp - dates announced in spring",
        "fee": None,
        "additional_info": "This immersive day experience combines hands-on learning with college "
                           "exploration. Limited spots available - register early!",
    },
    {
        "title": "Mariachi",
        "description": "Music class for violin, trumpet, guitarrón, vihuela, and guitar. Learn traditional "
                       "Mexican music in a supportive, culturally-rich environment.",
        "age_range": "Girls ages 11-18",
        "schedule": "Mondays from 5:30 PM - 6:45 PM",
        "fee": Decimal("45.00"),
        "additional_info": "Annual program fee: $45 (Venmo or cash). Instruments provided for use during "
                           "class. No prior musical experience necessary.",
    },
)

# (participant email, program title)
SAMPLE_ENROLLMENTS = (
    ("jane.doe@example.com", "Ballet Folklorico"),
    ("sarah.johnson@example.com", "Ballet Folklorico"),
    ("sarah.johnson@example.com", "Mariachi"),
    ("emily.chen@example.com", "Summit + Educational Pathways"),
    ("maria.garcia@example.com", "Mariachi"),
)

# (donor email or None for anonymous, amount, donation_date)
SAMPLE_DONATIONS = (
    ("jane.doe@example.com", Decimal("50.00"), datetime(2025, 1, 15, 10, 0)),
    ("sarah.johnson@example.com", Decimal("25.00"), None),
    (None, Decimal("75.00"), None),
)


def _seed_users(db: Session) -> int:
    added = 0
    if not get_user_by_email(db, ADMIN_ACCOUNT["email"]):
        create_user(db, password_hash=ADMIN_PASSWORD_HASH, role=UserRole.ADMIN, **ADMIN_ACCOUNT)
        added += 1
    for participant in SAMPLE_PARTICIPANTS:
        if get_user_by_email(db, participant["email"]):
            continue
        create_user(db, password_hash=PARTICIPANT_PASSWORD_HASH, **participant)
        added += 1
    return added


def _seed_templates(db: Session) -> int:
    existing = set(db.execute(select(EventTemplate.name)).scalars().all())
    added = 0
    for template in SAMPLE_TEMPLATES:
        if template["name"] in existing:
            continue
        event_service.create_event_template(db, **template)
        added += 1
    return added


def _seed_events(db: Session) -> int:
    templates = {t.name: t.id for t in db.execute(select(EventTemplate)).scalars().all()}
    added = 0
    for event in SAMPLE_EVENTS:
        exists = db.execute(
            select(Event.id).where(Event.title == event["title"], Event.start_time == event["start_time"])
        ).first()
        if exists:
            continue
        event_service.create_event(db, event_template_id=templates.get(event["title"]), **event)
        added += 1
    return added


def _seed_programs(db: Session) -> int:
    existing = set(db.execute(select(Program.title)).scalars().all())
    added = 0
    for program in SAMPLE_PROGRAMS:
        if program["title"] in existing:
            continue
        program_service.create_program(db, **program)
        added += 1
    return added


def _seed_enrollments(db: Session) -> int:
    programs = {p.title: p.id for p in db.execute(select(Program)).scalars().all()}
    added = 0
    for email, title in SAMPLE_ENROLLMENTS:
        user = get_user_by_email(db, email)
        program_id = programs.get(title)
        if not user or program_id is None:
            continue
        if program_service.get_enrollment(db, user.id, program_id):
            continue
        program_service.enroll_in_program(db, user.id, program_id)
        added += 1
    return added


def _seed_donations(db: Session) -> int:
    # Donations have no natural key; only seed into an empty table
    if db.execute(select(func.count(Donation.id))).scalar_one():
        return 0
    for email, amount, donation_date in SAMPLE_DONATIONS:
        user = get_user_by_email(db, email) if email else None
        donation_service.record_donation(
            db,
            amount=amount,
            user_id=user.id if user else None,
            donor_name=user.name if user else None,
            donation_date=donation_date,
        )
    return len(SAMPLE_DONATIONS)


def seed_database(db: Session) -> Dict[str, int]:
    """
    Load the sample data set.

    Returns:
        Number of rows added per table; zeros on a re-run
    """
    counts = {
        "users": _seed_users(db),
        "milestones": ensure_milestone_catalog(db),
        "event_templates": _seed_templates(db),
        "events": _seed_events(db),
        "programs": _seed_programs(db),
        "program_enrollments": _seed_enrollments(db),
        "donations": _seed_donations(db),
    }
    logger.info(f"Seed complete: {counts}")
    return counts
