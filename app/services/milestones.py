"""
Milestone catalog and participant achievements.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import RecordNotFound, translate_integrity_error
from app.models.milestone import Milestone, ParticipantMilestone

logger = logging.getLogger(__name__)

# (title, description); category equals title
MILESTONE_CATALOG = (
    ("Apprenticeship", "Secured an apprenticeship position"),
    ("Bachelor's Degree", "Earned a Bachelor's degree"),
    ("Certificates & Awards", "Received certificates and awards"),
    ("Middle School Diploma", "Completed middle school education"),
    ("Internship", "Secured an internship position"),
    ("Project", "Completed a significant project"),
    ("Master's Degree", "Earned a Master's degree"),
    ("Associate's Degree", "Earned an Associate's degree"),
    ("Career", "Started a full-time career"),
    ("High School Diploma", "Completed high school education"),
)


def ensure_milestone_catalog(db: Session) -> int:
    """Insert any missing catalog entries. Returns how many were added."""
    existing = set(db.execute(select(Milestone.title)).scalars().all())
    added = 0
    for title, description in MILESTONE_CATALOG:
        if title in existing:
            continue
        db.add(Milestone(title=title, description=description, category=title))
        added += 1
    if added:
        db.commit()
        logger.info(f"Added {added} milestone catalog entr{'y' if added == 1 else 'ies'}")
    return added


def create_milestone(db: Session, title: str, description: Optional[str] = None,
                     category: Optional[str] = None) -> Milestone:
    milestone = Milestone(title=title, description=description, category=category or title)
    db.add(milestone)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise translate_integrity_error(e) from e
    db.refresh(milestone)
    return milestone


def list_milestones(db: Session) -> List[Milestone]:
    return list(db.execute(select(Milestone).order_by(Milestone.title)).scalars().all())


def get_milestone_by_title(db: Session, title: str) -> Milestone:
    milestone = db.execute(select(Milestone).where(Milestone.title == title)).scalars().first()
    if not milestone:
        raise RecordNotFound(f"Milestone '{title}' not found")
    return milestone


def award_milestone(
    db: Session,
    user_id: int,
    milestone_id: int,
    custom_title: Optional[str] = None,
    achieved_at: Optional[datetime] = None,
) -> ParticipantMilestone:
    """
    Record that a participant reached a milestone.

    Raises:
        ReferentialError: the user or milestone does not exist
    """
    achievement = ParticipantMilestone(
        user_id=user_id,
        milestone_id=milestone_id,
        custom_title=custom_title,
    )
    if achieved_at is not None:
        achievement.achieved_at = achieved_at
    db.add(achievement)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Milestone {milestone_id} for user {user_id} rejected: {e.orig}")
        raise translate_integrity_error(e) from e

    db.refresh(achievement)
    logger.info(f"Milestone {milestone_id} awarded to user {user_id}")
    return achievement


def list_user_milestones(db: Session, user_id: int) -> List[ParticipantMilestone]:
    return list(
        db.execute(
            select(ParticipantMilestone)
            .options(joinedload(ParticipantMilestone.milestone))
            .where(ParticipantMilestone.user_id == user_id)
            .order_by(ParticipantMilestone.achieved_at.desc(), ParticipantMilestone.id.desc())
        ).scalars().all()
    )


def revoke_milestone(db: Session, achievement_id: int) -> None:
    achievement = db.get(ParticipantMilestone, achievement_id)
    if not achievement:
        raise RecordNotFound(f"Milestone achievement {achievement_id} not found")
    db.delete(achievement)
    db.commit()
    logger.info(f"Milestone achievement {achievement_id} revoked")


def milestone_overview(db: Session) -> Dict[str, int]:
    """Achievement count per catalog title, including titles nobody has reached."""
    rows = db.execute(
        select(Milestone.title, func.count(ParticipantMilestone.id))
        .outerjoin(ParticipantMilestone, ParticipantMilestone.milestone_id == Milestone.id)
        .group_by(Milestone.title)
        .order_by(Milestone.title)
    ).all()
    return {title: count for title, count in rows}
