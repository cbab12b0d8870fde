"""
Post-event surveys.

overall_score and net_promoter_score are derived here when a survey is
submitted; the database stores them and range-checks the ratings.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    ConstraintViolation,
    RecordNotFound,
    translate_integrity_error,
)
from app.models.survey import RATING_COLUMNS, NetPromoterBucket, Survey
from app.services.events import get_registration

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def compute_overall_score(ratings: Dict[str, Optional[int]]) -> Optional[Decimal]:
    """Mean of the given ratings to two decimals, or None when none were given."""
    values = [ratings[c] for c in RATING_COLUMNS if ratings.get(c) is not None]
    if not values:
        return None
    mean = Decimal(sum(values)) / Decimal(len(values))
    return mean.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def nps_bucket(recommendation_rating: Optional[int]) -> Optional[NetPromoterBucket]:
    if recommendation_rating is None:
        return None
    if recommendation_rating >= 5:
        return NetPromoterBucket.PROMOTER
    if recommendation_rating == 4:
        return NetPromoterBucket.PASSIVE
    return NetPromoterBucket.DETRACTOR


def submit_survey(
    db: Session,
    user_id: int,
    event_id: int,
    satisfaction_rating: Optional[int] = None,
    usefulness_rating: Optional[int] = None,
    instructor_rating: Optional[int] = None,
    recommendation_rating: Optional[int] = None,
    additional_feedback: Optional[str] = None,
) -> Survey:
    """
    Record a survey for an event the user registered for.

    Ratings outside 1..5 are left for the database to reject, so the caller
    sees the same ConstraintViolation whether the write came through here or
    not.

    Raises:
        RecordNotFound: the user has no registration for the event
        ConstraintViolation: a rating is out of range
    """
    registration = get_registration(db, user_id, event_id)
    if registration is None:
        raise RecordNotFound(f"User {user_id} is not registered for event {event_id}")

    ratings = {
        "satisfaction_rating": satisfaction_rating,
        "usefulness_rating": usefulness_rating,
        "instructor_rating": instructor_rating,
        "recommendation_rating": recommendation_rating,
    }
    for column, value in ratings.items():
        # bool is an int subclass
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConstraintViolation(f"{column} must be an integer")

    survey = Survey(
        user_id=user_id,
        event_id=event_id,
        registration_id=registration.id,
        overall_score=compute_overall_score(ratings),
        net_promoter_score=nps_bucket(recommendation_rating),
        additional_feedback=additional_feedback,
        **ratings,
    )
    db.add(survey)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Survey for event {event_id} rejected: {e.orig}")
        raise translate_integrity_error(e) from e

    db.refresh(survey)
    logger.info(
        f"Survey submitted: user={user_id} event={event_id} "
        f"overall={survey.overall_score} nps={survey.net_promoter_score}"
    )
    return survey


def list_surveys(
    db: Session,
    event_id: Optional[int] = None,
    nps: Optional[NetPromoterBucket] = None,
) -> List[Survey]:
    """Surveys newest first, optionally for one event or one NPS bucket."""
    query = select(Survey).options(joinedload(Survey.user), joinedload(Survey.event))
    if event_id is not None:
        query = query.where(Survey.event_id == event_id)
    if nps is not None:
        query = query.where(Survey.net_promoter_score == nps)
    query = query.order_by(Survey.created_at.desc(), Survey.id.desc())
    return list(db.execute(query).scalars().all())


def survey_summary(db: Session, event_id: Optional[int] = None) -> Dict[str, Any]:
    """Response count, average overall score and NPS (percent promoters minus detractors)."""
    base = select(Survey.overall_score, Survey.net_promoter_score)
    if event_id is not None:
        base = base.where(Survey.event_id == event_id)
    rows = db.execute(base).all()

    scores = [Decimal(score) for score, _ in rows if score is not None]
    buckets = [bucket for _, bucket in rows if bucket is not None]
    average = (sum(scores, Decimal("0")) / len(scores)).quantize(TWO_PLACES) if scores else None

    nps = None
    if buckets:
        promoters = sum(1 for b in buckets if b == NetPromoterBucket.PROMOTER)
        detractors = sum(1 for b in buckets if b == NetPromoterBucket.DETRACTOR)
        nps = round(100 * (promoters - detractors) / len(buckets))

    return {
        "responses": len(rows),
        "average_overall_score": average,
        "net_promoter_score": nps,
    }
