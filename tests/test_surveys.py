"""Survey scoring and submission."""
from datetime import datetime
from decimal import Decimal

import pytest

from app.core.exceptions import ConstraintViolation, RecordNotFound
from app.models.survey import NetPromoterBucket
from app.services import events as event_service
from app.services import surveys as survey_service


@pytest.fixture
def event(db):
    return event_service.create_event(db, title="Women in Leadership Workshop", start_time=datetime(2030, 3, 15, 18, 0))


def test_overall_score_is_mean_to_two_places():
    ratings = {
        "satisfaction_rating": 5,
        "usefulness_rating": 4,
        "instructor_rating": 4,
        "recommendation_rating": 4,
    }
    assert survey_service.compute_overall_score(ratings) == Decimal("4.25")

    ratings["usefulness_rating"] = 5
    ratings["instructor_rating"] = 5
    ratings["recommendation_rating"] = 3
    assert survey_service.compute_overall_score(ratings) == Decimal("4.50")


def test_overall_score_skips_missing_ratings():
    assert survey_service.compute_overall_score({"satisfaction_rating": 4, "usefulness_rating": None}) == Decimal("4.00")
    assert survey_service.compute_overall_score({}) is None


def test_overall_score_rounds_half_up():
    ratings = {"satisfaction_rating": 5, "usefulness_rating": 5, "instructor_rating": 4}
    assert survey_service.compute_overall_score(ratings) == Decimal("4.67")


@pytest.mark.parametrize("rating,bucket", [
    (5, NetPromoterBucket.PROMOTER),
    (4, NetPromoterBucket.PASSIVE),
    (3, NetPromoterBucket.DETRACTOR),
    (1, NetPromoterBucket.DETRACTOR),
    (None, None),
])
def test_nps_bucket(rating, bucket):
    assert survey_service.nps_bucket(rating) == bucket


def test_submit_requires_registration(db, user, event):
    with pytest.raises(RecordNotFound):
        survey_service.submit_survey(db, user.id, event.id, satisfaction_rating=5)


def test_boolean_ratings_are_rejected(db, user, event):
    event_service.register_for_event(db, user.id, event.id)

    with pytest.raises(ConstraintViolation):
        survey_service.submit_survey(db, user.id, event.id, satisfaction_rating=True)
    with pytest.raises(ConstraintViolation):
        survey_service.submit_survey(db, user.id, event.id, recommendation_rating=False)

    assert survey_service.list_surveys(db, event_id=event.id) == []


def test_submit_stores_derived_values(db, user, event):
    registration = event_service.register_for_event(db, user.id, event.id)

    survey = survey_service.submit_survey(
        db, user.id, event.id,
        satisfaction_rating=5,
        usefulness_rating=4,
        instructor_rating=5,
        recommendation_rating=4,
        additional_feedback="Loved it",
    )

    assert survey.registration_id == registration.id
    assert survey.overall_score == Decimal("4.50")
    assert survey.net_promoter_score == NetPromoterBucket.PASSIVE


def test_list_filters_by_nps(db, user, other_user, event):
    for participant, recommendation in ((user, 5), (other_user, 2)):
        event_service.register_for_event(db, participant.id, event.id)
        survey_service.submit_survey(db, participant.id, event.id, recommendation_rating=recommendation)

    promoters = survey_service.list_surveys(db, nps=NetPromoterBucket.PROMOTER)
    assert [s.user_id for s in promoters] == [user.id]
    assert len(survey_service.list_surveys(db, event_id=event.id)) == 2

    summary = survey_service.survey_summary(db, event_id=event.id)
    assert summary["responses"] == 2
    assert summary["net_promoter_score"] == 0
