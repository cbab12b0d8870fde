from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database.database import get_db
from app.models.survey import NetPromoterBucket
from app.models.user import User
from app.schemas.survey import SurveyCreate, SurveyResponse, SurveySummary
from app.api.v1.endpoints.auth import get_current_user, require_admin
from app.services import surveys as survey_service

router = APIRouter()


@router.post("/", response_model=SurveyResponse, status_code=status.HTTP_201_CREATED)
def submit_survey(payload: SurveyCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Submit feedback for an event the current user registered for."""
    return survey_service.submit_survey(db, current_user.id, **payload.model_dump())


@router.get("/", response_model=List[SurveyResponse])
def list_surveys(
    event_id: Optional[int] = None,
    nps: Optional[NetPromoterBucket] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """List surveys, optionally filtered by event or NPS bucket (Admin only)."""
    return survey_service.list_surveys(db, event_id=event_id, nps=nps)


@router.get("/summary", response_model=SurveySummary)
def survey_summary(event_id: Optional[int] = None, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return survey_service.survey_summary(db, event_id=event_id)
