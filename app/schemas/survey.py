from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from app.models.survey import NetPromoterBucket


class SurveyCreate(BaseModel):
    event_id: int
    # Range is enforced by the database CHECK constraints
    satisfaction_rating: Optional[int] = None
    usefulness_rating: Optional[int] = None
    instructor_rating: Optional[int] = None
    recommendation_rating: Optional[int] = None
    additional_feedback: Optional[str] = Field(None, max_length=5000)


class SurveyResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    event_id: Optional[int] = None
    registration_id: Optional[int] = None
    satisfaction_rating: Optional[int] = None
    usefulness_rating: Optional[int] = None
    instructor_rating: Optional[int] = None
    recommendation_rating: Optional[int] = None
    overall_score: Optional[Decimal] = None
    net_promoter_score: Optional[NetPromoterBucket] = None
    additional_feedback: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SurveySummary(BaseModel):
    responses: int
    average_overall_score: Optional[Decimal] = None
    net_promoter_score: Optional[int] = None
