from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class MilestoneResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None

    class Config:
        from_attributes = True


class MilestoneAward(BaseModel):
    user_id: int
    milestone_id: int
    custom_title: Optional[str] = None
    achieved_at: Optional[datetime] = None


class ParticipantMilestoneResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    milestone_id: Optional[int] = None
    custom_title: Optional[str] = None
    display_title: str
    achieved_at: Optional[datetime] = None

    class Config:
        from_attributes = True
