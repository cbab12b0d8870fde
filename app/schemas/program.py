from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class ProgramCreate(BaseModel):
    title: str
    description: Optional[str] = None
    age_range: Optional[str] = None
    schedule: Optional[str] = None
    fee: Optional[Decimal] = None
    additional_info: Optional[str] = None
    image_url: Optional[str] = None


class ProgramResponse(ProgramCreate):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EnrollmentResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    program_id: Optional[int] = None
    status: Optional[str] = None
    enrolled_at: Optional[datetime] = None

    class Config:
        from_attributes = True
