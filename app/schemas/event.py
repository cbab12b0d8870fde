from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class EventTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: Optional[str] = None
    description: Optional[str] = None
    recurrence_pattern: Optional[str] = None
    default_capacity: Optional[int] = Field(None, ge=0)


class EventTemplateResponse(EventTemplateCreate):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventCreate(BaseModel):
    # Title may be omitted when a template supplies it
    title: Optional[str] = Field(None, max_length=255)
    event_template_id: Optional[int] = None
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    registration_deadline: Optional[datetime] = None
    image_url: Optional[str] = None


class EventResponse(BaseModel):
    id: int
    event_template_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    registration_deadline: Optional[datetime] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegistrationResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    event_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
