from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.database.database import get_db
from app.models.user import User
from app.schemas.event import (
    EventCreate,
    EventResponse,
    EventTemplateCreate,
    EventTemplateResponse,
    RegistrationResponse,
)
from app.api.v1.endpoints.auth import get_current_user, require_admin
from app.services import events as event_service

router = APIRouter()


@router.get("/", response_model=List[EventResponse])
def list_events(upcoming: bool = False, db: Session = Depends(get_db)):
    """Public event calendar."""
    return event_service.list_events(db, upcoming_only=upcoming)


@router.get("/{event_id}", response_model=EventResponse)
def get_event(event_id: int, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return event_service.create_event(db, **payload.model_dump())


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    event_service.delete_event(db, event_id)


@router.post("/{event_id}/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return event_service.register_for_event(db, current_user.id, event_id)


@router.delete("/{event_id}/register", status_code=status.HTTP_204_NO_CONTENT)
def cancel_registration(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    event_service.cancel_registration(db, current_user.id, event_id)


# --------- templates ---------

templates_router = APIRouter()


@templates_router.post("/", response_model=EventTemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(payload: EventTemplateCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return event_service.create_event_template(db, **payload.model_dump())


@templates_router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete a template; events created from it are kept."""
    event_service.delete_event_template(db, template_id)
