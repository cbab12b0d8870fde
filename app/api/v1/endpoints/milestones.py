from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, List
from app.database.database import get_db
from app.models.user import User
from app.schemas.milestone import MilestoneAward, MilestoneResponse, ParticipantMilestoneResponse
from app.api.v1.endpoints.auth import require_admin
from app.services import milestones as milestone_service

router = APIRouter()


@router.get("/", response_model=List[MilestoneResponse])
def list_milestones(db: Session = Depends(get_db)):
    return milestone_service.list_milestones(db)


@router.get("/overview", response_model=Dict[str, int])
def milestone_overview(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Achievement counts per milestone (Admin only)."""
    return milestone_service.milestone_overview(db)


@router.post("/awards", response_model=ParticipantMilestoneResponse, status_code=status.HTTP_201_CREATED)
def award(payload: MilestoneAward, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return milestone_service.award_milestone(db, **payload.model_dump())


@router.delete("/awards/{achievement_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke(achievement_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    milestone_service.revoke_milestone(db, achievement_id)
