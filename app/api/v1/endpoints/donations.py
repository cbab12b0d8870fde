from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database.database import get_db
from app.models.user import User
from app.schemas.donation import (
    DonationCreate,
    DonationResponse,
    DonationSummary,
    DonationUpdate,
    TotalMismatch,
)
from app.api.v1.endpoints.auth import require_admin
from app.services import donations as donation_service
from app.services.donation_totals import find_total_mismatches

router = APIRouter()


@router.get("/", response_model=List[DonationResponse])
def list_donations(
    user_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    return donation_service.list_donations(db, user_id=user_id, skip=skip, limit=limit)


@router.get("/summary", response_model=DonationSummary)
def donation_summary(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return donation_service.donation_summary(db)


@router.get("/mismatches", response_model=List[TotalMismatch])
def total_mismatches(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Users whose stored total disagrees with their donation rows."""
    return [
        TotalMismatch(user_id=user_id, stored_total=stored, actual_total=actual)
        for user_id, stored, actual in find_total_mismatches(db)
    ]


@router.post("/", response_model=DonationResponse, status_code=status.HTTP_201_CREATED)
def record_donation(payload: DonationCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return donation_service.record_donation(db, **payload.model_dump())


@router.put("/{donation_id}", response_model=DonationResponse)
def amend_donation(
    donation_id: int,
    payload: DonationUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    return donation_service.amend_donation(db, donation_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{donation_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_donation(donation_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    donation_service.remove_donation(db, donation_id)
