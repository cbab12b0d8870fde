from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database.database import get_db
from app.models.user import User, UserRole
from app.schemas.donation import DonationResponse
from app.schemas.event import RegistrationResponse
from app.schemas.milestone import ParticipantMilestoneResponse
from app.schemas.program import EnrollmentResponse
from app.schemas.user import PasswordChange, RoleChange, UserResponse, UserUpdate
from app.api.v1.endpoints.auth import get_current_user, require_admin
from app.services import donations as donation_service
from app.services import events as event_service
from app.services import milestones as milestone_service
from app.services import programs as program_service
from app.services import users as user_service

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserResponse)
def update_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return user_service.update_profile(db, current_user.id, **payload.model_dump(exclude_unset=True))


@router.get("/me/registrations", response_model=List[RegistrationResponse])
def my_registrations(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return event_service.list_user_registrations(db, current_user.id)


@router.get("/me/enrollments", response_model=List[EnrollmentResponse])
def my_enrollments(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return program_service.list_user_enrollments(db, current_user.id)


@router.get("/me/milestones", response_model=List[ParticipantMilestoneResponse])
def my_milestones(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return milestone_service.list_user_milestones(db, current_user.id)


@router.get("/me/donations", response_model=List[DonationResponse])
def my_donations(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return donation_service.list_donations(db, user_id=current_user.id)


# --------- admin ---------

@router.get("/", response_model=List[UserResponse])
def list_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Search users by name or email (Admin only)."""
    return user_service.list_users(db, search=search, role=role)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return user_service.get_user(db, user_id)


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def reset_password(
    user_id: int,
    payload: PasswordChange,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    user_service.change_password(db, user_id, payload.new_password)


@router.put("/{user_id}/role", response_model=UserResponse)
def change_role(
    user_id: int,
    payload: RoleChange,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    return user_service.set_role(db, user_id, payload.role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete an account; its donations are kept as anonymous."""
    user_service.delete_user(db, user_id)
