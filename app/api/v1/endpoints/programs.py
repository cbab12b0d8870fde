from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.database.database import get_db
from app.models.user import User
from app.schemas.program import EnrollmentResponse, ProgramCreate, ProgramResponse
from app.api.v1.endpoints.auth import get_current_user, require_admin
from app.services import programs as program_service

router = APIRouter()


@router.get("/", response_model=List[ProgramResponse])
def list_programs(db: Session = Depends(get_db)):
    return program_service.list_programs(db)


@router.post("/", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
def create_program(payload: ProgramCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return program_service.create_program(db, **payload.model_dump())


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_program(program_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    program_service.delete_program(db, program_id)


@router.post("/{program_id}/enroll", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
def enroll(program_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return program_service.enroll_in_program(db, current_user.id, program_id)


@router.post("/{program_id}/withdraw", response_model=EnrollmentResponse)
def withdraw(program_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return program_service.withdraw_from_program(db, current_user.id, program_id)
