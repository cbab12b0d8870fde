"""
Programs and program enrollment.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import RecordNotFound, translate_integrity_error
from app.models.program import EnrollmentStatus, Program, ProgramEnrollment

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"{what} rejected by the database: {e.orig}")
        raise translate_integrity_error(e) from e


def create_program(
    db: Session,
    title: str,
    description: Optional[str] = None,
    age_range: Optional[str] = None,
    schedule: Optional[str] = None,
    fee: Optional[Decimal] = None,
    additional_info: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Program:
    program = Program(
        title=title,
        description=description,
        age_range=age_range,
        schedule=schedule,
        fee=fee,
        additional_info=additional_info,
        image_url=image_url,
    )
    db.add(program)
    _commit(db, "Program")
    db.refresh(program)
    logger.info(f"Program created: {program.title} (id={program.id})")
    return program


def get_program(db: Session, program_id: int) -> Program:
    program = db.get(Program, program_id)
    if not program:
        raise RecordNotFound(f"Program {program_id} not found")
    return program


def list_programs(db: Session) -> List[Program]:
    return list(db.execute(select(Program).order_by(Program.title)).scalars().all())


def delete_program(db: Session, program_id: int) -> None:
    program = get_program(db, program_id)
    db.delete(program)
    _commit(db, "Program delete")
    logger.info(f"Program deleted: id={program_id}")


def get_enrollment(db: Session, user_id: int, program_id: int) -> Optional[ProgramEnrollment]:
    return db.execute(
        select(ProgramEnrollment).where(
            ProgramEnrollment.user_id == user_id,
            ProgramEnrollment.program_id == program_id,
        )
    ).scalars().first()


def enroll_in_program(db: Session, user_id: int, program_id: int) -> ProgramEnrollment:
    """
    Enroll a user in a program.

    A withdrawn enrollment is reactivated rather than duplicated.

    Raises:
        ConflictError: the user already has an active enrollment
        ReferentialError: the user or program does not exist
    """
    existing = get_enrollment(db, user_id, program_id)
    if existing is not None and existing.status == EnrollmentStatus.WITHDRAWN.value:
        existing.status = EnrollmentStatus.ACTIVE.value
        _commit(db, "Re-enrollment")
        db.refresh(existing)
        logger.info(f"User {user_id} re-enrolled in program {program_id}")
        return existing

    enrollment = ProgramEnrollment(user_id=user_id, program_id=program_id)
    db.add(enrollment)
    _commit(db, "Enrollment")
    db.refresh(enrollment)
    logger.info(f"User {user_id} enrolled in program {program_id}")
    return enrollment


def withdraw_from_program(db: Session, user_id: int, program_id: int) -> ProgramEnrollment:
    enrollment = get_enrollment(db, user_id, program_id)
    if enrollment is None:
        raise RecordNotFound(f"User {user_id} is not enrolled in program {program_id}")
    enrollment.status = EnrollmentStatus.WITHDRAWN.value
    db.commit()
    db.refresh(enrollment)
    logger.info(f"User {user_id} withdrew from program {program_id}")
    return enrollment


def list_user_enrollments(db: Session, user_id: int) -> List[ProgramEnrollment]:
    return list(
        db.execute(
            select(ProgramEnrollment)
            .options(joinedload(ProgramEnrollment.program))
            .where(ProgramEnrollment.user_id == user_id)
            .order_by(ProgramEnrollment.enrolled_at.desc())
        ).scalars().all()
    )
