"""
Service for participant and admin accounts.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    ConstraintViolation,
    RecordNotFound,
    translate_integrity_error,
)
from app.core.security import hash_password, verify_password
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

PROFILE_FIELDS = frozenset({
    "name",
    "date_of_birth",
    "phone",
    "city",
    "state",
    "zip",
    "school_or_employer",
    "field_of_interest",
})


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _check_password_length(password: str) -> None:
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ConstraintViolation(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        )


def create_user(
    db: Session,
    email: str,
    name: str,
    password: Optional[str] = None,
    password_hash: Optional[str] = None,
    role: UserRole = UserRole.PARTICIPANT,
    date_of_birth: Optional[date] = None,
    **profile,
) -> User:
    """
    Create an account.

    Exactly one of ``password`` (hashed here) or ``password_hash`` (stored as
    is, for seed data and imports) must be given. total_donations always starts
    at zero; it is owned by the donation totals maintainer.

    Raises:
        ConflictError: the email is already registered
        ConstraintViolation: bad role, missing credential, short password
    """
    if (password is None) == (password_hash is None):
        raise ConstraintViolation("Provide either a password or a password hash")
    if password is not None:
        _check_password_length(password)
        password_hash = hash_password(password)

    unknown = set(profile) - PROFILE_FIELDS
    if unknown:
        raise ConstraintViolation(f"Unknown profile field(s): {', '.join(sorted(unknown))}")

    user = User(
        email=normalize_email(email),
        name=name,
        password_hash=password_hash,
        role=role,
        date_of_birth=date_of_birth,
        **profile,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"User creation rejected for {email}: {e.orig}")
        raise translate_integrity_error(e) from e

    db.refresh(user)
    logger.info(f"User created: {user.email} ({user.role.value})")
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise RecordNotFound(f"User {user_id} not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == normalize_email(email))).scalars().first()


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Verify credentials and count the login.

    login_count is incremented in SQL so concurrent logins never lose a count.
    """
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        raise AuthenticationError("Invalid email or password")

    db.execute(
        update(User)
        .where(User.id == user.id)
        .values(login_count=User.login_count + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(user)
    logger.info(f"User logged in: {user.email} (login #{user.login_count})")
    return user


def update_profile(db: Session, user_id: int, **changes) -> User:
    unknown = set(changes) - PROFILE_FIELDS
    if unknown:
        raise ConstraintViolation(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    user = get_user(db, user_id)
    for field, value in changes.items():
        setattr(user, field, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise translate_integrity_error(e) from e
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, new_password: str) -> User:
    """Admin password reset."""
    _check_password_length(new_password)
    user = get_user(db, user_id)
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Password changed for user {user.email}")
    return user


def set_role(db: Session, user_id: int, role: UserRole) -> User:
    user = get_user(db, user_id)
    user.role = role
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise translate_integrity_error(e) from e
    db.refresh(user)
    logger.info(f"Role for {user.email} set to {user.role.value}")
    return user


def list_users(db: Session, search: Optional[str] = None, role: Optional[UserRole] = None) -> List[User]:
    """Users ordered by name, optionally filtered by a name/email substring."""
    query = select(User)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    if role is not None:
        query = query.where(User.role == role)
    return list(db.execute(query.order_by(User.name.asc())).scalars().all())


def delete_user(db: Session, user_id: int) -> None:
    """
    Administrative account deletion.

    Registrations, enrollments, surveys and milestones go with the account;
    donations stay with user_id cleared. Both are done by the database's
    referential actions.
    """
    user = get_user(db, user_id)
    email = user.email
    db.delete(user)
    db.commit()
    logger.info(f"User deleted: {email} (id={user_id})")
