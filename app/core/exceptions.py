"""Error taxonomy for participant data and its HTTP mapping.

Every failure that comes out of the service layer is one of the
``ParticipantDataError`` subclasses below. Database integrity errors are
translated with :func:`translate_integrity_error` so callers never have to
inspect driver-specific exceptions. Nothing here retries; retry policy belongs
to whoever called the service.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# SQLSTATE classes raised by PostgreSQL
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"
NOT_NULL_VIOLATION = "23502"


class ParticipantDataError(Exception):
    """Base class for all service-level failures."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.constraint = constraint


class ConstraintViolation(ParticipantDataError):
    """A range, enum or not-null check rejected the write."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ConflictError(ParticipantDataError):
    """A uniqueness constraint rejected the write."""

    status_code = status.HTTP_409_CONFLICT


class ReferentialError(ParticipantDataError):
    """The write referenced a parent row that does not exist."""

    status_code = status.HTTP_409_CONFLICT


class AggregateRecomputationFailure(ParticipantDataError):
    """users.total_donations could not be recomputed inside the donation transaction."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, user_id: Optional[int] = None):
        super().__init__(message)
        self.user_id = user_id


class RecordNotFound(ParticipantDataError):
    status_code = status.HTTP_404_NOT_FOUND


class RegistrationClosed(ParticipantDataError):
    """The event is full or its registration deadline has passed."""

    status_code = status.HTTP_409_CONFLICT


class UnmanagedDonationWrite(ParticipantDataError):
    """A donation row was written without going through the donation service."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthenticationError(ParticipantDataError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(ParticipantDataError):
    status_code = status.HTTP_403_FORBIDDEN


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _constraint_name(exc: IntegrityError) -> Optional[str]:
    diag = getattr(getattr(exc, "orig", None), "diag", None)
    return getattr(diag, "constraint_name", None)


def translate_integrity_error(exc: IntegrityError) -> ParticipantDataError:
    """Map a database IntegrityError onto the error taxonomy."""
    code = _sqlstate(exc)
    constraint = _constraint_name(exc)
    detail = str(getattr(exc, "orig", exc))

    if code == UNIQUE_VIOLATION:
        return ConflictError(detail, constraint)
    if code == FOREIGN_KEY_VIOLATION:
        return ReferentialError(detail, constraint)
    if code in (CHECK_VIOLATION, NOT_NULL_VIOLATION):
        return ConstraintViolation(detail, constraint)

    # SQLite carries no SQLSTATE, only the message
    lowered = detail.lower()
    if "unique constraint" in lowered:
        return ConflictError(detail, constraint)
    if "foreign key constraint" in lowered:
        return ReferentialError(detail, constraint)
    if "check constraint" in lowered or "not null constraint" in lowered:
        return ConstraintViolation(detail, constraint)

    logger.error(f"Unclassified integrity error: {detail}")
    return ConstraintViolation(detail, constraint)


def translate_data_error(exc: DataError) -> ConstraintViolation:
    """A value the column type cannot hold (numeric overflow, bad format)."""
    return ConstraintViolation(str(getattr(exc, "orig", exc)))


async def participant_data_exception_handler(request: Request, exc: ParticipantDataError):
    """Handle service-level errors."""
    request_id = getattr(request.state, 'request_id', 'N/A')
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message} - {request.method} {request.url.path}",
        extra={"request_id": request_id},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions raised by routes and dependencies."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body and query validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Last-resort handler so unexpected errors never leak a traceback."""
    request_id = getattr(request.state, 'request_id', 'N/A')
    logger.exception(f"Unhandled error: {exc}", extra={"request_id": request_id})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
