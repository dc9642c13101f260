import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Request
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.security import decode_access_token, markers_match
from coursehub.crud.student import student as crud_student
from coursehub.models.student import Student
from coursehub.schemas.token import TokenPayload

logger = logging.getLogger(__name__)


class SessionRejection(str, Enum):
    NO_CREDENTIAL = "NO_CREDENTIAL"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    SESSION_INVALID = "SESSION_INVALID"
    SESSION_SUPERSEDED = "SESSION_SUPERSEDED"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    ACCOUNT_BLOCKED = "ACCOUNT_BLOCKED"
    UNAVAILABLE = "UNAVAILABLE"


REJECTION_MESSAGES = {
    SessionRejection.NO_CREDENTIAL: "Access denied. No token provided.",
    SessionRejection.INVALID_CREDENTIAL: "Invalid token.",
    SessionRejection.SESSION_INVALID: "Invalid session. Please login again.",
    SessionRejection.SESSION_SUPERSEDED: "Session expired. You have been logged in from another device.",
    SessionRejection.ACCOUNT_INACTIVE: "Account is deactivated.",
    SessionRejection.ACCOUNT_BLOCKED: "Your account has been blocked. Please contact support.",
    SessionRejection.UNAVAILABLE: "Unable to verify session. Please try again.",
}


@dataclass(frozen=True)
class SessionCheck:
    authorized: bool
    student: Optional[Student] = None
    reason: Optional[SessionRejection] = None
    marker: Optional[str] = None
    student_id: Optional[int] = None

    @classmethod
    def accept(cls, student: Student, marker: str) -> "SessionCheck":
        return cls(authorized=True, student=student, marker=marker, student_id=student.id)

    @classmethod
    def reject(cls, reason: SessionRejection, student_id: Optional[int] = None) -> "SessionCheck":
        return cls(authorized=False, reason=reason, student_id=student_id)

    @property
    def message(self) -> Optional[str]:
        return REJECTION_MESSAGES[self.reason] if self.reason else None


def _short(marker: Optional[str]) -> str:
    return f"{marker[:8]}..." if marker else "none"


def extract_credential(request: Request, cookie_name: Optional[str] = None) -> Optional[str]:
    """Cookie first, then an ``Authorization: Bearer`` header."""
    token = request.cookies.get(cookie_name or settings.STUDENT_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return None


def decode_credential(token: str) -> Optional[TokenPayload]:
    try:
        return TokenPayload(**decode_access_token(token))
    except (JWTError, ValidationError):
        return None


def check_student_credential(db: Session, token: Optional[str]) -> SessionCheck:
    """Decide whether ``token`` belongs to the student's one live session.

    Never raises: a database error while checking is reported as UNAVAILABLE
    and the request is refused.
    """
    if not token:
        return SessionCheck.reject(SessionRejection.NO_CREDENTIAL)

    payload = decode_credential(token)
    if payload is None or payload.type != "student":
        return SessionCheck.reject(SessionRejection.INVALID_CREDENTIAL)

    try:
        student_id = int(payload.sub)
    except ValueError:
        return SessionCheck.reject(SessionRejection.INVALID_CREDENTIAL)

    try:
        student = crud_student.get(db, id=student_id)
    except SQLAlchemyError:
        logger.exception("Session check for student %s could not reach the database", student_id)
        return SessionCheck.reject(SessionRejection.UNAVAILABLE, student_id)

    if not student:
        return SessionCheck.reject(SessionRejection.INVALID_CREDENTIAL, student_id)

    if not student.is_active:
        return SessionCheck.reject(SessionRejection.ACCOUNT_INACTIVE, student.id)

    if student.blocked:
        return SessionCheck.reject(SessionRejection.ACCOUNT_BLOCKED, student.id)

    if not payload.sid:
        logger.info("Student %s presented a credential without a session marker", student.id)
        return SessionCheck.reject(SessionRejection.SESSION_INVALID, student.id)

    if not markers_match(payload.sid, student.active_session_token):
        logger.info(
            "Rejected superseded session for student %s (presented %s, active %s)",
            student.id, _short(payload.sid), _short(student.active_session_token)
        )
        return SessionCheck.reject(SessionRejection.SESSION_SUPERSEDED, student.id)

    return SessionCheck.accept(student, payload.sid)
