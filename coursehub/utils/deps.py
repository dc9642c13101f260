from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.constants import AdminRoleEnum
from coursehub.core.database import SessionLocal
from coursehub.crud.admin import admin as crud_admin
from coursehub.models.admin import Admin
from coursehub.models.student import Student
from coursehub.services.session_guard import (
    REJECTION_MESSAGES,
    SessionCheck,
    SessionRejection,
    check_student_credential,
    decode_credential,
    extract_credential,
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_transactional_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_session_check(request: Request, db: Session = Depends(get_db)) -> SessionCheck:
    check = check_student_credential(db, extract_credential(request))
    # Read back by the request logging middleware.
    request.state.student_id = check.student_id
    request.state.session_rejection = check.reason
    return check

def get_current_student(check: SessionCheck = Depends(get_session_check)) -> Student:
    if check.authorized:
        return check.student

    if check.reason in (SessionRejection.ACCOUNT_INACTIVE, SessionRejection.ACCOUNT_BLOCKED):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=check.message)
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=check.message)

def get_optional_student(check: SessionCheck = Depends(get_session_check)) -> Optional[Student]:
    return check.student if check.authorized else None

def get_current_admin(request: Request, db: Session = Depends(get_db)) -> Admin:
    token = extract_credential(request, settings.ADMIN_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=REJECTION_MESSAGES[SessionRejection.NO_CREDENTIAL]
        )

    payload = decode_credential(token)
    if payload is None or payload.type != "admin" or not payload.sub.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=REJECTION_MESSAGES[SessionRejection.INVALID_CREDENTIAL]
        )

    admin = crud_admin.get(db, id=int(payload.sub))
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=REJECTION_MESSAGES[SessionRejection.INVALID_CREDENTIAL]
        )
    request.state.staff_id = admin.id
    if not admin.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated.")
    return admin

def require_admin(current_admin: Admin = Depends(get_current_admin)) -> Admin:
    if current_admin.role != AdminRoleEnum.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can perform this action."
        )
    return current_admin
