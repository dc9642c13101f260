from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coursehub.crud.base import PaginatedResponse
from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.response import APIResponse
from coursehub.schemas.student import Student
from coursehub.services.student import student_service
from coursehub.utils import deps

router = APIRouter()


@router.get("/students", response_model=APIResponse[PaginatedResponse[Student]])
def list_students(
    *,
    db: Session = Depends(deps.get_db),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_admin: AdminModel = Depends(deps.require_admin)
):
    students = student_service.list_students(db, search=search, page=page, size=size)
    return APIResponse(message="Students retrieved successfully", data=students)


@router.put("/students/{student_id}/block", response_model=APIResponse[Student])
def block_student(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    student = student_service.set_blocked(db, student_id=student_id, blocked=True)
    return APIResponse(message="Student blocked successfully", data=student)


@router.put("/students/{student_id}/unblock", response_model=APIResponse[Student])
def unblock_student(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    student = student_service.set_blocked(db, student_id=student_id, blocked=False)
    return APIResponse(message="Student unblocked successfully", data=student)
