from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.enrollment import (
    CourseCompletionReport,
    Enrollment,
    EnrollmentProgressDetail,
    EnrollmentStatusUpdate,
    EnrollmentWithStudent,
)
from coursehub.schemas.response import APIResponse
from coursehub.services.enrollment import enrollment_service
from coursehub.utils import deps

router = APIRouter()


@router.get("/course/{course_id}", response_model=APIResponse[List[EnrollmentWithStudent]])
def list_course_enrollments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    skip: int = 0,
    limit: int = 100,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    enrollments = enrollment_service.list_course_enrollments(
        db, course_id=course_id, staff=current_admin, skip=skip, limit=limit
    )
    return APIResponse(message="Enrollments retrieved successfully", data=enrollments)


@router.get("/course/{course_id}/completion", response_model=APIResponse[CourseCompletionReport])
def get_course_completion(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    skip: int = 0,
    limit: int = 100,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    report = enrollment_service.get_course_completion(
        db, course_id=course_id, staff=current_admin, skip=skip, limit=limit
    )
    return APIResponse(message="Course completion retrieved successfully", data=report)


@router.get("/{enrollment_id}/progress", response_model=APIResponse[EnrollmentProgressDetail])
def get_enrollment_progress(
    *,
    db: Session = Depends(deps.get_db),
    enrollment_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    detail = enrollment_service.get_enrollment_progress(db, enrollment_id=enrollment_id, staff=current_admin)
    return APIResponse(message="Enrollment progress retrieved successfully", data=detail)


@router.put("/{enrollment_id}/status", response_model=APIResponse[Enrollment])
def update_enrollment_status(
    *,
    db: Session = Depends(deps.get_db),
    enrollment_id: int,
    status_in: EnrollmentStatusUpdate,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    enrollment = enrollment_service.update_status(db, enrollment_id=enrollment_id, status_in=status_in)
    return APIResponse(message="Enrollment status updated successfully", data=enrollment)


@router.delete("/{enrollment_id}", response_model=APIResponse[Enrollment])
def delete_enrollment(
    *,
    db: Session = Depends(deps.get_db),
    enrollment_id: int,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    enrollment = enrollment_service.delete_enrollment(db, enrollment_id=enrollment_id)
    return APIResponse(message="Enrollment deleted successfully", data=enrollment)
