from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.course import Course, CourseCreate, CourseUpdate
from coursehub.schemas.response import APIResponse
from coursehub.services.course import course_service
from coursehub.utils import deps

router = APIRouter()


@router.post("", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    course = course_service.create_course(db, course_in=course_in, staff=current_admin)
    return APIResponse(message="Course created successfully", data=course)


@router.get("", response_model=APIResponse[List[Course]])
def list_courses(
    *,
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    courses = course_service.list_staff_courses(db, staff=current_admin, skip=skip, limit=limit)
    return APIResponse(message="Courses retrieved successfully", data=courses)


@router.get("/{course_id}", response_model=APIResponse[Course])
def get_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    course = course_service.get_managed_course(db, course_id, current_admin)
    return APIResponse(message="Course retrieved successfully", data=Course.model_validate(course))


@router.put("/{course_id}", response_model=APIResponse[Course])
def update_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    course_in: CourseUpdate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    course = course_service.update_course(db, course_id=course_id, course_in=course_in, staff=current_admin)
    return APIResponse(message="Course updated successfully", data=course)


@router.delete("/{course_id}", response_model=APIResponse[Course])
def delete_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    course = course_service.delete_course(db, course_id=course_id, staff=current_admin)
    return APIResponse(message="Course deleted successfully", data=course)
