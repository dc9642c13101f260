from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from coursehub.core.constants import CourseLevelEnum
from coursehub.crud.base import PaginatedResponse
from coursehub.models.student import Student as StudentModel
from coursehub.schemas.course import Course, CourseDetail
from coursehub.schemas.enrollment import EnrollmentCreate, EnrollmentProgressDetail, EnrollmentWithCourse
from coursehub.schemas.response import APIResponse
from coursehub.services.course import course_service
from coursehub.services.course_progress import course_progress_service
from coursehub.services.enrollment import enrollment_service
from coursehub.utils import deps

router = APIRouter()


@router.get("/courses", response_model=APIResponse[PaginatedResponse[Course]])
def list_courses(
    *,
    db: Session = Depends(deps.get_db),
    category_id: Optional[int] = None,
    level: Optional[CourseLevelEnum] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100)
):
    courses = course_service.list_published_courses(
        db, category_id=category_id, level=level, search=search, page=page, size=size
    )
    return APIResponse(message="Courses retrieved successfully", data=courses)


@router.get("/courses/{course_id}", response_model=APIResponse[CourseDetail])
def get_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_student: Optional[StudentModel] = Depends(deps.get_optional_student)
):
    course = course_service.get_course_detail(db, course_id=course_id, current_student=current_student)
    return APIResponse(message="Course retrieved successfully", data=course)


@router.post("/enrollments", response_model=APIResponse[EnrollmentWithCourse], status_code=status.HTTP_201_CREATED)
def enroll(
    *,
    db: Session = Depends(deps.get_db),
    enrollment_in: EnrollmentCreate,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    enrollment = enrollment_service.enroll(db, course_id=enrollment_in.course_id, current_student=current_student)
    return APIResponse(message="Enrolled successfully", data=enrollment)


@router.get("/enrollments", response_model=APIResponse[List[EnrollmentWithCourse]])
def list_enrollments(
    *,
    db: Session = Depends(deps.get_db),
    current_student: StudentModel = Depends(deps.get_current_student)
):
    enrollments = enrollment_service.list_student_enrollments(db, current_student=current_student)
    return APIResponse(message="Enrollments retrieved successfully", data=enrollments)


@router.get("/enrollments/{course_id}/progress", response_model=APIResponse[EnrollmentProgressDetail])
def get_progress(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    detail = course_progress_service.get_progress_detail(db, course_id=course_id, current_student=current_student)
    return APIResponse(message="Progress retrieved successfully", data=detail)
