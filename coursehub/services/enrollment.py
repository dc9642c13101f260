import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.constants import CourseStatusEnum, EnrollmentStatusEnum
from coursehub.crud.assignment import assignment as crud_assignment
from coursehub.crud.course import course as crud_course
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.crud.material import material as crud_material
from coursehub.crud.progress import progress as crud_progress
from coursehub.models.admin import Admin
from coursehub.models.student import Student
from coursehub.schemas.enrollment import (
    CourseCompletionReport,
    Enrollment as EnrollmentSchema,
    EnrollmentProgressDetail,
    EnrollmentStatusUpdate,
    EnrollmentWithCourse,
    EnrollmentWithStudent,
    StudentCompletion,
    StudentSummary,
)
from coursehub.services.course import course_service
from coursehub.services.course_progress import course_progress_service
from coursehub.utils.dates import utcnow

logger = logging.getLogger(__name__)


class EnrollmentService:

    def _get_or_raise(self, db: Session, enrollment_id: int):
        enrollment = crud_enrollment.get(db, id=enrollment_id)
        if not enrollment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found.")
        return enrollment

    def enroll(self, db: Session, course_id: int, current_student: Student) -> EnrollmentWithCourse:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        if course.status != CourseStatusEnum.PUBLISHED or not course.is_public:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This course is not open for enrollment."
            )

        duplicate = HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Already enrolled in this course")
        if crud_enrollment.get_by_student_and_course(db, student_id=current_student.id, course_id=course.id):
            raise duplicate

        try:
            enrollment = crud_enrollment.create(
                db,
                obj_in={
                    "student_id": current_student.id,
                    "course_id": course.id,
                    "status": EnrollmentStatusEnum.ACTIVE,
                    "progress_percentage": 0,
                    "enrolled_at": utcnow(),
                    "version": 0,
                },
            )
        except IntegrityError:
            db.rollback()
            raise duplicate

        logger.info("Student %s enrolled in course %s", current_student.id, course.id)
        return EnrollmentWithCourse.model_validate(crud_enrollment.get(db, id=enrollment.id))

    def list_student_enrollments(self, db: Session, current_student: Student) -> List[EnrollmentWithCourse]:
        return [
            EnrollmentWithCourse.model_validate(e)
            for e in crud_enrollment.get_by_student(db, student_id=current_student.id)
        ]

    def list_course_enrollments(
        self, db: Session, course_id: int, staff: Admin, skip: int = 0, limit: int = 100
    ) -> List[EnrollmentWithStudent]:
        course_service.get_managed_course(db, course_id, staff)
        return [
            EnrollmentWithStudent.model_validate(e)
            for e in crud_enrollment.get_by_course(db, course_id=course_id, skip=skip, limit=limit)
        ]

    def get_course_completion(
        self, db: Session, course_id: int, staff: Admin, skip: int = 0, limit: int = 100
    ) -> CourseCompletionReport:
        """Recount every listed enrollment of a managed course without writing anything back."""
        course = course_service.get_managed_course(db, course_id, staff)

        students = []
        for enrollment in crud_enrollment.get_by_course(db, course_id=course.id, skip=skip, limit=limit):
            stats = course_progress_service.calculate_course_progress(
                db, student_id=enrollment.student_id, course_id=course.id
            )
            students.append(
                StudentCompletion(
                    enrollment_id=enrollment.id,
                    student=StudentSummary.model_validate(enrollment.student),
                    status=enrollment.status,
                    stored_percentage=enrollment.progress_percentage,
                    enrolled_at=enrollment.enrolled_at,
                    completed_at=enrollment.completed_at,
                    stats=stats,
                )
            )

        average = 0
        if students:
            total = sum(s.stats.progress_percentage for s in students)
            average = (2 * total + len(students)) // (2 * len(students))

        return CourseCompletionReport(
            course_id=course.id,
            course_title=course.title,
            total_students=len(students),
            total_items=(
                crud_material.count_by_course(db, course_id=course.id)
                + crud_assignment.count_by_course(db, course_id=course.id)
            ),
            average_completion=average,
            students=students,
        )

    def get_enrollment_progress(self, db: Session, enrollment_id: int, staff: Admin) -> EnrollmentProgressDetail:
        enrollment = self._get_or_raise(db, enrollment_id)
        course_service.get_managed_course(db, enrollment.course_id, staff)
        return course_progress_service.build_progress_detail(db, enrollment)

    def update_status(self, db: Session, enrollment_id: int, status_in: EnrollmentStatusUpdate) -> EnrollmentSchema:
        enrollment = self._get_or_raise(db, enrollment_id)

        values = {"status": status_in.status}
        if status_in.status == EnrollmentStatusEnum.COMPLETED and enrollment.completed_at is None:
            values["completed_at"] = utcnow()
        elif status_in.status != EnrollmentStatusEnum.COMPLETED:
            values["completed_at"] = None

        # Goes through the version check so an in-flight progress recount notices the change.
        applied = crud_enrollment.compare_and_set(
            db, enrollment_id=enrollment.id, expected_version=enrollment.version, values=values
        )
        if not applied:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Enrollment changed while updating. Please retry."
            )
        db.commit()
        db.refresh(enrollment)

        logger.info("Enrollment %s set to %s", enrollment.id, status_in.status.value)
        return EnrollmentSchema.model_validate(enrollment)

    def delete_enrollment(self, db: Session, enrollment_id: int) -> EnrollmentSchema:
        enrollment = self._get_or_raise(db, enrollment_id)
        enrollment_data = EnrollmentSchema.model_validate(enrollment)

        crud_progress.delete_by_student_and_course(
            db, student_id=enrollment.student_id, course_id=enrollment.course_id, commit=False
        )
        crud_enrollment.delete(db, id=enrollment.id)
        return enrollment_data


enrollment_service = EnrollmentService()
