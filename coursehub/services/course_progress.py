import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.constants import EnrollmentStatusEnum
from coursehub.crud.assignment import assignment as crud_assignment
from coursehub.crud.assignment_submission import assignment_submission as crud_submission
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.crud.material import material as crud_material
from coursehub.crud.progress import progress as crud_progress
from coursehub.models.enrollment import Enrollment
from coursehub.models.student import Student
from coursehub.schemas.enrollment import (
    Enrollment as EnrollmentSchema,
    EnrollmentProgressDetail,
    MaterialWithProgress,
    ProgressDetailStats,
)
from coursehub.schemas.assignment import AssignmentSubmission, StudentAssignment
from coursehub.schemas.progress import MaterialCompletion, Progress, ProgressStats, ProgressUpdate
from coursehub.utils.dates import utcnow

logger = logging.getLogger(__name__)


class ProgressAggregationError(Exception):
    """The recomputed percentage could not be written to the enrollment."""

    def __init__(self, student_id: int, course_id: int, reason: str, stats: Optional[ProgressStats] = None):
        self.student_id = student_id
        self.course_id = course_id
        self.reason = reason
        self.stats = stats
        super().__init__(f"Progress for student {student_id} in course {course_id} not saved: {reason}")


def calculate_progress_from_counts(completed_items: int, total_items: int) -> int:
    """Whole percentage, halves rounded up. An empty course is at 0."""
    if total_items <= 0:
        return 0
    completed_items = max(0, min(completed_items, total_items))
    return (200 * completed_items + total_items) // (2 * total_items)


class CourseProgressService:

    def _get_or_raise_enrollment(self, db: Session, student_id: int, course_id: int) -> Enrollment:
        enrollment = crud_enrollment.get_by_student_and_course(db, student_id=student_id, course_id=course_id)
        if not enrollment:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must be enrolled in this course to access its content."
            )
        return enrollment

    def _get_or_raise_material(self, db: Session, material_id: int):
        material = crud_material.get(db, id=material_id)
        if not material:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found.")
        return material

    def _status_changes(self, state, percentage: int) -> Dict[str, Any]:
        values: Dict[str, Any] = {"progress_percentage": percentage}

        if state.status == EnrollmentStatusEnum.ACTIVE and percentage >= 100:
            values["status"] = EnrollmentStatusEnum.COMPLETED
            if state.completed_at is None:
                values["completed_at"] = utcnow()
        elif (
            state.status == EnrollmentStatusEnum.COMPLETED
            and percentage < 100
            and settings.REVERT_COMPLETION_ON_PROGRESS_DROP
        ):
            values["status"] = EnrollmentStatusEnum.ACTIVE
            values["completed_at"] = None

        return values

    def calculate_course_progress(self, db: Session, student_id: int, course_id: int) -> ProgressStats:
        total_materials = crud_material.count_by_course(db, course_id=course_id)
        total_assignments = crud_assignment.count_by_course(db, course_id=course_id)
        completed_materials = crud_progress.count_completed(db, student_id=student_id, course_id=course_id)
        submitted_assignments = crud_submission.count_by_student_and_course(
            db, student_id=student_id, course_id=course_id
        )

        total_items = total_materials + total_assignments
        completed_items = completed_materials + submitted_assignments

        return ProgressStats(
            total_materials=total_materials,
            completed_materials=completed_materials,
            total_assignments=total_assignments,
            submitted_assignments=submitted_assignments,
            total_items=total_items,
            completed_items=completed_items,
            progress_percentage=calculate_progress_from_counts(completed_items, total_items),
        )

    def recalculate_and_update_progress(self, db: Session, student_id: int, course_id: int) -> ProgressStats:
        """Recount the student's items and store the percentage on the enrollment.

        The write is conditional on the enrollment version read before counting.
        If another writer bumped it in between, the counts are redone against the
        newer state. Raises ProgressAggregationError when the write keeps losing
        or the database refuses it, and LookupError if there is no enrollment.
        """
        stats: Optional[ProgressStats] = None
        attempts = max(1, settings.PROGRESS_WRITE_MAX_RETRIES)

        for attempt in range(1, attempts + 1):
            try:
                state = crud_enrollment.get_progress_state(db, student_id=student_id, course_id=course_id)
                if state is None:
                    raise LookupError(f"No enrollment for student {student_id} in course {course_id}")

                stats = self.calculate_course_progress(db, student_id=student_id, course_id=course_id)
                applied = crud_enrollment.compare_and_set(
                    db,
                    enrollment_id=state.id,
                    expected_version=state.version,
                    values=self._status_changes(state, stats.progress_percentage),
                )
                if applied:
                    db.commit()
                    return stats
                db.rollback()
            except SQLAlchemyError as exc:
                db.rollback()
                raise ProgressAggregationError(student_id, course_id, str(exc), stats) from exc

            logger.info(
                "Enrollment for student %s in course %s changed while recounting (attempt %s/%s)",
                student_id, course_id, attempt, attempts
            )

        raise ProgressAggregationError(student_id, course_id, "concurrent writes exhausted retries", stats)

    def sync_progress(self, db: Session, student_id: int, course_id: int) -> ProgressUpdate:
        """Run the aggregator for a request that has already committed its own change."""
        try:
            stats = self.recalculate_and_update_progress(db, student_id=student_id, course_id=course_id)
        except ProgressAggregationError as exc:
            logger.error("Progress aggregation failed: %s", exc)
            stored_percentage = 0
            try:
                stored = crud_enrollment.get_by_student_and_course(db, student_id=student_id, course_id=course_id)
                if stored:
                    stored_percentage = stored.progress_percentage
            except SQLAlchemyError:
                db.rollback()
                logger.exception(
                    "Could not read stored progress for student %s in course %s", student_id, course_id
                )
            return ProgressUpdate(
                progress_percentage=stored_percentage,
                total_items=exc.stats.total_items if exc.stats else 0,
                completed_items=exc.stats.completed_items if exc.stats else 0,
                progress_synced=False,
            )

        return ProgressUpdate(
            progress_percentage=stats.progress_percentage,
            total_items=stats.total_items,
            completed_items=stats.completed_items,
        )

    def view_material(self, db: Session, material_id: int, current_student: Student):
        material = self._get_or_raise_material(db, material_id)
        self._get_or_raise_enrollment(db, current_student.id, material.course_id)

        record = crud_progress.get_or_create(
            db, student_id=current_student.id, course_id=material.course_id, material_id=material.id
        )
        crud_progress.record_access(db, record=record)
        return material

    def complete_material(self, db: Session, material_id: int, current_student: Student) -> MaterialCompletion:
        material = self._get_or_raise_material(db, material_id)
        self._get_or_raise_enrollment(db, current_student.id, material.course_id)

        record = crud_progress.get_or_create(
            db, student_id=current_student.id, course_id=material.course_id, material_id=material.id
        )
        crud_progress.mark_completed(db, record=record)

        update = self.sync_progress(db, student_id=current_student.id, course_id=material.course_id)
        return MaterialCompletion(material_id=material.id, is_completed=True, **update.model_dump())

    def get_progress_detail(self, db: Session, course_id: int, current_student: Student) -> EnrollmentProgressDetail:
        enrollment = crud_enrollment.get_by_student_and_course(db, student_id=current_student.id, course_id=course_id)
        if not enrollment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found.")
        return self.build_progress_detail(db, enrollment)

    def build_progress_detail(self, db: Session, enrollment: Enrollment) -> EnrollmentProgressDetail:
        student_id, course_id = enrollment.student_id, enrollment.course_id

        records = {
            p.material_id: p
            for p in crud_progress.get_by_student_and_course(db, student_id=student_id, course_id=course_id)
        }
        submissions = {
            s.assignment_id: s
            for s in crud_submission.get_by_student_and_course(db, student_id=student_id, course_id=course_id)
        }

        materials = []
        for material in crud_material.get_by_course(db, course_id=course_id):
            record = records.get(material.id)
            item = MaterialWithProgress.model_validate(material)
            item.progress = Progress.model_validate(record) if record else None
            materials.append(item)

        assignments = []
        for assignment in crud_assignment.get_by_course(db, course_id=course_id):
            submission = submissions.get(assignment.id)
            item = StudentAssignment.model_validate(assignment)
            item.submission = AssignmentSubmission.model_validate(submission) if submission else None
            assignments.append(item)

        stats = self.calculate_course_progress(db, student_id=student_id, course_id=course_id)
        total_time_spent = sum(r.time_spent for r in records.values())

        return EnrollmentProgressDetail(
            enrollment=EnrollmentSchema.model_validate(enrollment),
            materials=materials,
            assignments=assignments,
            stats=ProgressDetailStats(**stats.model_dump(), total_time_spent=total_time_spent),
        )


course_progress_service = CourseProgressService()
