import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.constants import SubmissionStatusEnum
from coursehub.crud.assignment import assignment as crud_assignment
from coursehub.crud.assignment_submission import assignment_submission as crud_submission
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.models.admin import Admin
from coursehub.models.student import Student
from coursehub.schemas.assignment import (
    Assignment as AssignmentSchema,
    AssignmentCreate,
    AssignmentSubmission as SubmissionSchema,
    AssignmentUpdate,
    GradeSubmissionRequest,
    StudentAssignment,
    SubmissionCreate,
    SubmissionResult,
)
from coursehub.services.course import course_service
from coursehub.services.course_progress import course_progress_service
from coursehub.utils.dates import as_naive_utc, utcnow

logger = logging.getLogger(__name__)


class AssignmentService:

    def _get_or_raise(self, db: Session, assignment_id: int):
        assignment = crud_assignment.get(db, id=assignment_id)
        if not assignment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found.")
        return assignment

    def _get_managed_assignment(self, db: Session, assignment_id: int, staff: Admin):
        assignment = self._get_or_raise(db, assignment_id)
        course_service.get_managed_course(db, assignment.course_id, staff)
        return assignment

    def _require_enrollment(self, db: Session, student_id: int, course_id: int):
        enrollment = crud_enrollment.get_by_student_and_course(db, student_id=student_id, course_id=course_id)
        if not enrollment:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must be enrolled in this course to access its assignments."
            )
        return enrollment

    # Staff

    def create_assignment(self, db: Session, assignment_in: AssignmentCreate, staff: Admin) -> AssignmentSchema:
        course_service.get_managed_course(db, assignment_in.course_id, staff)

        assignment_data = assignment_in.model_dump()
        assignment_data["due_date"] = as_naive_utc(assignment_in.due_date)
        assignment_data["max_score"] = assignment_in.max_score or settings.DEFAULT_ASSIGNMENT_MAX_SCORE
        assignment_data["creator_id"] = staff.id
        return AssignmentSchema.model_validate(crud_assignment.create(db, obj_in=assignment_data))

    def update_assignment(
        self, db: Session, assignment_id: int, assignment_in: AssignmentUpdate, staff: Admin
    ) -> AssignmentSchema:
        assignment = self._get_managed_assignment(db, assignment_id, staff)
        changes = assignment_in.model_dump(exclude_unset=True)
        if "due_date" in changes:
            changes["due_date"] = as_naive_utc(changes["due_date"])
        if "max_score" in changes and changes["max_score"] is None:
            del changes["max_score"]
        return AssignmentSchema.model_validate(crud_assignment.update(db, db_obj=assignment, obj_in=changes))

    def delete_assignment(self, db: Session, assignment_id: int, staff: Admin) -> AssignmentSchema:
        assignment = self._get_managed_assignment(db, assignment_id, staff)
        assignment_data = AssignmentSchema.model_validate(assignment)
        crud_assignment.delete(db, id=assignment.id)
        return assignment_data

    def list_course_assignments(self, db: Session, course_id: int, staff: Admin) -> List[AssignmentSchema]:
        course_service.get_managed_course(db, course_id, staff)
        return [AssignmentSchema.model_validate(a) for a in crud_assignment.get_by_course(db, course_id=course_id)]

    def list_submissions(self, db: Session, assignment_id: int, staff: Admin) -> List[SubmissionSchema]:
        self._get_managed_assignment(db, assignment_id, staff)
        return [SubmissionSchema.model_validate(s) for s in crud_submission.get_by_assignment(db, assignment_id)]

    def grade_submission(
        self, db: Session, submission_id: int, grade_in: GradeSubmissionRequest, staff: Admin
    ) -> SubmissionSchema:
        submission = crud_submission.get(db, id=submission_id)
        if not submission:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found.")

        assignment = self._get_managed_assignment(db, submission.assignment_id, staff)
        if grade_in.score > assignment.max_score:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Score cannot exceed the maximum of {assignment.max_score}."
            )

        graded = crud_submission.update(
            db,
            db_obj=submission,
            obj_in={
                "score": grade_in.score,
                "feedback": grade_in.feedback,
                "status": SubmissionStatusEnum.GRADED,
                "graded_at": utcnow(),
            },
        )
        return SubmissionSchema.model_validate(graded)

    # Students

    def list_student_assignments(self, db: Session, course_id: int, current_student: Student) -> List[StudentAssignment]:
        self._require_enrollment(db, current_student.id, course_id)

        submissions = {
            s.assignment_id: s
            for s in crud_submission.get_by_student_and_course(db, student_id=current_student.id, course_id=course_id)
        }
        results = []
        for assignment in crud_assignment.get_by_course(db, course_id=course_id):
            item = StudentAssignment.model_validate(assignment)
            submission = submissions.get(assignment.id)
            item.submission = SubmissionSchema.model_validate(submission) if submission else None
            results.append(item)
        return results

    def submit_assignment(
        self, db: Session, assignment_id: int, submission_in: SubmissionCreate, current_student: Student
    ) -> SubmissionResult:
        assignment = self._get_or_raise(db, assignment_id)
        self._require_enrollment(db, current_student.id, assignment.course_id)

        duplicate = HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already submitted this assignment."
        )
        if crud_submission.get_by_assignment_and_student(db, assignment.id, current_student.id):
            raise duplicate

        now = utcnow()
        if assignment.due_date is not None and now > assignment.due_date:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The due date for this assignment has passed.")

        try:
            submission = crud_submission.create(
                db,
                obj_in={
                    "assignment_id": assignment.id,
                    "student_id": current_student.id,
                    "content": submission_in.content or "",
                    "file_url": submission_in.file_url,
                    "status": SubmissionStatusEnum.SUBMITTED,
                    "submitted_at": now,
                },
            )
        except IntegrityError:
            db.rollback()
            raise duplicate

        submission_data = SubmissionSchema.model_validate(submission)
        progress_update = course_progress_service.sync_progress(
            db, student_id=current_student.id, course_id=assignment.course_id
        )
        return SubmissionResult(submission=submission_data, progress_update=progress_update)

    def get_own_submission(self, db: Session, assignment_id: int, current_student: Student) -> Optional[SubmissionSchema]:
        assignment = self._get_or_raise(db, assignment_id)
        self._require_enrollment(db, current_student.id, assignment.course_id)

        submission = crud_submission.get_by_assignment_and_student(db, assignment.id, current_student.id)
        return SubmissionSchema.model_validate(submission) if submission else None


assignment_service = AssignmentService()
