from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from coursehub.crud.base import CRUDBase
from coursehub.models.assignment import Assignment
from coursehub.models.assignment_submission import AssignmentSubmission
from coursehub.schemas.assignment import SubmissionCreate, GradeSubmissionRequest


class CRUDAssignmentSubmission(CRUDBase[AssignmentSubmission, SubmissionCreate, GradeSubmissionRequest]):

    def get_by_assignment_and_student(
        self, db: Session, assignment_id: int, student_id: int
    ) -> Optional[AssignmentSubmission]:
        return (
            db.query(AssignmentSubmission)
            .filter(AssignmentSubmission.assignment_id == assignment_id)
            .filter(AssignmentSubmission.student_id == student_id)
            .first()
        )

    def get_by_assignment(self, db: Session, assignment_id: int) -> List[AssignmentSubmission]:
        return (
            db.query(AssignmentSubmission)
            .options(selectinload(AssignmentSubmission.student))
            .filter(AssignmentSubmission.assignment_id == assignment_id)
            .order_by(AssignmentSubmission.submitted_at.desc())
            .all()
        )

    def get_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> List[AssignmentSubmission]:
        return (
            db.query(AssignmentSubmission)
            .join(Assignment, Assignment.id == AssignmentSubmission.assignment_id)
            .filter(AssignmentSubmission.student_id == student_id)
            .filter(Assignment.course_id == course_id)
            .all()
        )

    def count_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> int:
        # Submissions follow their assignment; a deleted assignment takes its rows with it.
        return (
            db.query(AssignmentSubmission)
            .join(Assignment, Assignment.id == AssignmentSubmission.assignment_id)
            .filter(AssignmentSubmission.student_id == student_id)
            .filter(Assignment.course_id == course_id)
            .count()
        )


assignment_submission = CRUDAssignmentSubmission(AssignmentSubmission)
