from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.models.student import Student as StudentModel
from coursehub.schemas.assignment import AssignmentSubmission, StudentAssignment, SubmissionCreate, SubmissionResult
from coursehub.schemas.response import APIResponse
from coursehub.services.assignment import assignment_service
from coursehub.utils import deps

router = APIRouter()


@router.get("/courses/{course_id}/assignments", response_model=APIResponse[List[StudentAssignment]])
def list_assignments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    assignments = assignment_service.list_student_assignments(db, course_id=course_id, current_student=current_student)
    return APIResponse(message="Assignments retrieved successfully", data=assignments)


@router.post(
    "/assignments/{assignment_id}/submit",
    response_model=APIResponse[SubmissionResult],
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    *,
    db: Session = Depends(deps.get_db),
    assignment_id: int,
    submission_in: SubmissionCreate,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    result = assignment_service.submit_assignment(
        db, assignment_id=assignment_id, submission_in=submission_in, current_student=current_student
    )
    return APIResponse(message="Assignment submitted successfully", data=result)


@router.get("/assignments/{assignment_id}/submission", response_model=APIResponse[Optional[AssignmentSubmission]])
def get_submission(
    *,
    db: Session = Depends(deps.get_db),
    assignment_id: int,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    submission = assignment_service.get_own_submission(db, assignment_id=assignment_id, current_student=current_student)
    return APIResponse(message="Submission retrieved successfully", data=submission)
