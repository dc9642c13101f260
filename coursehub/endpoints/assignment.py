from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentSubmission,
    AssignmentUpdate,
    GradeSubmissionRequest,
)
from coursehub.schemas.response import APIResponse
from coursehub.services.assignment import assignment_service
from coursehub.utils import deps

router = APIRouter()


@router.post("", response_model=APIResponse[Assignment], status_code=status.HTTP_201_CREATED)
def create_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assignment_in: AssignmentCreate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    assignment = assignment_service.create_assignment(db, assignment_in=assignment_in, staff=current_admin)
    return APIResponse(message="Assignment created successfully", data=assignment)


@router.get("/course/{course_id}", response_model=APIResponse[List[Assignment]])
def list_assignments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    assignments = assignment_service.list_course_assignments(db, course_id=course_id, staff=current_admin)
    return APIResponse(message="Assignments retrieved successfully", data=assignments)


@router.put("/{assignment_id}", response_model=APIResponse[Assignment])
def update_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assignment_id: int,
    assignment_in: AssignmentUpdate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    assignment = assignment_service.update_assignment(
        db, assignment_id=assignment_id, assignment_in=assignment_in, staff=current_admin
    )
    return APIResponse(message="Assignment updated successfully", data=assignment)


@router.delete("/{assignment_id}", response_model=APIResponse[Assignment])
def delete_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assignment_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    assignment = assignment_service.delete_assignment(db, assignment_id=assignment_id, staff=current_admin)
    return APIResponse(message="Assignment deleted successfully", data=assignment)


@router.get("/{assignment_id}/submissions", response_model=APIResponse[List[AssignmentSubmission]])
def list_submissions(
    *,
    db: Session = Depends(deps.get_db),
    assignment_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    submissions = assignment_service.list_submissions(db, assignment_id=assignment_id, staff=current_admin)
    return APIResponse(message="Submissions retrieved successfully", data=submissions)


@router.put("/submissions/{submission_id}/grade", response_model=APIResponse[AssignmentSubmission])
def grade_submission(
    *,
    db: Session = Depends(deps.get_transactional_db),
    submission_id: int,
    grade_in: GradeSubmissionRequest,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    submission = assignment_service.grade_submission(
        db, submission_id=submission_id, grade_in=grade_in, staff=current_admin
    )
    return APIResponse(message="Submission graded successfully", data=submission)
