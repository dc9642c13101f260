from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from coursehub.models.student import Student as StudentModel
from coursehub.schemas.response import APIResponse
from coursehub.schemas.review import CourseReviewSummary, Review, ReviewCreate
from coursehub.services.review import review_service
from coursehub.utils import deps

router = APIRouter()


@router.post("/student/reviews", response_model=APIResponse[Review])
def submit_review(
    *,
    db: Session = Depends(deps.get_db),
    review_in: ReviewCreate,
    response: Response,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    review, created = review_service.submit_review(db, review_in=review_in, current_student=current_student)
    if created:
        response.status_code = status.HTTP_201_CREATED
        return APIResponse(message="Review submitted successfully", data=review)
    return APIResponse(message="Review updated successfully", data=review)


@router.get("/courses/{course_id}/reviews", response_model=APIResponse[CourseReviewSummary])
def list_course_reviews(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100)
):
    summary = review_service.get_course_reviews(db, course_id=course_id, page=page, limit=limit)
    return APIResponse(message="Reviews retrieved successfully", data=summary)


@router.get("/student/reviews/{course_id}", response_model=APIResponse[Optional[Review]])
def get_own_review(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    review = review_service.get_own_review(db, course_id=course_id, current_student=current_student)
    return APIResponse(message="Review retrieved successfully", data=review)
