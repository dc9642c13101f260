from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.crud.course import course as crud_course
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.crud.review import review as crud_review
from coursehub.models.student import Student
from coursehub.schemas.review import (
    CourseReviewSummary,
    Review as ReviewSchema,
    ReviewCreate,
    ReviewPagination,
    ReviewWithAuthor,
)


class ReviewService:

    def _get_course_or_raise(self, db: Session, course_id: int):
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        return course

    def submit_review(self, db: Session, review_in: ReviewCreate, current_student: Student) -> Tuple[ReviewSchema, bool]:
        """Create or overwrite the student's review. Returns the review and whether it is new."""
        self._get_course_or_raise(db, review_in.course_id)

        if not crud_enrollment.get_by_student_and_course(db, student_id=current_student.id, course_id=review_in.course_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must be enrolled in this course to review it."
            )

        existed = crud_review.get_by_student_and_course(db, current_student.id, review_in.course_id) is not None
        try:
            review = crud_review.upsert(db, student_id=current_student.id, obj_in=review_in)
        except IntegrityError:
            # Lost an insert race against our own duplicate request; overwrite instead.
            db.rollback()
            existed = True
            review = crud_review.upsert(db, student_id=current_student.id, obj_in=review_in)

        return ReviewSchema.model_validate(review), not existed

    def get_course_reviews(self, db: Session, course_id: int, page: int = 1, limit: int = 10) -> CourseReviewSummary:
        self._get_course_or_raise(db, course_id)

        total = crud_review.count_by_course(db, course_id=course_id)
        reviews = crud_review.get_by_course(db, course_id=course_id, skip=(page - 1) * limit, limit=limit)
        total_pages = (total + limit - 1) // limit

        return CourseReviewSummary(
            reviews=[ReviewWithAuthor.model_validate(r) for r in reviews],
            average_rating=crud_review.get_average_rating(db, course_id=course_id),
            total_reviews=total,
            rating_distribution=crud_review.get_rating_distribution(db, course_id=course_id),
            pagination=ReviewPagination(
                page=page,
                limit=limit,
                total_pages=total_pages,
                has_more=page < total_pages,
            ),
        )

    def get_own_review(self, db: Session, course_id: int, current_student: Student) -> Optional[ReviewSchema]:
        review = crud_review.get_by_student_and_course(db, current_student.id, course_id)
        return ReviewSchema.model_validate(review) if review else None


review_service = ReviewService()
