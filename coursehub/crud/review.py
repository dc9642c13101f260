from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from coursehub.crud.base import CRUDBase
from coursehub.models.review import Review
from coursehub.schemas.review import ReviewCreate


class CRUDReview(CRUDBase[Review, ReviewCreate, ReviewCreate]):

    def get_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> Optional[Review]:
        return (
            db.query(Review)
            .filter(Review.student_id == student_id)
            .filter(Review.course_id == course_id)
            .first()
        )

    def get_by_course(self, db: Session, course_id: int, skip: int = 0, limit: int = 10) -> List[Review]:
        return (
            db.query(Review)
            .options(selectinload(Review.student))
            .filter(Review.course_id == course_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def upsert(self, db: Session, *, student_id: int, obj_in: ReviewCreate) -> Review:
        existing = self.get_by_student_and_course(db, student_id, obj_in.course_id)
        if existing:
            return self.update(db, db_obj=existing, obj_in={"rating": obj_in.rating, "comment": obj_in.comment})
        return self.create(
            db,
            obj_in={
                "course_id": obj_in.course_id,
                "student_id": student_id,
                "rating": obj_in.rating,
                "comment": obj_in.comment,
            },
        )

    def count_by_course(self, db: Session, course_id: int) -> int:
        return db.query(Review).filter(Review.course_id == course_id).count()

    def get_average_rating(self, db: Session, course_id: int) -> float:
        result = (
            db.query(func.avg(Review.rating))
            .filter(Review.course_id == course_id)
            .scalar()
        )
        return round(float(result), 1) if result else 0.0

    def get_rating_distribution(self, db: Session, course_id: int) -> Dict[int, int]:
        results = (
            db.query(Review.rating, func.count(Review.id))
            .filter(Review.course_id == course_id)
            .group_by(Review.rating)
            .all()
        )

        distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
        for rating, count in results:
            distribution[int(rating)] = count

        return distribution


review = CRUDReview(Review)
