from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from coursehub.core.constants import CourseLevelEnum, CourseStatusEnum
from coursehub.crud.base import CRUDBase
from coursehub.models.course import Course
from coursehub.models.course_module import CourseModule
from coursehub.schemas.course import CourseCreate, CourseUpdate


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Course).options(
            selectinload(Course.modules).selectinload(CourseModule.materials),
            selectinload(Course.materials),
            selectinload(Course.reviews),
            selectinload(Course.enrollments),
            selectinload(Course.category),
        )

    def _query_published(self, db: Session):
        return self._query_with_relationships(db).filter(
            Course.status == CourseStatusEnum.PUBLISHED,
            Course.is_public.is_(True),
        )

    def get(self, db: Session, id: int) -> Optional[Course]:
        return self._query_with_relationships(db).filter(Course.id == id).first()

    def get_published(self, db: Session, id: int) -> Optional[Course]:
        return self._query_published(db).filter(Course.id == id).first()

    def list_published(
        self,
        db: Session,
        *,
        category_id: Optional[int] = None,
        level: Optional[CourseLevelEnum] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Course], int]:
        query = self._query_published(db)
        if category_id is not None:
            query = query.filter(Course.category_id == category_id)
        if level is not None:
            query = query.filter(Course.level == level)
        if search:
            query = query.filter(Course.title.ilike(f"%{search}%"))
        total = query.count()
        items = query.order_by(Course.created_at.desc(), Course.id.desc()).offset(skip).limit(limit).all()
        return items, total

    def list_for_staff(
        self, db: Session, *, staff_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> List[Course]:
        """All courses for an admin (staff_id None), otherwise those the tutor owns or teaches."""
        query = self._query_with_relationships(db)
        if staff_id is not None:
            query = query.filter(or_(Course.creator_id == staff_id, Course.tutor_id == staff_id))
        return query.order_by(Course.id.desc()).offset(skip).limit(limit).all()


course = CRUDCourse(Course)
