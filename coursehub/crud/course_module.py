from typing import List

from sqlalchemy.orm import Session, selectinload

from coursehub.crud.base import CRUDBase
from coursehub.models.course_module import CourseModule
from coursehub.schemas.course_module import CourseModuleCreate, CourseModuleUpdate


class CRUDCourseModule(CRUDBase[CourseModule, CourseModuleCreate, CourseModuleUpdate]):

    def get_by_course(self, db: Session, course_id: int) -> List[CourseModule]:
        return (
            db.query(CourseModule)
            .options(selectinload(CourseModule.materials))
            .filter(CourseModule.course_id == course_id)
            .order_by(CourseModule.order_index, CourseModule.id)
            .all()
        )


course_module = CRUDCourseModule(CourseModule)
