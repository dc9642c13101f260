from typing import List

from sqlalchemy.orm import Session

from coursehub.crud.base import CRUDBase
from coursehub.models.assignment import Assignment
from coursehub.schemas.assignment import AssignmentCreate, AssignmentUpdate


class CRUDAssignment(CRUDBase[Assignment, AssignmentCreate, AssignmentUpdate]):

    def get_by_course(self, db: Session, course_id: int) -> List[Assignment]:
        return (
            db.query(Assignment)
            .filter(Assignment.course_id == course_id)
            .order_by(Assignment.due_date.is_(None), Assignment.due_date, Assignment.id)
            .all()
        )

    def count_by_course(self, db: Session, course_id: int) -> int:
        return db.query(Assignment).filter(Assignment.course_id == course_id).count()


assignment = CRUDAssignment(Assignment)
