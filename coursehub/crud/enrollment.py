from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from coursehub.crud.base import CRUDBase
from coursehub.models.enrollment import Enrollment
from coursehub.schemas.enrollment import EnrollmentCreate, EnrollmentStatusUpdate


class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentStatusUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Enrollment).options(
            selectinload(Enrollment.student),
            selectinload(Enrollment.course),
        )

    def get(self, db: Session, id: int) -> Optional[Enrollment]:
        return self._query_with_relationships(db).filter(Enrollment.id == id).first()

    def get_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> Optional[Enrollment]:
        return (
            self._query_with_relationships(db)
            .filter(Enrollment.student_id == student_id)
            .filter(Enrollment.course_id == course_id)
            .first()
        )

    def get_by_student(self, db: Session, student_id: int, skip: int = 0, limit: int = 100) -> List[Enrollment]:
        return (
            self._query_with_relationships(db)
            .filter(Enrollment.student_id == student_id)
            .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_course(self, db: Session, course_id: int, skip: int = 0, limit: int = 100) -> List[Enrollment]:
        return (
            self._query_with_relationships(db)
            .filter(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_progress_state(self, db: Session, student_id: int, course_id: int):
        """Current (id, version, status, progress_percentage, completed_at) straight from the database."""
        return (
            db.query(
                Enrollment.id,
                Enrollment.version,
                Enrollment.status,
                Enrollment.progress_percentage,
                Enrollment.completed_at,
            )
            .filter(Enrollment.student_id == student_id)
            .filter(Enrollment.course_id == course_id)
            .first()
        )

    def compare_and_set(
        self, db: Session, *, enrollment_id: int, expected_version: int, values: Dict[str, Any]
    ) -> bool:
        """Apply ``values`` only if nobody has written since ``expected_version`` was read.

        Bumps the version on success. Does not commit.
        """
        changes = {getattr(Enrollment, key): value for key, value in values.items()}
        changes[Enrollment.version] = Enrollment.version + 1
        updated = (
            db.query(Enrollment)
            .filter(Enrollment.id == enrollment_id, Enrollment.version == expected_version)
            .update(changes, synchronize_session=False)
        )
        return updated == 1


enrollment = CRUDEnrollment(Enrollment)
