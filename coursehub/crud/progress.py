import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.crud.base import CRUDBase
from coursehub.models.material import Material
from coursehub.models.progress import Progress
from coursehub.schemas.progress import Progress as ProgressSchema
from coursehub.utils.dates import utcnow

logger = logging.getLogger(__name__)


class CRUDProgress(CRUDBase[Progress, ProgressSchema, ProgressSchema]):

    def get_by_student_and_material(
        self, db: Session, student_id: int, course_id: int, material_id: int
    ) -> Optional[Progress]:
        return (
            db.query(Progress)
            .filter(Progress.student_id == student_id)
            .filter(Progress.course_id == course_id)
            .filter(Progress.material_id == material_id)
            .first()
        )

    def get_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> List[Progress]:
        return (
            db.query(Progress)
            .filter(Progress.student_id == student_id)
            .filter(Progress.course_id == course_id)
            .all()
        )

    def get_or_create(self, db: Session, *, student_id: int, course_id: int, material_id: int) -> Progress:
        """Fetch the (student, course, material) row, inserting it if missing.

        Two requests racing on the insert both end up with the same row: the
        loser hits the unique constraint and reads the winner's row.
        """
        record = self.get_by_student_and_material(db, student_id, course_id, material_id)
        if record:
            return record
        record = Progress(
            student_id=student_id,
            course_id=course_id,
            material_id=material_id,
            is_completed=False,
            time_spent=0,
        )
        db.add(record)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(
                "Progress row for student %s material %s created concurrently", student_id, material_id
            )
            record = self.get_by_student_and_material(db, student_id, course_id, material_id)
            if record is None:
                raise
            return record
        db.refresh(record)
        return record

    def record_access(self, db: Session, *, record: Progress) -> Progress:
        # Increment in SQL so concurrent views are all counted.
        (
            db.query(Progress)
            .filter(Progress.id == record.id)
            .update(
                {Progress.time_spent: Progress.time_spent + 1, Progress.last_accessed: utcnow()},
                synchronize_session=False,
            )
        )
        db.commit()
        db.refresh(record)
        return record

    def mark_completed(self, db: Session, *, record: Progress) -> Progress:
        now = utcnow()
        values = {Progress.last_accessed: now}
        if not record.is_completed:
            values[Progress.is_completed] = True
            values[Progress.completed_at] = now
        db.query(Progress).filter(Progress.id == record.id).update(values, synchronize_session=False)
        db.commit()
        db.refresh(record)
        return record

    def count_completed(self, db: Session, student_id: int, course_id: int) -> int:
        """Completed rows whose material still belongs to the course."""
        return (
            db.query(Progress)
            .join(Material, Material.id == Progress.material_id)
            .filter(Progress.student_id == student_id)
            .filter(Progress.course_id == course_id)
            .filter(Material.course_id == course_id)
            .filter(Progress.is_completed.is_(True))
            .count()
        )

    def delete_by_student_and_course(self, db: Session, student_id: int, course_id: int, commit: bool = True) -> int:
        deleted = (
            db.query(Progress)
            .filter(Progress.student_id == student_id)
            .filter(Progress.course_id == course_id)
            .delete(synchronize_session=False)
        )
        if commit:
            db.commit()
        return deleted


progress = CRUDProgress(Progress)
