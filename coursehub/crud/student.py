from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from coursehub.crud.base import CRUDBase
from coursehub.models.student import Student
from coursehub.schemas.student import StudentRegister, StudentUpdate
from coursehub.utils.dates import utcnow


class CRUDStudent(CRUDBase[Student, StudentRegister, StudentUpdate]):

    def _query_matching(self, db: Session, query: Optional[str]):
        q = db.query(Student)
        if query:
            pattern = f"%{query}%"
            q = q.filter(or_(
                Student.email.ilike(pattern),
                Student.first_name.ilike(pattern),
                Student.last_name.ilike(pattern),
            ))
        return q

    def search(self, db: Session, *, query: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Student]:
        return self._query_matching(db, query).order_by(Student.created_at.desc(), Student.id.desc()).offset(skip).limit(limit).all()

    def count(self, db: Session, *, query: Optional[str] = None) -> int:
        return self._query_matching(db, query).count()

    def start_session(self, db: Session, *, student_id: int, marker: str, client_ip: Optional[str]) -> bool:
        """Overwrite the stored session marker in a single UPDATE.

        Whatever marker was there before stops matching the moment this commits.
        """
        updated = (
            db.query(Student)
            .filter(Student.id == student_id)
            .update(
                {
                    Student.active_session_token: marker,
                    Student.session_version: Student.session_version + 1,
                    Student.last_login_at: utcnow(),
                    Student.last_login_ip: client_ip,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

    def end_session(self, db: Session, *, student_id: int, marker: str) -> bool:
        """Clear the marker only if it is still the one presented."""
        updated = (
            db.query(Student)
            .filter(Student.id == student_id, Student.active_session_token == marker)
            .update(
                {
                    Student.active_session_token: None,
                    Student.session_version: Student.session_version + 1,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

    def revoke_sessions(self, db: Session, *, student_id: int, commit: bool = True) -> None:
        (
            db.query(Student)
            .filter(Student.id == student_id)
            .update(
                {
                    Student.active_session_token: None,
                    Student.session_version: Student.session_version + 1,
                },
                synchronize_session=False,
            )
        )
        if commit:
            db.commit()


student = CRUDStudent(Student)
