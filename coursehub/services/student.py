import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from coursehub.crud.base import PaginatedResponse
from coursehub.crud.student import student as crud_student
from coursehub.schemas.student import Student as StudentSchema

logger = logging.getLogger(__name__)


class StudentService:
    """Staff-side management of student accounts."""

    def list_students(
        self, db: Session, *, search: Optional[str] = None, page: int = 1, size: int = 20
    ) -> PaginatedResponse[StudentSchema]:
        items = crud_student.search(db, query=search, skip=(page - 1) * size, limit=size)
        total = crud_student.count(db, query=search)
        return PaginatedResponse[StudentSchema].build(
            items=[StudentSchema.model_validate(s) for s in items], total=total, page=page, size=size
        )

    def set_blocked(self, db: Session, *, student_id: int, blocked: bool) -> StudentSchema:
        student = crud_student.get(db, id=student_id)
        if not student:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found.")

        crud_student.update(db, db_obj=student, obj_in={"blocked": blocked}, commit=False)
        if blocked:
            crud_student.revoke_sessions(db, student_id=student.id, commit=False)
        db.commit()
        db.refresh(student)

        logger.info("Student %s %s", student.id, "blocked" if blocked else "unblocked")
        return StudentSchema.model_validate(student)


student_service = StudentService()
