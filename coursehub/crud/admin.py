from typing import List

from sqlalchemy.orm import Session

from coursehub.core.constants import AdminRoleEnum
from coursehub.crud.base import CRUDBase
from coursehub.models.admin import Admin
from coursehub.schemas.admin import AdminCreate


class CRUDAdmin(CRUDBase[Admin, AdminCreate, AdminCreate]):

    def count(self, db: Session) -> int:
        return db.query(Admin).count()

    def get_tutors(self, db: Session, skip: int = 0, limit: int = 100) -> List[Admin]:
        return (
            db.query(Admin)
            .filter(Admin.role == AdminRoleEnum.TUTOR)
            .order_by(Admin.id)
            .offset(skip)
            .limit(limit)
            .all()
        )


admin = CRUDAdmin(Admin)
