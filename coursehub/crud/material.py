from typing import List

from sqlalchemy.orm import Session

from coursehub.crud.base import CRUDBase
from coursehub.models.material import Material
from coursehub.schemas.material import MaterialCreate, MaterialUpdate


class CRUDMaterial(CRUDBase[Material, MaterialCreate, MaterialUpdate]):

    def get_by_course(self, db: Session, course_id: int) -> List[Material]:
        return (
            db.query(Material)
            .filter(Material.course_id == course_id)
            .order_by(Material.order_index, Material.id)
            .all()
        )

    def count_by_course(self, db: Session, course_id: int) -> int:
        return db.query(Material).filter(Material.course_id == course_id).count()


material = CRUDMaterial(Material)
