from typing import Optional

from sqlalchemy.orm import Session

from coursehub.crud.base import CRUDBase
from coursehub.models.category import Category
from coursehub.schemas.category import CategoryCreate, CategoryUpdate


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryUpdate]):

    def get_by_name(self, db: Session, name: str) -> Optional[Category]:
        return db.query(Category).filter(Category.name == name).first()


category = CRUDCategory(Category)
