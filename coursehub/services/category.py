from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from coursehub.crud.category import category as crud_category
from coursehub.schemas.category import Category as CategorySchema, CategoryCreate


class CategoryService:

    def create_category(self, db: Session, category_in: CategoryCreate) -> CategorySchema:
        if crud_category.get_by_name(db, name=category_in.name):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category already exists.")
        return CategorySchema.model_validate(crud_category.create(db, obj_in=category_in))

    def list_categories(self, db: Session) -> List[CategorySchema]:
        return [CategorySchema.model_validate(c) for c in crud_category.get_multi(db, limit=1000)]


category_service = CategoryService()
