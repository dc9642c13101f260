from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from coursehub.crud.course_module import course_module as crud_module
from coursehub.crud.material import material as crud_material
from coursehub.models.admin import Admin
from coursehub.schemas.material import Material as MaterialSchema, MaterialCreate, MaterialUpdate
from coursehub.services.course import course_service


class MaterialService:

    def _validate_module(self, db: Session, module_id: Optional[int], course_id: int) -> None:
        if module_id is None:
            return
        module = crud_module.get(db, id=module_id)
        if not module or module.course_id != course_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Module does not belong to this course."
            )

    def _get_managed_material(self, db: Session, material_id: int, staff: Admin):
        material = crud_material.get(db, id=material_id)
        if not material:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found.")
        course_service.get_managed_course(db, material.course_id, staff)
        return material

    def create_material(self, db: Session, material_in: MaterialCreate, staff: Admin) -> MaterialSchema:
        course_service.get_managed_course(db, material_in.course_id, staff)
        self._validate_module(db, material_in.module_id, material_in.course_id)
        return MaterialSchema.model_validate(crud_material.create(db, obj_in=material_in))

    def update_material(self, db: Session, material_id: int, material_in: MaterialUpdate, staff: Admin) -> MaterialSchema:
        material = self._get_managed_material(db, material_id, staff)
        changes = material_in.model_dump(exclude_unset=True)
        if "module_id" in changes:
            self._validate_module(db, changes["module_id"], material.course_id)
        return MaterialSchema.model_validate(crud_material.update(db, db_obj=material, obj_in=changes))

    def delete_material(self, db: Session, material_id: int, staff: Admin) -> MaterialSchema:
        material = self._get_managed_material(db, material_id, staff)
        material_data = MaterialSchema.model_validate(material)
        crud_material.delete(db, id=material.id)
        return material_data

    def list_materials(self, db: Session, course_id: int, staff: Admin) -> List[MaterialSchema]:
        course_service.get_managed_course(db, course_id, staff)
        return [MaterialSchema.model_validate(m) for m in crud_material.get_by_course(db, course_id=course_id)]


material_service = MaterialService()
