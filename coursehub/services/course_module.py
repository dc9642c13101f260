from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from coursehub.crud.course_module import course_module as crud_module
from coursehub.models.admin import Admin
from coursehub.schemas.course_module import (
    CourseModule as CourseModuleSchema,
    CourseModuleCreate,
    CourseModuleUpdate,
    CourseModuleWithMaterials,
)
from coursehub.services.course import course_service


class CourseModuleService:

    def _get_managed_module(self, db: Session, module_id: int, staff: Admin):
        module = crud_module.get(db, id=module_id)
        if not module:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Module not found.")
        course_service.get_managed_course(db, module.course_id, staff)
        return module

    def create_module(self, db: Session, module_in: CourseModuleCreate, staff: Admin) -> CourseModuleSchema:
        course_service.get_managed_course(db, module_in.course_id, staff)
        module = crud_module.create(db, obj_in=module_in)
        return CourseModuleSchema.model_validate(module)

    def update_module(self, db: Session, module_id: int, module_in: CourseModuleUpdate, staff: Admin) -> CourseModuleSchema:
        module = self._get_managed_module(db, module_id, staff)
        return CourseModuleSchema.model_validate(crud_module.update(db, db_obj=module, obj_in=module_in))

    def delete_module(self, db: Session, module_id: int, staff: Admin) -> CourseModuleSchema:
        module = self._get_managed_module(db, module_id, staff)
        module_data = CourseModuleSchema.model_validate(module)
        # Materials stay in the course, detached from the module.
        for material in module.materials:
            material.module_id = None
        crud_module.delete(db, id=module.id)
        return module_data

    def list_modules(self, db: Session, course_id: int, staff: Admin) -> List[CourseModuleWithMaterials]:
        course_service.get_managed_course(db, course_id, staff)
        return [CourseModuleWithMaterials.model_validate(m) for m in crud_module.get_by_course(db, course_id=course_id)]


course_module_service = CourseModuleService()
