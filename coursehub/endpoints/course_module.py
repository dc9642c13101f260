from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.course_module import (
    CourseModule,
    CourseModuleCreate,
    CourseModuleUpdate,
    CourseModuleWithMaterials,
)
from coursehub.schemas.response import APIResponse
from coursehub.services.course_module import course_module_service
from coursehub.utils import deps

router = APIRouter()


@router.post("", response_model=APIResponse[CourseModule], status_code=status.HTTP_201_CREATED)
def create_module(
    *,
    db: Session = Depends(deps.get_transactional_db),
    module_in: CourseModuleCreate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    module = course_module_service.create_module(db, module_in=module_in, staff=current_admin)
    return APIResponse(message="Module created successfully", data=module)


@router.get("/course/{course_id}", response_model=APIResponse[List[CourseModuleWithMaterials]])
def list_modules(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    modules = course_module_service.list_modules(db, course_id=course_id, staff=current_admin)
    return APIResponse(message="Modules retrieved successfully", data=modules)


@router.put("/{module_id}", response_model=APIResponse[CourseModule])
def update_module(
    *,
    db: Session = Depends(deps.get_transactional_db),
    module_id: int,
    module_in: CourseModuleUpdate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    module = course_module_service.update_module(db, module_id=module_id, module_in=module_in, staff=current_admin)
    return APIResponse(message="Module updated successfully", data=module)


@router.delete("/{module_id}", response_model=APIResponse[CourseModule])
def delete_module(
    *,
    db: Session = Depends(deps.get_transactional_db),
    module_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    module = course_module_service.delete_module(db, module_id=module_id, staff=current_admin)
    return APIResponse(message="Module deleted successfully", data=module)
