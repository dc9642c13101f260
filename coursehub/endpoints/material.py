from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.material import Material, MaterialCreate, MaterialUpdate
from coursehub.schemas.response import APIResponse
from coursehub.services.material import material_service
from coursehub.utils import deps

router = APIRouter()


@router.post("", response_model=APIResponse[Material], status_code=status.HTTP_201_CREATED)
def create_material(
    *,
    db: Session = Depends(deps.get_transactional_db),
    material_in: MaterialCreate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    material = material_service.create_material(db, material_in=material_in, staff=current_admin)
    return APIResponse(message="Material created successfully", data=material)


@router.get("/course/{course_id}", response_model=APIResponse[List[Material]])
def list_materials(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    materials = material_service.list_materials(db, course_id=course_id, staff=current_admin)
    return APIResponse(message="Materials retrieved successfully", data=materials)


@router.put("/{material_id}", response_model=APIResponse[Material])
def update_material(
    *,
    db: Session = Depends(deps.get_transactional_db),
    material_id: int,
    material_in: MaterialUpdate,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    material = material_service.update_material(
        db, material_id=material_id, material_in=material_in, staff=current_admin
    )
    return APIResponse(message="Material updated successfully", data=material)


@router.delete("/{material_id}", response_model=APIResponse[Material])
def delete_material(
    *,
    db: Session = Depends(deps.get_transactional_db),
    material_id: int,
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    material = material_service.delete_material(db, material_id=material_id, staff=current_admin)
    return APIResponse(message="Material deleted successfully", data=material)
