from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.models.student import Student as StudentModel
from coursehub.schemas.material import Material
from coursehub.schemas.progress import MaterialCompletion
from coursehub.schemas.response import APIResponse
from coursehub.services.course_progress import course_progress_service
from coursehub.utils import deps

router = APIRouter()


@router.get("/materials/{material_id}", response_model=APIResponse[Material])
def view_material(
    *,
    db: Session = Depends(deps.get_db),
    material_id: int,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    material = course_progress_service.view_material(db, material_id=material_id, current_student=current_student)
    return APIResponse(message="Material retrieved successfully", data=Material.model_validate(material))


@router.post("/materials/{material_id}/complete", response_model=APIResponse[MaterialCompletion])
def complete_material(
    *,
    db: Session = Depends(deps.get_db),
    material_id: int,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    completion = course_progress_service.complete_material(
        db, material_id=material_id, current_student=current_student
    )
    return APIResponse(message="Material marked as completed", data=completion)
