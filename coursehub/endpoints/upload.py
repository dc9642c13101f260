from fastapi import APIRouter, Depends, File, UploadFile

from coursehub.core.constants import UploadKindEnum
from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.response import APIResponse
from coursehub.schemas.upload import UploadResult
from coursehub.services.cloudinary import cloudinary_service
from coursehub.utils import deps

router = APIRouter()


@router.post("/{kind}", response_model=APIResponse[UploadResult])
async def upload_file(
    *,
    kind: UploadKindEnum,
    file: UploadFile = File(...),
    current_admin: AdminModel = Depends(deps.get_current_admin)
):
    result = await cloudinary_service.upload(kind, file)
    return APIResponse(message="File uploaded successfully", data=result)
