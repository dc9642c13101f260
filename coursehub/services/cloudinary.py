import logging

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from fastapi import HTTPException, UploadFile, status

from coursehub.core.config import settings
from coursehub.core.constants import UploadKindEnum
from coursehub.schemas.upload import UploadResult

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True,
)

ALLOWED_CONTENT_TYPES = {
    UploadKindEnum.IMAGE: {"image/jpeg", "image/png", "image/gif", "image/webp"},
    UploadKindEnum.VIDEO: {"video/mp4", "video/webm", "video/quicktime"},
    UploadKindEnum.DOCUMENT: {"application/pdf"},
}

MAX_UPLOAD_BYTES = {
    UploadKindEnum.IMAGE: 5 * 1024 * 1024,
    UploadKindEnum.VIDEO: 500 * 1024 * 1024,
    UploadKindEnum.DOCUMENT: 50 * 1024 * 1024,
}


class CloudinaryService:

    def upload_image(self, file: bytes):
        result = cloudinary.uploader.upload(file, resource_type="image", folder="coursehub/images")
        return result["secure_url"]

    def upload_video(self, file: bytes):
        result = cloudinary.uploader.upload(file, resource_type="video", folder="coursehub/videos")
        return result["secure_url"]

    def upload_pdf(self, file: bytes):
        result = cloudinary.uploader.upload(file, resource_type="raw", format="pdf", folder="coursehub/documents")
        return result["secure_url"]

    async def upload(self, kind: UploadKindEnum, file: UploadFile) -> UploadResult:
        if file.content_type not in ALLOWED_CONTENT_TYPES[kind]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported file type for {kind.value} upload: {file.content_type}"
            )

        contents = await file.read()
        if not contents:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty.")
        if len(contents) > MAX_UPLOAD_BYTES[kind]:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds the {MAX_UPLOAD_BYTES[kind] // (1024 * 1024)}MB limit."
            )

        uploaders = {
            UploadKindEnum.IMAGE: self.upload_image,
            UploadKindEnum.VIDEO: self.upload_video,
            UploadKindEnum.DOCUMENT: self.upload_pdf,
        }
        try:
            url = uploaders[kind](contents)
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload of {file.filename} failed: {str(e)}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="File upload failed.")

        return UploadResult(url=url, kind=kind, filename=file.filename or "")


cloudinary_service = CloudinaryService()
