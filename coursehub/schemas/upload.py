from pydantic import BaseModel

from coursehub.core.constants import UploadKindEnum


class UploadResult(BaseModel):
    url: str
    kind: UploadKindEnum
    filename: str
