from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
from datetime import datetime

from coursehub.core.constants import MaterialTypeEnum


class MaterialBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    material_type: MaterialTypeEnum = MaterialTypeEnum.DOCUMENT
    file_url: Optional[str] = None
    content: Optional[str] = None
    order_index: int = 0
    module_id: Optional[int] = None

class MaterialCreate(MaterialBase):
    course_id: int

    @model_validator(mode="after")
    def requires_payload(self):
        if not self.file_url and not self.content:
            raise ValueError("A material needs either a file_url or inline content.")
        return self

class MaterialUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    material_type: Optional[MaterialTypeEnum] = None
    file_url: Optional[str] = None
    content: Optional[str] = None
    order_index: Optional[int] = None
    module_id: Optional[int] = None

class Material(MaterialBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    created_at: Optional[datetime] = None
