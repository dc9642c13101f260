from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from coursehub.schemas.material import Material


class CourseModuleBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    order_index: int = 0

class CourseModuleCreate(CourseModuleBase):
    course_id: int

class CourseModuleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    order_index: Optional[int] = None

class CourseModule(CourseModuleBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int

class CourseModuleWithMaterials(CourseModule):
    materials: List[Material] = []
