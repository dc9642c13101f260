from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from coursehub.core.constants import CourseLevelEnum, CourseStatusEnum
from coursehub.schemas.course_module import CourseModuleWithMaterials
from coursehub.schemas.material import Material


class CourseBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    level: CourseLevelEnum = CourseLevelEnum.BEGINNER
    price: Decimal = Field(Decimal("0"), ge=0)
    is_public: bool = True
    category_id: Optional[int] = None

class CourseCreate(CourseBase):
    tutor_id: Optional[int] = None

class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    level: Optional[CourseLevelEnum] = None
    price: Optional[Decimal] = Field(None, ge=0)
    is_public: Optional[bool] = None
    category_id: Optional[int] = None
    status: Optional[CourseStatusEnum] = None
    tutor_id: Optional[int] = None

class Course(CourseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: CourseStatusEnum
    creator_id: int
    tutor_id: Optional[int] = None
    average_rating: float = 0.0
    review_count: int = 0
    enrollment_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CourseDetail(Course):
    modules: List[CourseModuleWithMaterials] = []
    unassigned_materials: List[Material] = []
    assignment_count: int = 0
    is_enrolled: bool = False
