from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime


class ReviewCreate(BaseModel):
    course_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None

class Review(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    student_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class ReviewAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    avatar: Optional[str] = None

class ReviewWithAuthor(Review):
    student: ReviewAuthor

class ReviewPagination(BaseModel):
    page: int
    limit: int
    total_pages: int
    has_more: bool

class CourseReviewSummary(BaseModel):
    reviews: List[ReviewWithAuthor]
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int]
    pagination: ReviewPagination
