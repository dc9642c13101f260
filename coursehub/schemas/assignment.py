from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
from datetime import datetime

from coursehub.core.constants import SubmissionStatusEnum
from coursehub.schemas.progress import ProgressUpdate


class AssignmentBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: Optional[int] = Field(None, gt=0)

class AssignmentCreate(AssignmentBase):
    course_id: int

class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: Optional[int] = Field(None, gt=0)

class Assignment(AssignmentBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    creator_id: int
    max_score: int
    created_at: Optional[datetime] = None


class SubmissionCreate(BaseModel):
    content: Optional[str] = None
    file_url: Optional[str] = None

    @model_validator(mode="after")
    def requires_payload(self):
        if not self.content and not self.file_url:
            raise ValueError("A submission needs content or a file_url.")
        return self

class GradeSubmissionRequest(BaseModel):
    score: int = Field(..., ge=0)
    feedback: Optional[str] = None

class AssignmentSubmission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    assignment_id: int
    student_id: int
    content: str
    file_url: Optional[str] = None
    status: SubmissionStatusEnum
    score: Optional[int] = None
    feedback: Optional[str] = None
    submitted_at: datetime
    graded_at: Optional[datetime] = None

class StudentAssignment(Assignment):
    submission: Optional[AssignmentSubmission] = None

class SubmissionResult(BaseModel):
    submission: AssignmentSubmission
    progress_update: ProgressUpdate
