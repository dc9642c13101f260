from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class Progress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    material_id: int
    is_completed: bool
    completed_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    time_spent: int


class ProgressStats(BaseModel):
    total_materials: int
    completed_materials: int
    total_assignments: int
    submitted_assignments: int
    total_items: int
    completed_items: int
    progress_percentage: int


class ProgressUpdate(BaseModel):
    """What the completion and submission endpoints report back."""
    progress_percentage: int
    total_items: int
    completed_items: int
    progress_synced: bool = True


class MaterialCompletion(ProgressUpdate):
    material_id: int
    is_completed: bool = True
