from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from coursehub.core.constants import EnrollmentStatusEnum
from coursehub.schemas.assignment import StudentAssignment
from coursehub.schemas.material import Material
from coursehub.schemas.progress import Progress, ProgressStats


class EnrollmentCreate(BaseModel):
    course_id: int

class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatusEnum

class Enrollment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    status: EnrollmentStatusEnum
    progress_percentage: int
    enrolled_at: datetime
    completed_at: Optional[datetime] = None

class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    thumbnail: Optional[str] = None

class StudentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str

class EnrollmentWithCourse(Enrollment):
    course: CourseSummary

class EnrollmentWithStudent(Enrollment):
    student: StudentSummary

class MaterialWithProgress(Material):
    progress: Optional[Progress] = None

class ProgressDetailStats(ProgressStats):
    total_time_spent: int

class EnrollmentProgressDetail(BaseModel):
    enrollment: Enrollment
    materials: List[MaterialWithProgress]
    assignments: List[StudentAssignment]
    stats: ProgressDetailStats


class StudentCompletion(BaseModel):
    enrollment_id: int
    student: StudentSummary
    status: EnrollmentStatusEnum
    stored_percentage: int
    enrolled_at: datetime
    completed_at: Optional[datetime] = None
    stats: ProgressStats


class CourseCompletionReport(BaseModel):
    course_id: int
    course_title: str
    total_students: int
    total_items: int
    average_completion: int
    students: List[StudentCompletion]