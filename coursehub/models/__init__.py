from coursehub.core.database import Base

from .admin import Admin
from .student import Student
from .category import Category
from .course import Course
from .course_module import CourseModule
from .material import Material
from .assignment import Assignment
from .assignment_submission import AssignmentSubmission
from .enrollment import Enrollment
from .progress import Progress
from .review import Review
