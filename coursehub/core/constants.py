from enum import Enum


class AdminRoleEnum(str, Enum):
    ADMIN = "ADMIN"
    TUTOR = "TUTOR"

class AuthProviderEnum(str, Enum):
    EMAIL = "email"
    GOOGLE = "google"
    GITHUB = "github"

class CourseStatusEnum(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

class CourseLevelEnum(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    ALL = "ALL"

class MaterialTypeEnum(str, Enum):
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"
    LINK = "LINK"

class EnrollmentStatusEnum(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"

class SubmissionStatusEnum(str, Enum):
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"

class UploadKindEnum(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
