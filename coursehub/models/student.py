from sqlalchemy import Boolean, Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.core.database import Base
from coursehub.core.constants import AuthProviderEnum

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)  # null for federated accounts
    auth_provider = Column(Enum(AuthProviderEnum), nullable=False, default=AuthProviderEnum.EMAIL)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    country = Column(String, nullable=True)
    city = Column(String, nullable=True)
    education = Column(String, nullable=True)
    occupation = Column(String, nullable=True)

    is_active = Column(Boolean(), nullable=False, default=True)
    is_verified = Column(Boolean(), nullable=False, default=False)
    blocked = Column(Boolean(), nullable=False, default=False)

    # Single-session enforcement
    active_session_token = Column(String, nullable=True)
    session_version = Column(Integer, nullable=False, default=0)
    last_login_at = Column(DateTime, nullable=True)
    last_login_ip = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    enrollments = relationship("Enrollment", back_populates="student", cascade="all, delete-orphan")
    progress_records = relationship("Progress", back_populates="student", cascade="all, delete-orphan")
    submissions = relationship("AssignmentSubmission", back_populates="student", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="student", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)
