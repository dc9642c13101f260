from sqlalchemy import Boolean, Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.core.database import Base
from coursehub.core.constants import AdminRoleEnum

class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(Enum(AdminRoleEnum), nullable=False, default=AdminRoleEnum.TUTOR)
    avatar = Column(String, nullable=True)
    is_active = Column(Boolean(), default=True)
    last_login_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    created_courses = relationship("Course", back_populates="creator", foreign_keys="Course.creator_id")
    tutored_courses = relationship("Course", back_populates="tutor", foreign_keys="Course.tutor_id")
    assignments = relationship("Assignment", back_populates="creator")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
