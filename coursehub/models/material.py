from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.core.database import Base
from coursehub.core.constants import MaterialTypeEnum

class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    material_type = Column(Enum(MaterialTypeEnum), nullable=False, default=MaterialTypeEnum.DOCUMENT)
    file_url = Column(String, nullable=True)
    content = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("course_modules.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course", back_populates="materials")
    module = relationship("CourseModule", back_populates="materials")
    progress_records = relationship("Progress", back_populates="material", cascade="all, delete-orphan")
