from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.core.database import Base
from coursehub.core.constants import CourseLevelEnum, CourseStatusEnum

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    thumbnail = Column(String, nullable=True)
    level = Column(Enum(CourseLevelEnum), nullable=False, default=CourseLevelEnum.BEGINNER)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(Enum(CourseStatusEnum), nullable=False, default=CourseStatusEnum.DRAFT)
    is_public = Column(Boolean, nullable=False, default=True)
    creator_id = Column(Integer, ForeignKey("admins.id"), nullable=False)
    tutor_id = Column(Integer, ForeignKey("admins.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    creator = relationship("Admin", back_populates="created_courses", foreign_keys=[creator_id])
    tutor = relationship("Admin", back_populates="tutored_courses", foreign_keys=[tutor_id])
    category = relationship("Category", back_populates="courses")
    modules = relationship(
        "CourseModule", back_populates="course", cascade="all, delete-orphan",
        order_by="CourseModule.order_index"
    )
    materials = relationship(
        "Material", back_populates="course", cascade="all, delete-orphan",
        order_by="Material.order_index"
    )
    assignments = relationship("Assignment", back_populates="course", cascade="all, delete-orphan")
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="course", cascade="all, delete-orphan")

    @property
    def average_rating(self):
        if not self.reviews:
            return 0.0
        return round(sum(r.rating for r in self.reviews) / len(self.reviews), 1)

    @property
    def review_count(self):
        return len(self.reviews)

    @property
    def enrollment_count(self):
        return len(self.enrollments)
