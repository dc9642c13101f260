from sqlalchemy import Column, Integer, ForeignKey, DateTime, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from coursehub.core.database import Base


class Progress(Base):
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    last_accessed = Column(DateTime, nullable=True)
    time_spent = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('student_id', 'course_id', 'material_id', name='unique_student_course_material_progress'),
    )

    student = relationship("Student", back_populates="progress_records")
    material = relationship("Material", back_populates="progress_records")
