from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from coursehub.core.database import Base
from coursehub.core.constants import SubmissionStatusEnum

class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    file_url = Column(String, nullable=True)
    status = Column(Enum(SubmissionStatusEnum), nullable=False, default=SubmissionStatusEnum.SUBMITTED)
    score = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)
    submitted_at = Column(DateTime, nullable=False)
    graded_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint('assignment_id', 'student_id', name='unique_assignment_student_submission'),
    )

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("Student", back_populates="submissions")
