from sqlalchemy import Column, Integer, String, Text, Float, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from planner.core.database import Base


class Course(Base):
    """A catalog course, addressed by subject code plus course number (e.g. CS + 46A)."""
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    course_code = Column(String(10), nullable=False, index=True)  # subject prefix, e.g. "CS"
    course_number = Column(String(10), nullable=False)  # e.g. "46A"
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    units = Column(Float, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('course_code', 'course_number', name='unique_course_code_number'),
    )

    @property
    def display_code(self) -> str:
        return f"{self.course_code} {self.course_number}"
