from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from planner.core.database import Base


class StudentPlan(Base):
    __tablename__ = "student_plans"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False, default="My Academic Plan")
    status = Column(String(20), nullable=False, default="draft")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    courses = relationship("PlanCourse", back_populates="plan", cascade="all, delete-orphan")


class PlanCourse(Base):
    """
    A course placed into a plan term.

    `position` orders courses inside one (plan, term, year) bucket, starting at 1.
    A course appears at most once per plan.
    """
    __tablename__ = "plan_courses"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("student_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    term = Column(String(10), nullable=False)  # Spring | Summer | Fall | Winter
    year = Column(String(4), nullable=False)
    term_order = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")  # draft | submitted | approved | declined
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    plan = relationship("StudentPlan", back_populates="courses")
    course = relationship("Course")

    __table_args__ = (
        UniqueConstraint('plan_id', 'course_id', name='unique_plan_course'),
    )
