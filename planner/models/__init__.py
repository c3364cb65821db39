# Import all models here so Base.metadata is complete for Alembic
from planner.models.course import Course
from planner.models.plan import StudentPlan, PlanCourse
from planner.models.transcript import Transcript

__all__ = [
    "Course",
    "StudentPlan",
    "PlanCourse",
    "Transcript",
]
