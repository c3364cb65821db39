"""Plan-store access used by reconciliation: reads of a plan's courses and single-row inserts."""

import logging
from dataclasses import asdict, dataclass
from typing import List, Protocol

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from planner.models.plan import PlanCourse
from planner.services.errors import DuplicatePlanCourse, PlanStoreError

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION_PGCODE = "23505"


@dataclass
class PlanCourseEntry:
    course_id: int
    term: str
    year: str


@dataclass
class NewPlanCourse:
    plan_id: int
    course_id: int
    term: str
    year: str
    term_order: int
    position: int
    status: str = "draft"


class PlanStore(Protocol):
    def existing_courses(self, plan_id: int) -> List[PlanCourseEntry]:
        ...

    def max_position(self, plan_id: int, term: str, year: str) -> int:
        """Highest position in the (plan, term, year) bucket, 0 when the bucket is empty."""
        ...

    def insert(self, record: NewPlanCourse) -> None:
        """Raises DuplicatePlanCourse on a uniqueness violation, PlanStoreError otherwise."""
        ...


def _is_unique_violation(error: IntegrityError) -> bool:
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION_PGCODE:
        return True
    return "unique" in str(error.orig).lower()


class SqlPlanStore:
    """Plan store over the plan_courses table. Each insert is committed on its own."""

    def __init__(self, db: Session):
        self.db = db

    def existing_courses(self, plan_id: int) -> List[PlanCourseEntry]:
        try:
            rows = (
                self.db.query(PlanCourse.course_id, PlanCourse.term, PlanCourse.year)
                .filter(PlanCourse.plan_id == plan_id)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PlanStoreError(str(e)) from e
        return [PlanCourseEntry(course_id=row.course_id, term=row.term, year=row.year) for row in rows]

    def max_position(self, plan_id: int, term: str, year: str) -> int:
        try:
            max_position = (
                self.db.query(func.max(PlanCourse.position))
                .filter(
                    PlanCourse.plan_id == plan_id,
                    PlanCourse.term == term,
                    PlanCourse.year == year,
                )
                .scalar()
            )
        except SQLAlchemyError as e:
            # A failed read aborts the Postgres transaction
            self.db.rollback()
            raise PlanStoreError(str(e)) from e
        return max_position or 0

    def insert(self, record: NewPlanCourse) -> None:
        try:
            self.db.add(PlanCourse(**asdict(record)))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_unique_violation(e):
                raise DuplicatePlanCourse(str(e.orig)) from e
            raise PlanStoreError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PlanStoreError(str(e)) from e
