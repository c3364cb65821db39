"""Resolution of transcript course codes to catalog course ids."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planner.models.course import Course
from planner.services.course_codes import split_course_code

logger = logging.getLogger(__name__)


@dataclass
class CatalogCourse:
    id: int
    subject: str
    number: str
    title: Optional[str] = None
    units: Optional[float] = None


class CourseCatalog(Protocol):
    def find_courses(self, subject: str, number: str) -> List[CatalogCourse]:
        """Case-insensitive exact match on subject and number."""
        ...


class SqlCourseCatalog:
    """Catalog lookups against the courses table."""

    def __init__(self, db: Session):
        self.db = db

    def find_courses(self, subject: str, number: str) -> List[CatalogCourse]:
        # Equality on lower() rather than ILIKE so "_" and "%" stay literal
        try:
            rows = (
                self.db.query(Course)
                .filter(
                    func.lower(Course.course_code) == subject.lower(),
                    func.lower(Course.course_number) == number.lower(),
                )
                .limit(2)
                .all()
            )
        except SQLAlchemyError:
            # A failed read aborts the Postgres transaction
            self.db.rollback()
            raise
        return [
            CatalogCourse(
                id=row.id,
                subject=row.course_code,
                number=row.course_number,
                title=row.title,
                units=row.units,
            )
            for row in rows
        ]


class CatalogResolver:
    def __init__(self, catalog: CourseCatalog):
        self.catalog = catalog

    def resolve(self, code: str) -> Optional[int]:
        """
        Resolve a course code such as "CS 46A" to a catalog course id.

        Returns None without querying when the code isn't course-shaped, and
        None when the catalog has no match or more than one.
        """
        parts = split_course_code(code)
        if parts is None:
            logger.warning(f"Invalid course code format: {code}")
            return None

        subject, number = parts
        matches = self.catalog.find_courses(subject, number)
        if len(matches) == 1:
            return matches[0].id
        if not matches:
            logger.info(f"Course not found in catalog: {code}")
        else:
            logger.warning(f"Ambiguous catalog match for {code}: {len(matches)} courses")
        return None
