from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from planner.schemas.base import BaseSchema


class ParsedCourseCandidate(BaseModel):
    """A course row read off a transcript, before term and catalog resolution."""

    code: str  # canonical "SUBJ 123X" form
    title: Optional[str] = None
    units: Optional[float] = None
    grade: Optional[str] = None
    semester_text: Optional[str] = None
    year: Optional[str] = None


class NormalizedTerm(BaseModel):
    term: str  # Spring | Summer | Fall | Winter
    year: str
    term_order: int


class SkippedCourse(BaseModel):
    code: str
    reason: str


class MergeReport(BaseModel):
    added: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)
    skips: List[SkippedCourse] = Field(default_factory=list)


# Response schemas (need from_attributes for ORM)
class TranscriptResponse(BaseSchema):
    id: int
    user_id: int
    filename: str
    extraction_strategy: Optional[str] = None
    courses: List[ParsedCourseCandidate] = Field(default_factory=list)
    uploaded_at: Optional[datetime] = None


class CompletedCoursesResponse(BaseModel):
    user_id: int
    course_codes: List[str]


class CourseCompletionResponse(BaseModel):
    course_code: str
    completed: bool
