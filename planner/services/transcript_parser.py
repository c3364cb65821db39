"""
Pattern-based course extraction from transcript text.

Targets term-grouped transcripts with one course per line, e.g.

    Fall 2023
    CS 46A   Intro to Programming   A    4.0 units
    MATH 30  Calculus I             B+   3.0 units
    PHYS 50  Mechanics        4.0   A-   14.8
"""

import logging
import re
from typing import Dict, List, Optional

from planner.schemas.transcript import ParsedCourseCandidate

logger = logging.getLogger(__name__)

SEMESTER_PATTERN = re.compile(r"(Fall|Spring|Summer|Winter)\s+(\d{4})", re.IGNORECASE)

COURSE_PATTERN = re.compile(r"\b([A-Z]{2,4})\s+(\d{1,3}[A-Z]?)\b")

# Letter grades, Pass/No-Pass and Credit/No-Credit, withdrawals, incompletes,
# in-progress and report-delayed codes. Longer alternatives come first.
GRADE_PATTERN = re.compile(
    r"(?<![\w+\-])([ABCDF][+-]?|NP|NC|CR|WU|W|IC|IP|I|RD|RP|P)(?![\w+\-])"
)

LABELLED_UNITS_PATTERN = re.compile(r"(?<![\w.])(\d+(?:\.\d+)?)\s*units?\b", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"(?<![\w.])(\d+(?:\.\d+)?)(?![\w.])")

TITLE_STRIP = " \t-|:,;"


# Grades that double as roman numerals at the end of a title ("Calculus I")
ROMAN_NUMERAL_GRADES = {"I"}


def _find_units(segment: str, grade_match: re.Match) -> Optional[re.Match]:
    labelled = LABELLED_UNITS_PATTERN.search(segment)
    if labelled:
        return labelled
    # "units grade points" rows put grade points after the grade
    before_grade = list(NUMBER_PATTERN.finditer(segment, 0, grade_match.start()))
    if before_grade:
        return before_grade[-1]
    return NUMBER_PATTERN.search(segment, grade_match.end())


def _find_grade(segment: str) -> Optional[re.Match]:
    grade_matches = list(GRADE_PATTERN.finditer(segment))
    if not grade_matches:
        # Header rows and course references in prose carry no grade
        return None

    # Titles can start with "A" or end in roman numerals, so the grade column is the last token
    grade_match = grade_matches[-1]
    if grade_match.group(1) in ROMAN_NUMERAL_GRADES and not NUMBER_PATTERN.search(segment, 0, grade_match.start()):
        # "Calculus I 3.0" has an empty grade column
        return None
    return grade_match


def _parse_segment(code: str, segment: str, semester: str, year: str) -> Optional[ParsedCourseCandidate]:
    grade_match = _find_grade(segment)
    if grade_match is None:
        return None
    units_match = _find_units(segment, grade_match)

    title_end = grade_match.start()
    if units_match and units_match.start() < title_end:
        title_end = units_match.start()
    title = segment[:title_end].strip(TITLE_STRIP)

    return ParsedCourseCandidate(
        code=code,
        title=title or None,
        grade=grade_match.group(1),
        units=float(units_match.group(1)) if units_match else None,
        semester_text=semester or None,
        year=year or None,
    )


def parse_courses_from_text(text: str) -> List[ParsedCourseCandidate]:
    """
    Extract graded course rows from transcript text.

    Lines are scanned in order while tracking the most recent semester header.
    Grade and units are only looked up between a course code and the next code
    on the same line. Rows without a grade are dropped. When a code repeats,
    the first occurrence is kept.

    Never raises; unparseable text yields an empty list.
    """
    if not text:
        return []

    courses: Dict[str, ParsedCourseCandidate] = {}
    current_semester = ""
    current_year = ""

    for line in text.split("\n"):
        semester_match = SEMESTER_PATTERN.search(line)
        if semester_match:
            current_semester = semester_match.group(0)
            current_year = semester_match.group(2)

        code_matches = list(COURSE_PATTERN.finditer(line))
        for index, match in enumerate(code_matches):
            segment_end = code_matches[index + 1].start() if index + 1 < len(code_matches) else len(line)
            segment = line[match.end():segment_end]
            code = f"{match.group(1)} {match.group(2)}"

            course = _parse_segment(code, segment, current_semester, current_year)
            if course is None or code in courses:
                continue
            courses[code] = course

    logger.info(f"Found {len(courses)} unique courses from text")
    return list(courses.values())
