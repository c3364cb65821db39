"""Course code shape shared by the parsers and the catalog resolver."""

import re
from typing import Optional, Tuple

# "CS 46A", "cmpe133", "MATH  30" -> subject + number with optional suffix letter
COURSE_CODE_SHAPE = re.compile(r"^([A-Z]{2,4})\s*(\d{1,3}[A-Z]?)$", re.IGNORECASE)


def split_course_code(code: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split a course code into (subject, number), or None when it isn't course-shaped."""
    if not code:
        return None
    match = COURSE_CODE_SHAPE.match(" ".join(code.split()))
    if not match:
        return None
    return match.group(1).upper(), match.group(2).upper()


def normalize_course_code(code: Optional[str]) -> Optional[str]:
    """Canonical "SUBJ 123X" form, or None when the code isn't course-shaped."""
    parts = split_course_code(code)
    if parts is None:
        return None
    return f"{parts[0]} {parts[1]}"
