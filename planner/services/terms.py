"""Semester text to the planner's (term, year, term_order) representation."""

import re
from typing import Optional

from planner.schemas.transcript import NormalizedTerm

SEMESTER_PATTERN = re.compile(r"(Fall|Spring|Summer|Winter)\s+(\d{4})", re.IGNORECASE)

# Rank within a calendar year; term_order = year * 10 + rank
TERM_RANKS = {
    "Spring": 1,
    "Summer": 2,
    "Fall": 3,
    "Winter": 4,
}


def term_order(term: str, year: str) -> int:
    return int(year) * 10 + TERM_RANKS.get(term, 0)


def normalize_term(text: Optional[str]) -> Optional[NormalizedTerm]:
    """Parse "fall 2023" style text. Returns None when no season plus 4-digit year is present."""
    if not text:
        return None
    match = SEMESTER_PATTERN.search(text)
    if not match:
        return None

    term = match.group(1).capitalize()
    year = match.group(2)
    return NormalizedTerm(term=term, year=year, term_order=term_order(term, year))
