"""Persistence of parsed transcripts and completed-course lookups."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from planner.models.transcript import Transcript
from planner.services.course_codes import normalize_course_code

logger = logging.getLogger(__name__)


def save_parsed_transcript(db: Session, user_id: int, filename: str, strategy: str, courses) -> Transcript:
    transcript = Transcript(
        user_id=user_id,
        filename=filename,
        extraction_strategy=strategy,
        parsed_data=[course.model_dump() for course in courses],
    )
    db.add(transcript)
    db.commit()
    db.refresh(transcript)
    logger.info(f"Saved transcript {transcript.id} for user {user_id} with {len(courses)} courses")
    return transcript


def get_latest_transcript(db: Session, user_id: int) -> Optional[Transcript]:
    return (
        db.query(Transcript)
        .filter(Transcript.user_id == user_id)
        .order_by(Transcript.uploaded_at.desc(), Transcript.id.desc())
        .first()
    )


def get_completed_course_codes(db: Session, user_id: int) -> List[str]:
    """Course codes from the user's most recent transcript, in transcript order."""
    transcript = get_latest_transcript(db, user_id)
    if not transcript or not transcript.parsed_data:
        return []
    return [row["code"] for row in transcript.parsed_data if isinstance(row, dict) and row.get("code")]


def _comparable(code: str) -> str:
    return normalize_course_code(code) or " ".join(code.split()).upper()


def is_course_completed(db: Session, user_id: int, course_code: str) -> bool:
    """Case-insensitive check of a course code against the latest transcript."""
    wanted = _comparable(course_code)
    return any(_comparable(code) == wanted for code in get_completed_course_codes(db, user_id))
