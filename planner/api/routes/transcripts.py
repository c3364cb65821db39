"""API routes for transcript upload, parsing and completed-course lookups."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from planner.core.database import get_db
from planner.core.config import get_settings
from planner.models.transcript import Transcript
from planner.schemas.transcript import (
    CompletedCoursesResponse,
    CourseCompletionResponse,
    ParsedCourseCandidate,
    TranscriptResponse,
)
from planner.services.document_extractor import is_supported_transcript
from planner.services.errors import DocumentDecodeError, TranscriptExtractionFailed
from planner.services.transcript_extraction import extract_transcript_courses
from planner.services.transcripts import (
    get_completed_course_codes,
    get_latest_transcript,
    is_course_completed,
    save_parsed_transcript,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def to_transcript_response(transcript: Transcript) -> TranscriptResponse:
    return TranscriptResponse(
        id=transcript.id,
        user_id=transcript.user_id,
        filename=transcript.filename,
        extraction_strategy=transcript.extraction_strategy,
        courses=[ParsedCourseCandidate.model_validate(row) for row in transcript.parsed_data or []],
        uploaded_at=transcript.uploaded_at,
    )


@router.post("/", response_model=TranscriptResponse, status_code=status.HTTP_201_CREATED)
async def upload_transcript(
    file: UploadFile = File(...),
    user_id: int = Form(...),  # Would come from auth
    db: Session = Depends(get_db),
):
    """
    Upload a transcript PDF and extract its courses.

    - Vision parsing is tried first, falling back to text pattern parsing
    - The parsed course list is stored for later plan auto-population
    """
    settings = get_settings()
    filename = file.filename or ""

    if not is_supported_transcript(filename, file.content_type or ""):
        raise HTTPException(status_code=400, detail="Only PDF transcripts are supported")

    if len(filename) > settings.transcript_max_filename_length:
        raise HTTPException(
            status_code=400,
            detail=f"Filename is too long (max {settings.transcript_max_filename_length} characters)",
        )

    file_content = await file.read()
    if len(file_content) > settings.transcript_max_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.transcript_max_mb}MB",
        )

    try:
        # Rendering and the vision call block; keep them off the event loop
        result = await asyncio.to_thread(extract_transcript_courses, file_content)
    except DocumentDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TranscriptExtractionFailed as e:
        logger.error(f"Transcript extraction failed for user {user_id}: {e}")
        raise HTTPException(
            status_code=502,
            detail={
                "message": "Could not extract courses from transcript",
                "causes": {name: str(cause) for name, cause in e.causes.items()},
            },
        )

    try:
        transcript = save_parsed_transcript(db, user_id, filename, result.strategy, result.courses)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    return to_transcript_response(transcript)


@router.get("/users/{user_id}/latest", response_model=TranscriptResponse)
def get_latest_user_transcript(user_id: int, db: Session = Depends(get_db)):
    """Get the user's most recently uploaded transcript."""
    transcript = get_latest_transcript(db, user_id)
    if not transcript:
        raise HTTPException(status_code=404, detail="No transcript found")
    return to_transcript_response(transcript)


@router.get("/users/{user_id}/completed-courses", response_model=CompletedCoursesResponse)
def list_completed_courses(user_id: int, db: Session = Depends(get_db)):
    """Get all course codes from the user's latest transcript."""
    return CompletedCoursesResponse(user_id=user_id, course_codes=get_completed_course_codes(db, user_id))


@router.get("/users/{user_id}/completed-courses/{course_code}", response_model=CourseCompletionResponse)
def check_course_completed(user_id: int, course_code: str, db: Session = Depends(get_db)):
    """Check whether a course code appears on the user's latest transcript."""
    return CourseCompletionResponse(
        course_code=course_code,
        completed=is_course_completed(db, user_id, course_code),
    )
