"""
Transcript extraction as an ordered chain of strategies.

The first strategy that succeeds provides the course list; results from
different strategies are never merged.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

import fitz  # PyMuPDF

from planner.schemas.transcript import ParsedCourseCandidate
from planner.services.course_codes import normalize_course_code
from planner.services.document_extractor import extract_page_texts, join_pages, open_pdf
from planner.services.errors import DocumentDecodeError, TranscriptExtractionFailed
from planner.services.transcript_parser import parse_courses_from_text
from planner.services.vision_parser import (
    LangChainVisionClient,
    VisionInferenceClient,
    parse_transcript_with_vision,
)

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    strategy: str
    courses: List[ParsedCourseCandidate] = field(default_factory=list)


class ExtractionStrategy(Protocol):
    name: str

    def extract(self, document: fitz.Document) -> List[ParsedCourseCandidate]:
        ...


class VisionStrategy:
    """Page images through a multimodal model. Handles scans and table layouts."""

    name = "vision"

    def __init__(self, client: Optional[VisionInferenceClient] = None, render_scale: Optional[float] = None):
        self.client = client or LangChainVisionClient()
        self.render_scale = render_scale

    def extract(self, document: fitz.Document) -> List[ParsedCourseCandidate]:
        return parse_transcript_with_vision(document, self.client, render_scale=self.render_scale)


class TextPatternStrategy:
    """Embedded PDF text through the pattern parser. Only works for text-based PDFs."""

    name = "text"

    def extract(self, document: fitz.Document) -> List[ParsedCourseCandidate]:
        text = join_pages(extract_page_texts(document))
        logger.info(f"Extracted {len(text)} characters of text")
        return parse_courses_from_text(text)


def default_strategies() -> List[ExtractionStrategy]:
    return [VisionStrategy(), TextPatternStrategy()]


def keep_course_shaped(courses: Sequence[ParsedCourseCandidate]) -> List[ParsedCourseCandidate]:
    """Drop candidates whose code isn't "SUBJ 123X"-shaped and canonicalize the rest."""
    kept = []
    for course in courses:
        code = normalize_course_code(course.code)
        if code is None:
            logger.warning(f"Discarding candidate with malformed course code: {course.code!r}")
            continue
        kept.append(course if code == course.code else course.model_copy(update={"code": code}))
    return kept


def extract_transcript_courses(
    file_content: bytes,
    strategies: Optional[Sequence[ExtractionStrategy]] = None,
) -> ExtractionResult:
    """
    Extract course candidates from a transcript PDF.

    Raises:
        DocumentDecodeError: the bytes are not a readable PDF (no strategy is tried)
        TranscriptExtractionFailed: every strategy failed; carries each cause
    """
    if strategies is None:
        strategies = default_strategies()

    causes = {}
    with open_pdf(file_content) as document:
        logger.info(f"Extracting courses from {document.page_count}-page transcript")
        for strategy in strategies:
            try:
                courses = strategy.extract(document)
            except DocumentDecodeError:
                raise
            except Exception as e:
                logger.warning(f"{strategy.name} extraction failed, trying next strategy: {e}")
                causes[strategy.name] = e
                continue

            courses = keep_course_shaped(courses)
            logger.info(f"Extracted {len(courses)} courses using {strategy.name} strategy")
            return ExtractionResult(strategy=strategy.name, courses=courses)

    raise TranscriptExtractionFailed(causes)
