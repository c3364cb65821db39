"""
Vision-assisted transcript parsing.

Every page is rendered to an image and all pages are sent to a multimodal
model in a single request. The model answers with a JSON array of courses.
"""

import logging
import re
from typing import Any, Callable, List, Optional, Protocol

import fitz  # PyMuPDF
from langchain_core.messages import HumanMessage

from planner.core.config import get_settings
from planner.schemas.transcript import ParsedCourseCandidate
from planner.services.document_extractor import render_page_images
from planner.services.errors import VisionExtractionError
from planner.services.json_extraction import JsonExtractionError, extract_first_json_array
from workflows.llm_utils import get_vision_llm, invoke_llm_with_metrics

logger = logging.getLogger(__name__)

TRANSCRIPT_VISION_PROMPT = """You are a transcript parser. Extract ALL courses from these academic transcript page images.

For each course, extract:
- code: the course code (e.g. "CS 46A", "CMPE 133", "MATH 30")
- grade: the grade (e.g. "A", "B+", "C", "P", "CR"). If the course is in progress or has no grade yet, use "IP".
- units: the units or credits as a number (e.g. 3.0, 4.0)
- semester: the term the course was taken (e.g. "Fall 2023", "Spring 2024")
- year: the four-digit year of that term (e.g. "2023")

Return ONLY a JSON array, formatted like:
[{"code": "CS 46A", "grade": "A", "units": 4, "semester": "Fall 2023", "year": "2023"}]

Rules:
1. Scan ALL pages provided.
2. Include all completed courses and all in-progress courses.
3. Include transfer credit if visible.
4. Do not include withdrawn courses (W, WU) unless they are the most recent attempt.
5. Copy course codes exactly as printed."""

YEAR_PATTERN = re.compile(r"\b(\d{4})\b")
UNITS_PATTERN = re.compile(r"\d+(?:\.\d+)?")


class VisionInferenceClient(Protocol):
    """Sends page images plus an instruction prompt to a multimodal model, returns the reply text."""

    def extract_via_inference(self, images: List[str], prompt: str) -> str:
        ...


class LangChainVisionClient:
    """Vision inference through the configured LangChain chat model (OpenAI or Anthropic)."""

    def __init__(self, llm_factory: Callable = get_vision_llm):
        self._llm_factory = llm_factory

    def extract_via_inference(self, images: List[str], prompt: str) -> str:
        llm, model_name = self._llm_factory()
        if llm is None:
            raise VisionExtractionError("No vision API key configured")

        content = [{"type": "text", "text": prompt}]
        for image in images:
            content.append({
                "type": "image_url",
                "image_url": {"url": f"data:image/png;base64,{image}"},
            })

        logger.info(f"Sending {len(images)} page images to {model_name}")
        response = invoke_llm_with_metrics(llm, [HumanMessage(content=content)], model_name)
        if not response.success:
            raise VisionExtractionError(f"Vision inference failed: {response.metrics.error_message}")
        if not response.content:
            raise VisionExtractionError("No response body from vision model")
        return response.content


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_units(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = UNITS_PATTERN.search(str(value))
    return float(match.group(0)) if match else None


def candidate_from_vision_item(item: Any) -> Optional[ParsedCourseCandidate]:
    """Convert one object of the model's JSON array. Items without a code are dropped."""
    if not isinstance(item, dict):
        return None
    code = _clean_str(item.get("code"))
    if not code:
        return None

    semester = _clean_str(item.get("semester"))
    year = _clean_str(item.get("year"))
    if semester and year and not YEAR_PATTERN.search(semester):
        # {"semester": "Fall", "year": "2023"}
        semester = f"{semester} {year}"
    if semester and not year:
        year_match = YEAR_PATTERN.search(semester)
        year = year_match.group(1) if year_match else None

    return ParsedCourseCandidate(
        code=" ".join(code.split()),
        title=_clean_str(item.get("title")),
        units=_to_units(item.get("units")),
        grade=_clean_str(item.get("grade")),
        semester_text=semester,
        year=year,
    )


def parse_transcript_with_vision(
    document: fitz.Document,
    client: VisionInferenceClient,
    render_scale: Optional[float] = None,
) -> List[ParsedCourseCandidate]:
    """
    Extract courses from every page of a transcript with one vision request.

    Raises:
        VisionExtractionError: missing credentials, failed call, empty reply,
            or no parseable JSON array in the reply
    """
    if render_scale is None:
        render_scale = get_settings().vision_render_scale

    images = render_page_images(document, scale=render_scale)
    logger.info(f"Rendered {len(images)} pages for vision parsing")

    try:
        reply = client.extract_via_inference(images, TRANSCRIPT_VISION_PROMPT)
    except VisionExtractionError:
        raise
    except Exception as e:
        raise VisionExtractionError(f"Vision inference failed: {e}") from e

    if not reply:
        raise VisionExtractionError("No response body from vision model")

    try:
        items = extract_first_json_array(reply)
    except JsonExtractionError as e:
        raise VisionExtractionError(f"Could not find JSON course array in response: {e}") from e

    courses = []
    for item in items:
        course = candidate_from_vision_item(item)
        if course is not None:
            courses.append(course)

    logger.info(f"Extracted {len(courses)} courses using vision")
    return courses
