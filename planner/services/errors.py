"""Exceptions raised by the transcript ingestion and plan reconciliation services."""

from typing import Dict


class TranscriptError(Exception):
    """Base class for transcript ingestion failures."""


class DocumentDecodeError(TranscriptError):
    """The uploaded bytes are not a readable PDF, or the PDF has no pages."""


class VisionExtractionError(TranscriptError):
    """The vision parser could not produce a course list. Recoverable: triggers the text fallback."""


class TranscriptExtractionFailed(TranscriptError):
    """Every extraction strategy failed. Carries each underlying cause keyed by strategy name."""

    def __init__(self, causes: Dict[str, Exception]):
        self.causes = dict(causes)
        detail = "; ".join(f"{name}: {exc}" for name, exc in self.causes.items())
        super().__init__(f"All transcript extraction strategies failed ({detail})")


class TranscriptNotFound(TranscriptError):
    pass


class PlanNotFound(TranscriptError):
    pass


class PlanStoreError(Exception):
    """Insert into the plan store failed."""


class DuplicatePlanCourse(PlanStoreError):
    """The plan store rejected an insert because the course is already in the plan."""
