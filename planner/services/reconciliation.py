"""
Merge of transcript courses into a student plan.

Runs are idempotent per course: the plan's existing course ids are read at
the start of every run and grown as courses are added, so re-running the same
batch only produces "already in plan" skips.
"""

import logging
from typing import Iterable, List, Set

from pydantic import ValidationError
from sqlalchemy.orm import Session

from planner.models.plan import StudentPlan
from planner.schemas.transcript import MergeReport, ParsedCourseCandidate, SkippedCourse
from planner.services.catalog import CatalogResolver, SqlCourseCatalog
from planner.services.errors import DuplicatePlanCourse, PlanNotFound, PlanStoreError, TranscriptNotFound
from planner.services.plan_store import NewPlanCourse, PlanStore, SqlPlanStore
from planner.services.terms import normalize_term
from planner.services.transcripts import get_latest_transcript

logger = logging.getLogger(__name__)

SKIP_UNPARSEABLE_SEMESTER = "unparseable semester"
SKIP_NOT_IN_CATALOG = "course not in catalog"
SKIP_ALREADY_IN_PLAN = "already in plan"


def _skip(report: MergeReport, code: str, reason: str) -> None:
    report.skipped += 1
    report.skips.append(SkippedCourse(code=code, reason=reason))
    logger.info(f"Skipping {code}: {reason}")


def _merge_candidate(
    plan_id: int,
    candidate: ParsedCourseCandidate,
    resolver: CatalogResolver,
    store: PlanStore,
    existing_course_ids: Set[int],
    report: MergeReport,
) -> None:
    term = normalize_term(candidate.semester_text)
    if term is None:
        _skip(report, candidate.code, SKIP_UNPARSEABLE_SEMESTER)
        return

    course_id = resolver.resolve(candidate.code)
    if course_id is None:
        _skip(report, candidate.code, SKIP_NOT_IN_CATALOG)
        return

    # Matches on catalog id only: a retake in a later term is also skipped
    if course_id in existing_course_ids:
        _skip(report, candidate.code, SKIP_ALREADY_IN_PLAN)
        return

    position = store.max_position(plan_id, term.term, term.year) + 1
    record = NewPlanCourse(
        plan_id=plan_id,
        course_id=course_id,
        term=term.term,
        year=term.year,
        term_order=term.term_order,
        position=position,
    )

    try:
        store.insert(record)
    except DuplicatePlanCourse:
        # Another writer added it since the run started
        existing_course_ids.add(course_id)
        _skip(report, candidate.code, SKIP_ALREADY_IN_PLAN)
        return
    except PlanStoreError as e:
        report.errors.append(f"Failed to add {candidate.code}: {e}")
        logger.error(f"Failed to add {candidate.code} to plan {plan_id}: {e}")
        return

    existing_course_ids.add(course_id)
    report.added += 1
    logger.info(f"Added {candidate.code} to {term.term} {term.year} at position {position}")


def reconcile_courses(
    plan_id: int,
    candidates: Iterable[ParsedCourseCandidate],
    resolver: CatalogResolver,
    store: PlanStore,
) -> MergeReport:
    """
    Merge candidates into a plan, strictly in the given order.

    Each candidate is added, skipped (unparseable semester, not in catalog,
    already in plan) or recorded as an error. Always returns a report.
    """
    report = MergeReport()
    existing_course_ids = {entry.course_id for entry in store.existing_courses(plan_id)}

    for candidate in candidates:
        try:
            _merge_candidate(plan_id, candidate, resolver, store, existing_course_ids, report)
        except Exception as e:
            logger.exception(f"Error processing {candidate.code}: {e}")
            report.errors.append(f"Error processing {candidate.code}: {e}")

    logger.info(
        f"Reconciliation of plan {plan_id} complete: {report.added} added, "
        f"{report.skipped} skipped, {len(report.errors)} errors"
    )
    return report


def load_candidates(parsed_data: List[dict], report: MergeReport) -> List[ParsedCourseCandidate]:
    """Rebuild candidates from a transcript's stored course list; invalid rows become errors."""
    candidates = []
    for index, row in enumerate(parsed_data or []):
        try:
            candidates.append(ParsedCourseCandidate.model_validate(row))
        except ValidationError as e:
            report.errors.append(f"Invalid stored course at index {index}: {e.error_count()} validation errors")
    return candidates


def auto_populate_plan(db: Session, user_id: int, plan_id: int) -> MergeReport:
    """
    Merge the user's latest parsed transcript into a plan.

    Raises:
        PlanNotFound: the plan does not exist
        TranscriptNotFound: the user has no parsed transcript
    """
    plan = db.query(StudentPlan).filter(StudentPlan.id == plan_id).first()
    if not plan:
        raise PlanNotFound(f"Plan {plan_id} not found")

    transcript = get_latest_transcript(db, user_id)
    if not transcript or transcript.parsed_data is None:
        raise TranscriptNotFound("No transcript data found")

    report = MergeReport()
    candidates = load_candidates(transcript.parsed_data, report)
    logger.info(f"Found {len(candidates)} courses in transcript {transcript.id}")

    merged = reconcile_courses(
        plan_id,
        candidates,
        CatalogResolver(SqlCourseCatalog(db)),
        SqlPlanStore(db),
    )
    merged.errors = report.errors + merged.errors
    return merged
