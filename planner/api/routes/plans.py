"""API routes for populating student plans from transcripts."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from planner.core.database import get_db
from planner.schemas.transcript import MergeReport
from planner.services.errors import PlanNotFound, TranscriptNotFound
from planner.services.reconciliation import auto_populate_plan

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{plan_id}/auto-populate", response_model=MergeReport)
def auto_populate(
    plan_id: int,
    user_id: int = Query(..., description="Student whose latest transcript is merged"),
    db: Session = Depends(get_db),
):
    """
    Add the courses from the user's latest transcript to a plan.

    Safe to call repeatedly: courses already in the plan are skipped.
    """
    try:
        return auto_populate_plan(db, user_id, plan_id)
    except PlanNotFound:
        raise HTTPException(status_code=404, detail="Plan not found")
    except TranscriptNotFound:
        raise HTTPException(status_code=404, detail="No transcript data found")
