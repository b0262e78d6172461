"""
Slot suggestion API endpoints
"""

import logging
from typing import List, Optional
from pydantic import NaiveDatetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..config import DEFAULT_PRIORITY
from ..database import get_db
from ..schemas import FreeTimeOut, ScoredSlotOut, SuggestionRequest, WeightsOut, WeightsUpdate
from ..scheduling.core.exceptions import SchedulingValidationError
from ..services.context_loader import load_scheduling_context
from ..services.scheduler_service import SchedulingRequest, scheduler_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/suggestions", response_model=List[ScoredSlotOut])
def get_suggestions(payload: SuggestionRequest):
    """Rank candidate slots for the request against the supplied calendar."""
    try:
        context = payload.context.to_context()
        request = payload.request.to_request()
        scored = scheduler_service.score_candidates(request, context)
    except SchedulingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return [ScoredSlotOut.from_scored(slot) for slot in scored]


@router.post("/best", response_model=Optional[ScoredSlotOut])
def get_best_slot(payload: SuggestionRequest):
    """Single best slot, or null when the window holds no candidates."""
    try:
        best = scheduler_service.find_best_slot(payload.request.to_request(), payload.context.to_context())
    except SchedulingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ScoredSlotOut.from_scored(best) if best else None


@router.get("/users/{user_id}/best", response_model=Optional[ScoredSlotOut])
def get_best_slot_for_user(
    user_id: int,
    duration_minutes: int = Query(..., description="Length of the event to place"),
    priority: int = Query(DEFAULT_PRIORITY, description="1 (urgent) to 5 (whenever)"),
    day_part: Optional[str] = Query(None, description="Restrict to a named day part: morning, focus or working"),
    category: Optional[str] = Query(None),
    window_start: Optional[NaiveDatetime] = Query(None),
    window_end: Optional[NaiveDatetime] = Query(None),
    db: Session = Depends(get_db),
):
    """Best slot for a stored user, using their saved preferences and events."""
    try:
        context = load_scheduling_context(db, user_id, window_start=window_start, window_end=window_end)
        if context is None:
            raise HTTPException(status_code=404, detail="User not found")

        request = SchedulingRequest(
            duration_minutes=duration_minutes,
            priority=priority,
            window_start=window_start,
            window_end=window_end,
            day_parts=day_part,
            category=category,
        )
        best = scheduler_service.find_best_slot(request, context)
    except SchedulingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ScoredSlotOut.from_scored(best) if best else None


@router.get("/users/{user_id}/free-time", response_model=FreeTimeOut)
def get_free_time(
    user_id: int,
    start: NaiveDatetime = Query(..., description="Start of the period"),
    end: NaiveDatetime = Query(..., description="End of the period"),
    db: Session = Depends(get_db),
):
    """Free-time statistics inside the user's working hours."""
    if end <= start:
        raise HTTPException(status_code=422, detail="end must be after start")

    context = load_scheduling_context(db, user_id, window_start=start, window_end=end)
    if context is None:
        raise HTTPException(status_code=404, detail="User not found")

    return scheduler_service.free_time(context, start, end)


@router.get("/weights", response_model=WeightsOut)
def get_weights():
    return scheduler_service.get_weights().as_dict()


@router.patch("/weights", response_model=WeightsOut)
def update_weights(update: WeightsUpdate):
    """Change one or more scoring weights; all four are renormalized to sum to 1."""
    changes = update.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No weights given")

    try:
        weights = scheduler_service.update_weights(changes)
    except SchedulingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info(f"⚖️ Weights changed via API: {changes}")
    return weights.as_dict()
