"""
Builds a SchedulingContext from the database for a given user.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ..config import DEFAULT_HORIZON_DAYS
from ..models import Event, User
from ..scheduling.core.constants import (
    DEFAULT_BUFFER_MINUTES, DEFAULT_MAX_BACK_TO_BACK, DEFAULT_WORK_DAYS, DEFAULT_WORK_END, DEFAULT_WORK_START,
)
from ..scheduling.core.context import ScheduledEvent, SchedulingContext, WorkingHours
from ..scheduling.core.day_parts import DayPart
from ..scheduling.utils.slot_utils import week_start_for

logger = logging.getLogger(__name__)


def parse_work_days(raw: Optional[str]) -> Tuple[int, ...]:
    """'0,1,2,3,4' -> (0, 1, 2, 3, 4). Empty or missing falls back to Monday-Friday."""
    if not raw:
        return DEFAULT_WORK_DAYS
    return tuple(sorted({int(part) for part in raw.split(",") if part.strip()}))


def _optional_day_part(name: str, start, end) -> Optional[DayPart]:
    if start is None or end is None:
        return None
    return DayPart(name, start, end)


def load_scheduling_context(db: Session, user_id: int, now: Optional[datetime] = None,
                            window_start: Optional[datetime] = None,
                            window_end: Optional[datetime] = None) -> Optional[SchedulingContext]:
    """
    Load a user's preferences and events into a SchedulingContext.
    Events are loaded for whole weeks around the window so weekly balance sees the full week.
    Returns None when the user does not exist.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return None

    now = now or datetime.now()
    window_start = window_start or now
    window_end = window_end or window_start + timedelta(days=DEFAULT_HORIZON_DAYS)

    load_from = week_start_for(window_start.date())
    load_until = week_start_for(window_end.date()) + timedelta(days=7)

    rows = (
        db.query(Event)
        .filter(Event.user_id == user_id)
        .filter(Event.end_time > load_from, Event.start_time < load_until)
        .order_by(Event.start_time)
        .all()
    )
    events = [
        ScheduledEvent(start=row.start_time, end=row.end_time, category=row.category or "general", title=row.title)
        for row in rows
    ]

    working_hours = WorkingHours(
        start=user.work_start or DEFAULT_WORK_START,
        end=user.work_end or DEFAULT_WORK_END,
        days=parse_work_days(user.work_days),
    )

    logger.info(f"📅 Loaded {len(events)} events for user {user.username} ({load_from.date()} - {load_until.date()})")

    return SchedulingContext(
        events=events,
        chronotype=user.chronotype,
        now=now,
        working_hours=working_hours,
        preferred_hours=_optional_day_part("preferred", user.preferred_start, user.preferred_end),
        lunch_time=_optional_day_part("lunch", user.lunch_start, user.lunch_end),
        buffer_minutes=user.buffer_minutes if user.buffer_minutes is not None else DEFAULT_BUFFER_MINUTES,
        max_back_to_back=user.max_back_to_back if user.max_back_to_back is not None else DEFAULT_MAX_BACK_TO_BACK,
    )
