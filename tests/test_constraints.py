import logging
from datetime import datetime, time, timedelta

import pytest

from calendar_scheduler.scheduling import (
    ConstraintType, DEFAULT_HARD_CONSTRAINTS, DEFAULT_SOFT_CONSTRAINTS, DayPart, FocusBlock, HardConstraint,
    SoftConstraint, TimeRange, calculate_soft_constraint_score, validate_hard_constraints,
)
from calendar_scheduler.scheduling.constraints.hard_constraints import (
    BlockedTimeConstraint, DayPartConstraint, DeadlineConstraint, NoOverlapConstraint, NotInPastConstraint,
    WorkingHoursConstraint,
)
from calendar_scheduler.scheduling.constraints.soft_constraints import (
    AvoidBackToBackConstraint, BufferTimeConstraint, FocusTimeProtectionConstraint, LunchTimeConstraint,
    MeetingClusteringConstraint, PreferredHoursConstraint, PreferredTimeConstraint, PriorityAlignmentConstraint,
    SameCategoryProximityConstraint, WeekendAvoidanceConstraint,
)

MONDAY = datetime(2026, 3, 2)
SATURDAY = datetime(2026, 3, 7)


# ================================
# HARD CONSTRAINTS
# ================================

def test_overlapping_event_blocks_slot(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60, "work", "Standup")])
    ok, violations = validate_hard_constraints(make_slot(MONDAY.replace(hour=9, minute=30)), context, [NoOverlapConstraint()])

    assert not ok
    assert "Standup" in violations[0]


def test_touching_events_do_not_conflict(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60)])
    ok, violations = validate_hard_constraints(make_slot(MONDAY.replace(hour=10)), context, [NoOverlapConstraint()])

    assert ok
    assert violations == []


def test_blocking_categories_limit_overlap_check(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60, "personal")])
    slot = make_slot(MONDAY.replace(hour=9))

    assert validate_hard_constraints(slot, context, [NoOverlapConstraint(["work"])])[0]
    assert not validate_hard_constraints(slot, context, [NoOverlapConstraint(["personal"])])[0]


def test_all_violations_are_collected(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=7), 60)])
    ok, violations = validate_hard_constraints(make_slot(MONDAY.replace(hour=7)), context, DEFAULT_HARD_CONSTRAINTS)

    assert not ok
    assert len(violations) == 2  # overlap and in the past


def test_not_in_past(make_slot, empty_context, now):
    assert NotInPastConstraint().check(make_slot(now), empty_context).violated is False
    assert NotInPastConstraint().check(make_slot(now - timedelta(minutes=1)), empty_context).violated is True


def test_day_part_constraint(make_slot, empty_context):
    constraint = DayPartConstraint("morning")

    assert not constraint.check(make_slot(MONDAY.replace(hour=10)), empty_context).violated
    assert constraint.check(make_slot(MONDAY.replace(hour=11, minute=30)), empty_context).violated


def test_working_hours_constraint(make_slot, empty_context):
    constraint = WorkingHoursConstraint()

    assert not constraint.check(make_slot(MONDAY.replace(hour=9)), empty_context).violated
    assert constraint.check(make_slot(MONDAY.replace(hour=16, minute=30)), empty_context).violated
    assert constraint.check(make_slot(SATURDAY.replace(hour=10)), empty_context).violated


def test_blocked_time_constraint(make_slot, make_context):
    context = make_context(blocked_ranges=[TimeRange(MONDAY.replace(hour=12), MONDAY.replace(hour=14))])

    assert BlockedTimeConstraint().check(make_slot(MONDAY.replace(hour=13)), context).violated
    assert not BlockedTimeConstraint().check(make_slot(MONDAY.replace(hour=14)), context).violated


def test_deadline_constraint(make_slot, empty_context):
    constraint = DeadlineConstraint(MONDAY.replace(hour=12))

    assert not constraint.check(make_slot(MONDAY.replace(hour=11)), empty_context).violated
    assert constraint.check(make_slot(MONDAY.replace(hour=11, minute=30)), empty_context).violated


def test_soft_constraints_are_ignored_by_hard_validator(make_slot, empty_context):
    ok, _ = validate_hard_constraints(make_slot(SATURDAY.replace(hour=10)), empty_context, [WeekendAvoidanceConstraint()])
    assert ok


def test_callable_hard_constraint(make_slot, empty_context):
    no_mondays = HardConstraint.from_callable("no-mondays", lambda slot, ctx: slot.start.weekday() != 0, "No Mondays")

    assert no_mondays.constraint_type == ConstraintType.HARD
    ok, violations = validate_hard_constraints(make_slot(MONDAY.replace(hour=10)), empty_context, [no_mondays])
    assert not ok
    assert violations == ["No Mondays"]


def test_failing_constraint_is_neutral_and_logged(make_slot, empty_context, caplog):
    def broken(slot, context):
        raise RuntimeError("calendar backend unavailable")

    constraint = HardConstraint.from_callable("broken", broken)
    with caplog.at_level(logging.WARNING):
        ok, violations = validate_hard_constraints(make_slot(MONDAY.replace(hour=10)), empty_context, [constraint])

    assert ok
    assert violations == []
    assert "broken" in caplog.text


# ================================
# SOFT CONSTRAINTS
# ================================

def test_clean_weekday_slot_scores_full_marks(make_slot, empty_context):
    score, penalties = calculate_soft_constraint_score(make_slot(MONDAY.replace(hour=10)), empty_context, DEFAULT_SOFT_CONSTRAINTS)

    assert score == 100.0
    assert penalties == []


def test_weekend_penalty(make_slot, empty_context):
    score, penalties = calculate_soft_constraint_score(make_slot(SATURDAY.replace(hour=10)), empty_context, DEFAULT_SOFT_CONSTRAINTS)

    assert score == 70.0
    assert [p.name for p in penalties] == ["avoid-weekends"]


def test_penalties_floor_at_zero(make_slot, empty_context):
    heavy = [SoftConstraint.from_callable(f"heavy-{i}", lambda slot, ctx: False, penalty=60) for i in range(2)]
    score, penalties = calculate_soft_constraint_score(make_slot(MONDAY.replace(hour=10)), empty_context, heavy)

    assert score == 0.0
    assert sum(p.penalty for p in penalties) == 120


def test_buffer_time(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60)])

    assert BufferTimeConstraint().check(make_slot(MONDAY.replace(hour=10)), context).penalty == 10
    assert BufferTimeConstraint().check(make_slot(MONDAY.replace(hour=10, minute=5)), context).penalty == 0


def test_meeting_clustering(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60, "meeting")])

    assert MeetingClusteringConstraint().check(make_slot(MONDAY.replace(hour=10, minute=30)), context).penalty == 0
    assert MeetingClusteringConstraint().check(make_slot(MONDAY.replace(hour=15)), context).penalty == 12


def test_focus_time_protection(make_slot, make_context):
    block = FocusBlock(MONDAY.replace(hour=14), MONDAY.replace(hour=16))
    context = make_context(focus_blocks=[block])

    assert FocusTimeProtectionConstraint().check(make_slot(MONDAY.replace(hour=15)), context).penalty == 25
    assert FocusTimeProtectionConstraint().check(make_slot(MONDAY.replace(hour=16)), context).penalty == 0


def test_back_to_back_chain(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=h), 60) for h in (9, 10, 11)])

    assert AvoidBackToBackConstraint().check(make_slot(MONDAY.replace(hour=12)), context).penalty == 8
    assert AvoidBackToBackConstraint().check(make_slot(MONDAY.replace(hour=13)), context).penalty == 0


def test_same_category_proximity_scales_with_gap(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60, "gym")])
    constraint = SameCategoryProximityConstraint("gym")

    assert constraint.check(make_slot(MONDAY.replace(hour=10, minute=15)), context).penalty == pytest.approx(5.0)
    assert constraint.check(make_slot(MONDAY.replace(hour=11)), context).penalty == 0


def test_same_category_proximity_without_category_is_neutral(make_event, make_slot, make_context):
    context = make_context([make_event(MONDAY.replace(hour=9), 60, "gym")])
    result = SameCategoryProximityConstraint(None).check(make_slot(MONDAY.replace(hour=10)), context)

    assert not result.violated
    assert result.penalty == 0


def test_preferred_hours_and_lunch(make_slot, make_context):
    context = make_context(
        preferred_hours=DayPart("preferred", time(9), time(12)),
        lunch_time=DayPart("lunch", time(12), time(13)),
    )

    assert PreferredHoursConstraint().check(make_slot(MONDAY.replace(hour=10)), context).penalty == 0
    assert PreferredHoursConstraint().check(make_slot(MONDAY.replace(hour=15)), context).penalty == 20
    assert LunchTimeConstraint().check(make_slot(MONDAY.replace(hour=12, minute=30)), context).penalty == 15


def test_missing_lunch_time_is_neutral(make_slot, empty_context):
    result = LunchTimeConstraint().check(make_slot(MONDAY.replace(hour=12)), empty_context)
    assert result.penalty == 0


def test_preferred_time_ranges(make_slot, empty_context):
    constraint = PreferredTimeConstraint([TimeRange(MONDAY.replace(hour=13), MONDAY.replace(hour=17))])

    assert constraint.check(make_slot(MONDAY.replace(hour=14)), empty_context).penalty == 0
    assert constraint.check(make_slot(MONDAY.replace(hour=10)), empty_context).penalty == 20


def test_priority_alignment(make_slot, empty_context, now):
    urgent = PriorityAlignmentConstraint(1)

    assert urgent.check(make_slot(now + timedelta(hours=12)), empty_context).penalty == 0
    assert urgent.check(make_slot(now + timedelta(hours=30)), empty_context).penalty == 10
    assert PriorityAlignmentConstraint(5).check(make_slot(now + timedelta(days=10)), empty_context).penalty == 0
