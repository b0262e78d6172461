from datetime import datetime, timedelta, timezone

import pytest

from calendar_scheduler.scheduling import Chronotype, SchedulingValidationError, energy_level
from calendar_scheduler.scheduling.scoring.energy_scoring import calculate_energy_score
from calendar_scheduler.scheduling.scoring.time_scoring import calculate_timing_score, ideal_lead_hours
from calendar_scheduler.scheduling.scoring.workload_scoring import calculate_balance_score

MONDAY = datetime(2026, 3, 2)


# ================================
# ENERGY
# ================================

@pytest.mark.parametrize("chronotype, hour, expected", [
    (Chronotype.MORNING, 8, 0.9),
    (Chronotype.MORNING, 13, 0.6),
    (Chronotype.MORNING, 23, 0.2),
    (Chronotype.EVENING, 7, 0.3),
    (Chronotype.EVENING, 20, 0.9),
    (Chronotype.BALANCED, 10, 0.8),
    (Chronotype.BALANCED, 12, 0.6),
    (Chronotype.BALANCED, 3, 0.2),
    ("evening", 16, 0.8),
])
def test_energy_levels(chronotype, hour, expected):
    assert energy_level(hour, chronotype) == expected


@pytest.mark.parametrize("hour", [-1, 24])
def test_energy_level_rejects_bad_hour(hour):
    with pytest.raises(ValueError):
        energy_level(hour)


def test_balanced_energy_is_symmetric_around_noon(make_slot, empty_context):
    morning = calculate_energy_score(make_slot(MONDAY.replace(hour=9)), empty_context)
    afternoon = calculate_energy_score(make_slot(MONDAY.replace(hour=15)), empty_context)

    assert morning == pytest.approx(afternoon, abs=1.0)


def test_energy_score_averages_start_and_end(make_slot, make_context):
    context = make_context(chronotype=Chronotype.MORNING)

    # 11:00 -> 0.9, 12:00 -> 0.6
    assert calculate_energy_score(make_slot(MONDAY.replace(hour=11)), context) == pytest.approx(75.0)


def test_morning_person_prefers_mornings(make_slot, make_context):
    context = make_context(chronotype="morning")

    assert (calculate_energy_score(make_slot(MONDAY.replace(hour=8)), context)
            > calculate_energy_score(make_slot(MONDAY.replace(hour=19)), context))


# ================================
# TIMING
# ================================

def test_ideal_lead_hours():
    assert [ideal_lead_hours(p) for p in range(1, 6)] == [4, 24, 72, 168, 336]


def test_urgent_slot_inside_ideal_window_scores_full(make_slot, now):
    assert calculate_timing_score(make_slot(now + timedelta(hours=2)), now, priority=1) == 100.0


def test_urgent_slot_beyond_ideal_window_decays(make_slot, now):
    score = calculate_timing_score(make_slot(now + timedelta(hours=30)), now, priority=1)

    assert 60 < score < 80
    assert score == pytest.approx(100 * 0.95 ** 6.5)


def test_timing_decay_is_tunable(make_slot, now):
    slot = make_slot(now + timedelta(hours=30))
    assert calculate_timing_score(slot, now, 1, decay=0.5) < calculate_timing_score(slot, now, 1)


def test_past_slot_scores_zero(make_slot, now):
    assert calculate_timing_score(make_slot(now - timedelta(hours=1)), now, priority=3) == 0.0


@pytest.mark.parametrize("priority", [0, 6, True, 2.5, "1"])
def test_invalid_priority_raises(make_slot, now, priority):
    with pytest.raises(SchedulingValidationError):
        calculate_timing_score(make_slot(now), now, priority)


# ================================
# BALANCE
# ================================

def test_empty_week_balance(make_slot, empty_context):
    # Projected 60 minutes against a 0 minute average
    assert calculate_balance_score(make_slot(MONDAY.replace(hour=10)), empty_context) == pytest.approx(75.0)


def test_overloaded_day_scores_low(make_event, make_slot, make_context):
    events = [
        make_event(MONDAY.replace(hour=8), 360),                  # Monday: 6 hours
        make_event(MONDAY.replace(day=3, hour=9), 480),           # Tuesday: 8 hours
        make_event(MONDAY.replace(day=4, hour=9), 420),           # Wednesday: 7 hours
    ]
    context = make_context(events)

    # Week holds 21 hours (3 h/day average); Monday would reach 7 hours
    score = calculate_balance_score(make_slot(MONDAY.replace(hour=15)), context)

    assert score < 50
    assert score == 0.0


def test_balance_ignores_events_from_other_weeks(make_event, make_slot, make_context):
    # Saturday 28 February belongs to the previous week
    context = make_context([make_event(datetime(2026, 2, 28, 9), 600)])

    assert calculate_balance_score(make_slot(MONDAY.replace(hour=10)), context) == pytest.approx(75.0)


# ================================
# CONTEXT VALIDATION
# ================================

def test_malformed_chronotype_is_rejected(make_context):
    with pytest.raises(SchedulingValidationError):
        make_context(chronotype="night-owl")


def test_negative_buffer_is_rejected(make_context):
    with pytest.raises(SchedulingValidationError):
        make_context(buffer_minutes=-5)


def test_timezone_aware_event_is_rejected(make_event, make_context):
    aware = make_event(datetime(2026, 3, 2, 9, tzinfo=timezone.utc))
    with pytest.raises(SchedulingValidationError):
        make_context([aware])


def test_timezone_aware_now_is_rejected(make_context):
    with pytest.raises(SchedulingValidationError):
        make_context(now=datetime(2026, 3, 2, 8, tzinfo=timezone.utc))
