from datetime import datetime, timedelta

import pytest

from calendar_scheduler.scheduling import ScheduledEvent, SchedulingContext, SlotScorer, TimeSlot

# Monday 2 March 2026, 08:00. The week containing it starts Sunday 1 March.
NOW = datetime(2026, 3, 2, 8, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_event():
    def _make(start, minutes=60, category="general", title=""):
        return ScheduledEvent(start=start, end=start + timedelta(minutes=minutes), category=category, title=title)
    return _make


@pytest.fixture
def make_slot():
    def _make(start, minutes=60):
        return TimeSlot(start, start + timedelta(minutes=minutes))
    return _make


@pytest.fixture
def make_context():
    def _make(events=(), **kwargs):
        kwargs.setdefault("now", NOW)
        return SchedulingContext(events=events, **kwargs)
    return _make


@pytest.fixture
def empty_context(make_context):
    return make_context()


@pytest.fixture
def scorer():
    return SlotScorer()


@pytest.fixture
def db_session():
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from calendar_scheduler.models import Base

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
