from sqlalchemy import String, Integer, Enum, ForeignKey, DateTime, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, time
from typing import Optional

from .database import Base
from .scheduling.core.constants import Chronotype


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String, unique=True, index=True)

    chronotype: Mapped[Chronotype] = mapped_column(Enum(Chronotype), default=Chronotype.BALANCED)

    # Working hours; work_days is a comma separated list of weekday numbers (Monday=0)
    work_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    work_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    work_days: Mapped[Optional[str]] = mapped_column(String, nullable=True, default="0,1,2,3,4")

    preferred_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    preferred_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    lunch_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    lunch_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    buffer_minutes: Mapped[int] = mapped_column(Integer, default=5)
    max_back_to_back: Mapped[int] = mapped_column(Integer, default=3)

    # Relationships
    events = relationship("Event", back_populates="user")


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, default="general")

    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    user = relationship("User", back_populates="events")
