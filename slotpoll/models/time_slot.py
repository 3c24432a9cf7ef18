"""Time slot model for candidate dates and times."""

from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from slotpoll.models.event import Event
    from slotpoll.models.response import Response


class TimeSlot(SQLModel, table=True):
    """A candidate date and time window for an event.

    Slots are immutable once created; they can only be deleted. The same
    (date, start_time, end_time) may appear at most once per event, and
    adding a duplicate is a no-op at the service layer.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the parent Event.
        date: Calendar date of the slot.
        start_time: Start time of day, strictly before end_time.
        end_time: End time of day.
        created_at: Creation timestamp.
        event: Reference to the parent Event.
        responses: Answers recorded against this slot.
    """
    __table_args__ = (
        UniqueConstraint("event_id", "date", "start_time", "end_time"),
        CheckConstraint("start_time < end_time", name="ck_timeslot_start_before_end"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True, ondelete="CASCADE")
    date: date
    start_time: time
    end_time: time
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    event: Optional["Event"] = Relationship(back_populates="time_slots")
    responses: list["Response"] = Relationship(
        back_populates="time_slot",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
