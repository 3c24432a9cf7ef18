"""Event model for availability polls.

This module defines the Event model, the poll an organizer shares with
respondents. An event owns its candidate time slots and the respondents
who have answered it; deleting the event removes all of them.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from slotpoll.models.organizer import Organizer
    from slotpoll.models.respondent import Respondent
    from slotpoll.models.time_slot import TimeSlot


class EventStatus(str, Enum):
    """Lifecycle of a poll. Only active polls accept submissions."""

    ACTIVE = "active"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class Event(SQLModel, table=True):
    """A scheduling poll created by an organizer.

    Attributes:
        id: Unique identifier (UUID), also the share-link key.
        organizer_id: Foreign key to the owning Organizer.
        title: Event title shown to respondents.
        description: Optional free text.
        duration: Expected meeting length in minutes. Informational only,
            never checked against slot lengths.
        deadline: Optional answer deadline, displayed but not enforced.
        status: One of "active", "closed" or "cancelled".
        created_at: Creation timestamp.
        updated_at: Timestamp of the last organizer edit.
        organizer: Reference to the owning Organizer.
        time_slots: Candidate slots for this event.
        respondents: People who have answered this event.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organizer_id: UUID = Field(foreign_key="organizer.id", index=True, ondelete="CASCADE")
    title: str = Field(max_length=255)
    description: str | None = None
    duration: int = Field(default=60)
    deadline: datetime | None = None
    status: EventStatus = Field(default=EventStatus.ACTIVE, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    organizer: Optional["Organizer"] = Relationship(back_populates="events")
    time_slots: list["TimeSlot"] = Relationship(
        back_populates="event",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
    respondents: list["Respondent"] = Relationship(
        back_populates="event",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
