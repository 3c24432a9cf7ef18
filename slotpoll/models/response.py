"""Response model for a respondent's answer to one slot."""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from slotpoll.models.respondent import Respondent
    from slotpoll.models.time_slot import TimeSlot


class ResponseStatus(str, Enum):
    OK = "ok"
    NG = "ng"
    MAYBE = "maybe"


class Response(SQLModel, table=True):
    """One respondent's answer for one time slot.

    The "maybe requires a comment" rule is enforced when a submission is
    validated, not by the table.

    Attributes:
        id: Unique identifier (UUID).
        respondent_id: Foreign key to the answering Respondent.
        time_slot_id: Foreign key to the answered TimeSlot.
        status: One of "ok", "ng" or "maybe".
        comment: Optional note, always present for "maybe".
        created_at: When the answer was stored.
    """
    __table_args__ = (UniqueConstraint("respondent_id", "time_slot_id"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    respondent_id: UUID = Field(foreign_key="respondent.id", index=True, ondelete="CASCADE")
    time_slot_id: UUID = Field(foreign_key="timeslot.id", index=True, ondelete="CASCADE")
    status: ResponseStatus
    comment: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    respondent: Optional["Respondent"] = Relationship(back_populates="responses")
    time_slot: Optional["TimeSlot"] = Relationship(back_populates="responses")
