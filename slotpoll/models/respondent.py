"""Respondent model for people answering a poll.

Respondents do not need an account. Within one event they are
identified by display name only, so a second submission under the same
name replaces the first one's answers.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from slotpoll.models.event import Event
    from slotpoll.models.response import Response


class Respondent(SQLModel, table=True):
    """A named participant of one event.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the parent Event.
        name: Display name, trimmed. Not globally unique.
        created_at: Time of the first submission.
        updated_at: Time of the latest submission.
        event: Reference to the parent Event.
        responses: The respondent's current answers, one per slot.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    event: Optional["Event"] = Relationship(back_populates="respondents")
    responses: list["Response"] = Relationship(
        back_populates="respondent",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
