"""Organizer model for the people who create polls.

Organizers are identified by email address. The upstream auth layer
passes the address on every request and the record is created on first
sight, then kept in sync with the display name it reports.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from slotpoll.models.event import Event


class Organizer(SQLModel, table=True):
    """A person who owns one or more poll events.

    Attributes:
        id: Unique identifier (UUID).
        email: Email address, unique. Notifications are sent here.
        name: Display name used in notification greetings.
        created_at: When the organizer was first seen.
        events: Events owned by this organizer.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=255)
    name: str = Field(default="", max_length=255)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    events: list["Event"] = Relationship(
        back_populates="organizer",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
