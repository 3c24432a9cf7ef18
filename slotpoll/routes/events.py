"""Event routes for organizers managing polls and their slots."""
import logging
from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlmodel import Session

from slotpoll.core.auth import get_current_organizer
from slotpoll.core.database import get_session
from slotpoll.models import Event, EventStatus, Organizer, TimeSlot
from slotpoll.services.events import (
    SlotSpec,
    add_time_slots,
    count_respondents,
    create_event,
    delete_event,
    delete_time_slot,
    list_events_for_organizer,
    update_event,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/events", tags=["events"])


class SlotIn(BaseModel):
    date: date
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_order(self) -> "SlotIn":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    def to_spec(self) -> SlotSpec:
        return SlotSpec(self.date, self.start_time, self.end_time)


def _check_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v or len(v) > 255:
        raise ValueError("title must be 1-255 characters")
    return v


class CreateEventRequest(BaseModel):
    title: str
    description: Optional[str] = None
    duration: int = Field(default=60, gt=0)
    deadline: Optional[datetime] = None
    time_slots: list[SlotIn] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_title(v)


class UpdateEventRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0)
    deadline: Optional[datetime] = None
    status: Optional[EventStatus] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _check_title(v)


class AddSlotsRequest(BaseModel):
    time_slots: list[SlotIn] = Field(min_length=1)


def slot_payload(slot: TimeSlot) -> dict:
    return {
        "id": slot.id,
        "date": slot.date.isoformat(),
        "start_time": slot.start_time.strftime("%H:%M"),
        "end_time": slot.end_time.strftime("%H:%M"),
    }


def event_payload(event: Event, respondent_count: int) -> dict:
    slots = sorted(event.time_slots, key=lambda s: (s.date, s.start_time, s.end_time))
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "duration": event.duration,
        "deadline": event.deadline,
        "status": event.status,
        "created_at": event.created_at,
        "updated_at": event.updated_at,
        "respondent_count": respondent_count,
        "time_slots": [slot_payload(slot) for slot in slots],
    }


def get_event_or_404(session: Session, event_id: UUID) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def get_owned_event(session: Session, event_id: UUID, organizer: Organizer) -> Event:
    """Load an event the organizer owns. 404 if missing, 403 if not theirs."""
    event = get_event_or_404(session, event_id)
    if event.organizer_id != organizer.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return event


@router.get("")
async def list_events(
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """List the organizer's events, newest first, with slots and respondent counts."""
    return [
        event_payload(event, count)
        for event, count in list_events_for_organizer(session, organizer)
    ]


@router.post("", status_code=201)
async def create(
    req: CreateEventRequest,
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """
    Create an event with its initial candidate slots.

    Duplicate slots in the request are stored once.
    """
    event = create_event(
        session,
        organizer,
        title=req.title,
        description=req.description,
        duration=req.duration,
        deadline=req.deadline,
        time_slots=[slot.to_spec() for slot in req.time_slots],
    )
    return event_payload(event, 0)


@router.get("/{event_id}")
async def event_detail(event_id: UUID, session: Session = Depends(get_session)):
    """
    Public event view used by the respondent page.

    No authentication: anyone with the link can read the event and its slots.
    """
    event = get_event_or_404(session, event_id)
    return event_payload(event, count_respondents(session, event))


@router.patch("/{event_id}")
async def update(
    event_id: UUID,
    req: UpdateEventRequest,
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """Edit event details or close/cancel the poll. Owner only."""
    event = get_owned_event(session, event_id, organizer)
    changes = req.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No changes supplied")
    event = update_event(session, event, changes)
    return event_payload(event, count_respondents(session, event))


@router.delete("/{event_id}", status_code=204)
async def delete(
    event_id: UUID,
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """Delete an event with all its slots and answers. Owner only."""
    event = get_owned_event(session, event_id, organizer)
    delete_event(session, event)
    return Response(status_code=204)


@router.post("/{event_id}/slots", status_code=201)
async def add_slots(
    event_id: UUID,
    req: AddSlotsRequest,
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """
    Add candidate slots. Slots the event already has are ignored.

    Returns only the slots that were actually created.
    """
    event = get_owned_event(session, event_id, organizer)
    created = add_time_slots(session, event, [slot.to_spec() for slot in req.time_slots])
    return {"created": [slot_payload(slot) for slot in created]}


@router.delete("/{event_id}/slots/{slot_id}", status_code=204)
async def remove_slot(
    event_id: UUID,
    slot_id: UUID,
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """Delete a slot and the answers recorded against it. Owner only."""
    event = get_owned_event(session, event_id, organizer)
    slot = session.get(TimeSlot, slot_id)
    if not slot or slot.event_id != event.id:
        raise HTTPException(status_code=404, detail="Slot not found")
    delete_time_slot(session, slot)
    return Response(status_code=204)
