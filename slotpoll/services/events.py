"""Event, slot and organizer persistence."""
import logging
from datetime import UTC, date, datetime, time
from typing import Iterable, NamedTuple

from sqlalchemy import func
from sqlmodel import Session, select

from slotpoll.models import Event, EventStatus, Organizer, Respondent, TimeSlot

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "duration", "deadline", "status")


class SlotSpec(NamedTuple):
    date: date
    start_time: time
    end_time: time


def get_or_create_organizer(session: Session, email: str, name: str | None = None) -> Organizer:
    """Find the organizer by email, creating or renaming as needed."""
    organizer = session.exec(select(Organizer).where(Organizer.email == email)).first()
    if organizer is None:
        organizer = Organizer(email=email, name=name or "")
        session.add(organizer)
        session.commit()
        session.refresh(organizer)
        logger.info(f"Created organizer {email}")
    elif name and organizer.name != name:
        organizer.name = name
        session.add(organizer)
        session.commit()
    return organizer


def create_event(
    session: Session,
    organizer: Organizer,
    title: str,
    description: str | None = None,
    duration: int = 60,
    deadline: datetime | None = None,
    time_slots: Iterable[SlotSpec] = (),
) -> Event:
    """Create an event and its initial slots in one commit."""
    event = Event(
        organizer_id=organizer.id,
        title=title,
        description=description,
        duration=duration,
        deadline=deadline,
    )
    session.add(event)
    session.flush()  # Get event.id

    _stage_new_slots(session, event, time_slots)
    session.commit()
    session.refresh(event)
    logger.info(f"Created event {event.id} with {len(event.time_slots)} slots")
    return event


def list_events_for_organizer(session: Session, organizer: Organizer) -> list[tuple[Event, int]]:
    """Return the organizer's events, newest first, with respondent counts."""
    statement = (
        select(Event, func.count(Respondent.id))
        .outerjoin(Respondent, Respondent.event_id == Event.id)
        .where(Event.organizer_id == organizer.id)
        .group_by(Event.id)
        .order_by(Event.created_at.desc())
    )
    return [(event, count) for event, count in session.exec(statement).all()]


def count_respondents(session: Session, event: Event) -> int:
    statement = select(func.count(Respondent.id)).where(Respondent.event_id == event.id)
    return session.exec(statement).one()


def update_event(session: Session, event: Event, changes: dict) -> Event:
    """Apply organizer edits. Unknown keys are ignored."""
    for field in UPDATABLE_FIELDS:
        if field in changes:
            value = changes[field]
            if field == "status":
                value = EventStatus(value)
            setattr(event, field, value)
    event.updated_at = datetime.now(UTC)
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"Updated event {event.id}: {sorted(k for k in changes if k in UPDATABLE_FIELDS)}")
    return event


def delete_event(session: Session, event: Event) -> None:
    """Delete an event with its slots, respondents and responses."""
    event_id = event.id
    session.delete(event)
    session.commit()
    logger.info(f"Deleted event {event_id}")


def _stage_new_slots(session: Session, event: Event, slots: Iterable[SlotSpec]) -> list[TimeSlot]:
    existing = {
        (slot.date, slot.start_time, slot.end_time)
        for slot in session.exec(select(TimeSlot).where(TimeSlot.event_id == event.id)).all()
    }
    created = []
    for spec in slots:
        spec = SlotSpec(*spec)
        if spec.start_time >= spec.end_time:
            raise ValueError(f"Slot on {spec.date} must start before it ends")
        if spec in existing:
            continue
        existing.add(spec)
        slot = TimeSlot(
            event_id=event.id,
            date=spec.date,
            start_time=spec.start_time,
            end_time=spec.end_time,
        )
        session.add(slot)
        created.append(slot)
    return created


def add_time_slots(session: Session, event: Event, slots: Iterable[SlotSpec]) -> list[TimeSlot]:
    """
    Add candidate slots to an event.

    Slots already on the event, or repeated within ``slots``, are skipped.

    Returns:
        Only the newly created slots.
    """
    created = _stage_new_slots(session, event, slots)
    session.commit()
    for slot in created:
        session.refresh(slot)
    logger.info(f"Added {len(created)} slots to event {event.id}")
    return created


def delete_time_slot(session: Session, slot: TimeSlot) -> None:
    """Delete a slot and every answer recorded against it."""
    session.delete(slot)
    session.commit()
