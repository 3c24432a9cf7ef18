"""Tests for database models."""

from datetime import date, time

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from slotpoll.models import (
    Event,
    EventStatus,
    Organizer,
    Respondent,
    Response,
    ResponseStatus,
    TimeSlot,
)


class TestEventModel:
    """Tests for the Event model."""

    def test_create_event_defaults(self, session: Session, organizer: Organizer):
        event = Event(organizer_id=organizer.id, title="Planning")
        session.add(event)
        session.commit()

        retrieved = session.exec(select(Event).where(Event.title == "Planning")).first()
        assert retrieved is not None
        assert retrieved.status == EventStatus.ACTIVE
        assert retrieved.duration == 60
        assert retrieved.deadline is None

    def test_event_organizer_relationship(self, sample_event: Event, organizer: Organizer):
        assert sample_event.organizer.email == organizer.email
        assert len(sample_event.time_slots) == 3

    def test_delete_cascades(self, session: Session, sample_event: Event):
        slot = sample_event.time_slots[0]
        respondent = Respondent(event_id=sample_event.id, name="Alice")
        session.add(respondent)
        session.flush()
        session.add(
            Response(respondent_id=respondent.id, time_slot_id=slot.id, status=ResponseStatus.OK)
        )
        session.commit()

        session.delete(sample_event)
        session.commit()

        assert session.exec(select(TimeSlot)).all() == []
        assert session.exec(select(Respondent)).all() == []
        assert session.exec(select(Response)).all() == []


class TestTimeSlotModel:
    """Tests for the TimeSlot model."""

    def test_unique_per_event(self, session: Session, sample_event: Event):
        existing = sample_event.time_slots[0]
        session.add(
            TimeSlot(
                event_id=sample_event.id,
                date=existing.date,
                start_time=existing.start_time,
                end_time=existing.end_time,
            )
        )
        with pytest.raises(IntegrityError):
            session.commit()

    def test_start_must_precede_end(self, session: Session, sample_event: Event):
        session.add(
            TimeSlot(
                event_id=sample_event.id,
                date=date(2026, 11, 4),
                start_time=time(12, 0),
                end_time=time(11, 0),
            )
        )
        with pytest.raises(IntegrityError):
            session.commit()


class TestResponseModel:
    """Tests for the Response model."""

    def test_one_answer_per_slot(self, session: Session, sample_event: Event):
        slot = sample_event.time_slots[0]
        respondent = Respondent(event_id=sample_event.id, name="Alice")
        session.add(respondent)
        session.flush()
        session.add(Response(respondent_id=respondent.id, time_slot_id=slot.id, status=ResponseStatus.OK))
        session.add(Response(respondent_id=respondent.id, time_slot_id=slot.id, status=ResponseStatus.NG))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_respondent_relationship(self, session: Session, sample_event: Event):
        slot = sample_event.time_slots[0]
        respondent = Respondent(event_id=sample_event.id, name="Bob")
        session.add(respondent)
        session.flush()
        session.add(
            Response(
                respondent_id=respondent.id,
                time_slot_id=slot.id,
                status=ResponseStatus.MAYBE,
                comment="after 3pm",
            )
        )
        session.commit()
        session.refresh(respondent)

        assert len(respondent.responses) == 1
        assert respondent.responses[0].time_slot.id == slot.id
        assert respondent.responses[0].status == ResponseStatus.MAYBE
