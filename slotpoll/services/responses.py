"""Respondent answer persistence."""
import logging
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from slotpoll.core.errors import StoreUnavailable
from slotpoll.models import Event, Respondent, Response, TimeSlot
from slotpoll.scheduling.validation import AcceptedSubmission

logger = logging.getLogger(__name__)


def get_respondent_by_name(session: Session, event: Event, name: str) -> Respondent | None:
    statement = (
        select(Respondent)
        .where(Respondent.event_id == event.id)
        .where(Respondent.name == name)
    )
    return session.exec(statement).first()


def replace_responses(
    session: Session, event: Event, submission: AcceptedSubmission
) -> tuple[Respondent, list[Response]]:
    """
    Store a validated submission, replacing the respondent's earlier answers.

    The respondent is looked up by name and created on first submission.
    Its old answers are deleted and the new ones inserted in the same
    transaction, so a store failure leaves the previous answers in place.

    Two submissions under the same name are not serialized: whichever
    commits last wins.

    Raises:
        StoreUnavailable: The store failed; nothing was changed.
    """
    try:
        respondent = get_respondent_by_name(session, event, submission.name)
        if respondent is None:
            respondent = Respondent(event_id=event.id, name=submission.name)
            session.add(respondent)
            session.flush()  # Get respondent.id
        else:
            for response in respondent.responses:
                session.delete(response)
            # Deletes must hit the table before inserts reuse the same slots
            session.flush()
            respondent.updated_at = datetime.now(UTC)
            session.add(respondent)

        responses = [
            Response(
                respondent_id=respondent.id,
                time_slot_id=answer.time_slot_id,
                status=answer.status,
                comment=answer.comment,
            )
            for answer in submission.answers
        ]
        session.add_all(responses)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to store responses for event {event.id}: {e}")
        raise StoreUnavailable() from e

    session.refresh(respondent)
    logger.info(
        f"Stored {len(responses)} responses for '{respondent.name}' on event {event.id}"
    )
    return respondent, responses


def load_event_responses(
    session: Session, event: Event
) -> tuple[list[Respondent], list[TimeSlot], list[Response]]:
    """Load respondents, slots and every response of an event."""
    respondents = session.exec(
        select(Respondent)
        .where(Respondent.event_id == event.id)
        .order_by(Respondent.created_at)
    ).all()
    time_slots = session.exec(
        select(TimeSlot)
        .where(TimeSlot.event_id == event.id)
        .order_by(TimeSlot.date, TimeSlot.start_time)
    ).all()
    responses = session.exec(
        select(Response)
        .join(Respondent, Response.respondent_id == Respondent.id)
        .where(Respondent.event_id == event.id)
    ).all()
    return list(respondents), list(time_slots), list(responses)
