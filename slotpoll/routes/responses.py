"""Response routes: respondents submit answers, organizers read results."""
import logging
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from slotpoll.core.auth import get_current_organizer
from slotpoll.core.database import get_session
from slotpoll.models import Event, EventStatus, Organizer, Respondent, Response, ResponseStatus
from slotpoll.notifications.email import notify_response_received
from slotpoll.routes.events import get_event_or_404, get_owned_event, slot_payload
from slotpoll.scheduling.summary import SlotSummary, date_progress, select_best, summarize
from slotpoll.scheduling.validation import Answer, validate_submission
from slotpoll.services.responses import load_event_responses, replace_responses

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/events/{event_id}", tags=["responses"])


class AnswerIn(BaseModel):
    time_slot_id: UUID
    status: ResponseStatus
    comment: Optional[str] = None


class SubmissionRequest(BaseModel):
    name: str = ""
    responses: list[AnswerIn] = []


def summary_payload(summary: SlotSummary) -> dict:
    return {
        "slot_id": summary.slot_id,
        "date": summary.date.isoformat(),
        "start_time": summary.start_time.strftime("%H:%M"),
        "end_time": summary.end_time.strftime("%H:%M"),
        "ok_count": summary.ok_count,
        "maybe_count": summary.maybe_count,
        "ng_count": summary.ng_count,
        "total_respondents": summary.total_respondents,
    }


def respondent_payload(respondent: Respondent) -> dict:
    return {
        "id": respondent.id,
        "name": respondent.name,
        "created_at": respondent.created_at,
        "updated_at": respondent.updated_at,
    }


def send_response_notification(event: Event, organizer: Organizer, respondent_name: str) -> None:
    """Background task: notify the organizer, logging and dropping failures."""
    try:
        notify_response_received(event, organizer, respondent_name)
    except Exception as e:
        logger.error(f"Failed to send response notification for event {event.id}: {e}")


@router.get("/responses")
async def list_responses(
    event_id: UUID,
    format: Literal["full", "summary"] = "full",
    organizer: Organizer = Depends(get_current_organizer),
    session: Session = Depends(get_session),
):
    """
    Results for the organizer.

    ``format=summary`` returns per-slot ok/maybe/ng counts ordered by date
    and time, the total number of respondents and the recommended slot.
    The default returns every respondent and each slot with its answers.
    """
    event = get_owned_event(session, event_id, organizer)
    respondents, time_slots, responses = load_event_responses(session, event)

    if format == "summary":
        result = summarize(time_slots, responses, respondent_ids=[r.id for r in respondents])
        # No answers yet means no meaningful recommendation
        best = select_best(result.slots) if result.total_respondents else None
        return {
            "slots": [summary_payload(s) for s in result.slots],
            "total_respondents": result.total_respondents,
            "best_slot": summary_payload(best) if best else None,
        }

    names = {respondent.id: respondent.name for respondent in respondents}
    by_slot: dict[UUID, list[Response]] = {}
    for response in responses:
        by_slot.setdefault(response.time_slot_id, []).append(response)

    return {
        "respondents": [respondent_payload(r) for r in respondents],
        "time_slots": [
            {
                **slot_payload(slot),
                "responses": [
                    {
                        "respondent_id": response.respondent_id,
                        "respondent_name": names.get(response.respondent_id),
                        "status": response.status,
                        "comment": response.comment,
                    }
                    for response in by_slot.get(slot.id, [])
                ],
            }
            for slot in time_slots
        ],
    }


@router.post("/responses")
async def submit_responses(
    event_id: UUID,
    req: SubmissionRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    """
    Submit a respondent's answers for every slot of an event.

    Re-submitting under the same name replaces the earlier answers. The
    organizer is emailed in the background once the response is sent; a
    failed email does not fail the submission.
    """
    event = get_event_or_404(session, event_id)
    if event.status != EventStatus.ACTIVE:
        raise HTTPException(status_code=400, detail="Event is not accepting responses")

    answers = [
        Answer(time_slot_id=a.time_slot_id, status=a.status, comment=a.comment)
        for a in req.responses
    ]
    submission = validate_submission(
        req.name, answers, slot_ids=[slot.id for slot in event.time_slots]
    )
    respondent, responses = replace_responses(session, event, submission)

    # Load what the email needs while the session is still open
    organizer = event.organizer
    background_tasks.add_task(send_response_notification, event, organizer, respondent.name)

    return {
        "respondent": respondent_payload(respondent),
        "responses": [
            {
                "time_slot_id": response.time_slot_id,
                "status": response.status,
                "comment": response.comment,
            }
            for response in responses
        ],
    }


@router.get("/respondents/{respondent_id}/dates")
async def respondent_dates(
    event_id: UUID,
    respondent_id: UUID,
    session: Session = Depends(get_session),
):
    """
    Per-date progress of one respondent.

    A date is complete when every slot on it has an answer and partial
    when only some do. ``status`` folds the date's answers into one.
    """
    event = get_event_or_404(session, event_id)
    respondent = session.get(Respondent, respondent_id)
    if not respondent or respondent.event_id != event.id:
        raise HTTPException(status_code=404, detail="Respondent not found")

    responses = session.exec(
        select(Response).where(Response.respondent_id == respondent.id)
    ).all()
    return [
        {
            "date": progress.date.isoformat(),
            "slot_count": progress.slot_count,
            "answered_count": progress.answered_count,
            "complete": progress.complete,
            "partial": progress.partial,
            "status": progress.status,
        }
        for progress in date_progress(event.time_slots, responses)
    ]
