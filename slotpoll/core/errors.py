"""Error taxonomy for the poll service.

Two families of errors exist:

1. ``SubmissionError`` - a respondent's answer set was rejected. Reported
   back to the submitter, nothing is stored.
2. ``CollaboratorError`` - the calendar or the store failed. Reported
   upward as a generic failure. Nothing here is retried.

Handlers that render both families as JSON are registered on the app with
``register_exception_handlers``.
"""

import logging
from uuid import UUID

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PollError(Exception):
    """Base class for errors raised by the poll core and its collaborators."""

    kind: str = "poll_error"
    detail: str = "Unexpected poll error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.detail
        super().__init__(self.detail)


class SubmissionError(PollError, ValueError):
    """An answer set failed validation and must not be accepted."""

    kind = "invalid_submission"
    detail = "Invalid submission"


class MissingName(SubmissionError):
    kind = "missing_name"
    detail = "Name is required"


class EmptyAnswerSet(SubmissionError):
    kind = "empty_answer_set"
    detail = "At least one answer is required"


class MissingComment(SubmissionError):
    """A "maybe" answer was submitted without a comment."""

    kind = "missing_comment"
    detail = "A comment is required for maybe answers"

    def __init__(self, time_slot_id: UUID | None = None):
        self.time_slot_id = time_slot_id
        super().__init__()


class UnknownSlot(SubmissionError):
    kind = "unknown_slot"
    detail = "Answer references a slot that is not part of this event"

    def __init__(self, time_slot_id: UUID | None = None):
        self.time_slot_id = time_slot_id
        super().__init__(f"Unknown slot: {time_slot_id}" if time_slot_id else None)


class DuplicateAnswer(SubmissionError):
    kind = "duplicate_answer"
    detail = "A slot was answered more than once"

    def __init__(self, time_slot_id: UUID | None = None):
        self.time_slot_id = time_slot_id
        super().__init__(f"Duplicate answer for slot: {time_slot_id}" if time_slot_id else None)


class IncompleteAnswerSet(SubmissionError):
    kind = "incomplete_answer_set"
    detail = "Every slot must be answered"

    def __init__(self, missing: int = 0):
        self.missing = missing
        super().__init__(f"{missing} slot(s) left unanswered" if missing else None)


class CollaboratorError(PollError):
    """An external dependency (calendar, store) failed."""

    kind = "collaborator_error"
    detail = "External dependency failed"


class CalendarError(CollaboratorError):
    kind = "calendar_error"
    detail = "Calendar request failed"


class CalendarUnauthorized(CalendarError):
    kind = "calendar_unauthorized"
    detail = "Calendar credentials are missing or expired"


class CalendarTransportError(CalendarError):
    kind = "calendar_transport_error"
    detail = "Calendar could not be reached"


class StoreUnavailable(CollaboratorError):
    kind = "store_unavailable"
    detail = "Storage is temporarily unavailable"


async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
    logger.info(f"Rejected submission on {request.url.path}: {exc.kind}")
    return JSONResponse(status_code=400, content={"error": exc.kind, "detail": exc.detail})


async def collaborator_error_handler(request: Request, exc: CollaboratorError) -> JSONResponse:
    logger.error(f"Collaborator failure on {request.url.path}: {exc.kind}: {exc.detail}")
    return JSONResponse(status_code=503, content={"error": exc.kind, "detail": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Register JSON handlers for the poll error families."""
    app.add_exception_handler(SubmissionError, submission_error_handler)
    app.add_exception_handler(CollaboratorError, collaborator_error_handler)
