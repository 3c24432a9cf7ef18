"""Validation of a respondent's answer set before it is stored."""
from dataclasses import dataclass
from typing import Iterable, Sequence
from uuid import UUID

from slotpoll.core.errors import (
    DuplicateAnswer,
    EmptyAnswerSet,
    IncompleteAnswerSet,
    MissingComment,
    MissingName,
    UnknownSlot,
)
from slotpoll.models.response import ResponseStatus


@dataclass(frozen=True)
class Answer:
    time_slot_id: UUID
    status: ResponseStatus
    comment: str | None = None


@dataclass(frozen=True)
class AcceptedSubmission:
    name: str
    answers: tuple[Answer, ...]


def _normalize_comment(comment: str | None) -> str | None:
    if comment is None:
        return None
    return comment.strip() or None


def validate_submission(
    name: str | None,
    answers: Sequence[Answer],
    slot_ids: Iterable[UUID] | None = None,
) -> AcceptedSubmission:
    """
    Gate an answer set. Raises a SubmissionError subclass on failure.

    Checks, in order: a non-blank name, at least one answer, a comment on
    every "maybe" answer. When ``slot_ids`` (the event's slots) is given,
    answers must also cover exactly those slots, once each.

    Returns:
        The submission with the name and every comment trimmed; blank
        comments on non-maybe answers become None.
    """
    if name is None or not name.strip():
        raise MissingName()
    if not answers:
        raise EmptyAnswerSet()

    accepted = []
    for answer in answers:
        status = ResponseStatus(answer.status)
        comment = _normalize_comment(answer.comment)
        if status is ResponseStatus.MAYBE and comment is None:
            raise MissingComment(answer.time_slot_id)
        accepted.append(Answer(time_slot_id=answer.time_slot_id, status=status, comment=comment))

    if slot_ids is not None:
        expected = set(slot_ids)
        answered = set()
        for answer in accepted:
            if answer.time_slot_id not in expected:
                raise UnknownSlot(answer.time_slot_id)
            if answer.time_slot_id in answered:
                raise DuplicateAnswer(answer.time_slot_id)
            answered.add(answer.time_slot_id)
        if answered != expected:
            raise IncompleteAnswerSet(len(expected - answered))

    return AcceptedSubmission(name=name.strip(), answers=tuple(accepted))
