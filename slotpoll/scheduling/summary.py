"""Aggregate respondents' answers into per-slot and per-date summaries.

Slots are anything with ``id``, ``date``, ``start_time`` and ``end_time``
attributes and responses anything with ``respondent_id``, ``time_slot_id``
and ``status``; the SQLModel tables qualify, so do plain test doubles.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import date, time
from typing import Any, Iterable, Sequence
from uuid import UUID

from slotpoll.models.response import ResponseStatus


@dataclass(frozen=True)
class SlotSummary:
    slot_id: UUID
    date: date
    start_time: time
    end_time: time
    ok_count: int
    maybe_count: int
    ng_count: int
    total_respondents: int


@dataclass(frozen=True)
class EventSummary:
    slots: list[SlotSummary]
    total_respondents: int


@dataclass(frozen=True)
class DateProgress:
    """How far one respondent got through the slots of one date."""

    date: date
    slot_count: int
    answered_count: int
    status: ResponseStatus | None

    @property
    def complete(self) -> bool:
        return self.answered_count == self.slot_count

    @property
    def partial(self) -> bool:
        return 0 < self.answered_count < self.slot_count


def _slot_order(slot: Any) -> tuple:
    return (slot.date, slot.start_time, slot.end_time)


def summarize(
    time_slots: Iterable[Any],
    responses: Iterable[Any],
    respondent_ids: Iterable[UUID] | None = None,
) -> EventSummary:
    """
    Count ok/maybe/ng answers per slot.

    ``total_respondents`` counts everyone who has answered the event at all
    and is the same for every slot. Pass ``respondent_ids`` to include
    respondents with no stored answers; otherwise it is derived from the
    responses. Responses for slots not in ``time_slots`` are ignored.

    Returns:
        EventSummary with slot summaries ordered by (date, start_time).
    """
    slots = sorted(time_slots, key=_slot_order)
    known = {slot.id for slot in slots}

    counts: dict[UUID, Counter] = {slot.id: Counter() for slot in slots}
    seen_respondents = set()
    for response in responses:
        seen_respondents.add(response.respondent_id)
        if response.time_slot_id in known:
            counts[response.time_slot_id][ResponseStatus(response.status)] += 1

    total = len(set(respondent_ids)) if respondent_ids is not None else len(seen_respondents)

    summaries = [
        SlotSummary(
            slot_id=slot.id,
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            ok_count=counts[slot.id][ResponseStatus.OK],
            maybe_count=counts[slot.id][ResponseStatus.MAYBE],
            ng_count=counts[slot.id][ResponseStatus.NG],
            total_respondents=total,
        )
        for slot in slots
    ]
    return EventSummary(slots=summaries, total_respondents=total)


def select_best(summaries: Sequence[SlotSummary]) -> SlotSummary | None:
    """
    Pick the slot to recommend.

    A later slot replaces the current best only with strictly more ok
    answers, or as many ok answers and strictly fewer ng answers. Maybe
    counts never break ties, and remaining ties keep the earlier slot.
    """
    best = None
    for candidate in summaries:
        if best is None:
            best = candidate
        elif candidate.ok_count > best.ok_count:
            best = candidate
        elif candidate.ok_count == best.ok_count and candidate.ng_count < best.ng_count:
            best = candidate
    return best


def group_slots_by_date(time_slots: Iterable[Any]) -> dict[date, list[Any]]:
    """Group slots by date; dates ascending, slots by start time."""
    groups: dict[date, list[Any]] = {}
    for slot in sorted(time_slots, key=_slot_order):
        groups.setdefault(slot.date, []).append(slot)
    return groups


def combine_statuses(statuses: Iterable[ResponseStatus | str | None]) -> ResponseStatus | None:
    """
    Collapse several answers into one.

    All ok gives ok, all ng gives ng, and any other mix gives maybe.
    Unanswered entries (None) are skipped; nothing answered gives None.
    """
    answered = [ResponseStatus(s) for s in statuses if s is not None]
    if not answered:
        return None
    if all(s is ResponseStatus.OK for s in answered):
        return ResponseStatus.OK
    if all(s is ResponseStatus.NG for s in answered):
        return ResponseStatus.NG
    return ResponseStatus.MAYBE


def date_progress(time_slots: Iterable[Any], responses: Iterable[Any]) -> list[DateProgress]:
    """
    Per-date answer progress for a single respondent.

    ``responses`` must all belong to the same respondent. A date is
    complete only when every slot on it has an answer.
    """
    by_slot = {response.time_slot_id: response.status for response in responses}
    progress = []
    for day, slots in group_slots_by_date(time_slots).items():
        statuses = [by_slot.get(slot.id) for slot in slots]
        progress.append(
            DateProgress(
                date=day,
                slot_count=len(slots),
                answered_count=sum(1 for s in statuses if s is not None),
                status=combine_statuses(statuses),
            )
        )
    return progress
