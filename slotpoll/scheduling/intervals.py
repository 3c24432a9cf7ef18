"""Free slot computation from busy calendar intervals.

Given a working-hours window for a date and the busy intervals pulled
from a calendar, compute the free time left in the window. Two modes:

    merge: the maximal free intervals, one per gap between busy blocks.
    step:  fixed-length candidates on a regular grid (e.g. 60-minute slots
           every 30 minutes) that fit entirely inside a free interval.

All functions here are pure: inputs are never mutated and the same input
always gives the same output, whatever order the busy intervals arrive in.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Iterable


class SlotMode(str, Enum):
    MERGE = "merge"
    STEP = "step"


@dataclass(frozen=True)
class BusyInterval:
    """An occupied half-open range [start, end) from an external calendar."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class FreeSlot:
    """A half-open free range [start, end) inside a working-hours window."""

    date: date
    start: datetime
    end: datetime

    @property
    def start_time(self) -> time:
        return self.start.time()

    @property
    def end_time(self) -> time:
        """Wall-clock end; a slot running to midnight ends at ``time.max``."""
        if self.end.date() > self.date:
            return time.max
        return self.end.time()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def working_window(
    day: date, work_start: int, work_end: int, tz: tzinfo | None = None
) -> tuple[datetime, datetime]:
    """Return the [start, end) datetimes of the working hours on ``day``.

    Hours are whole hours of the day; 24 means midnight ending the day.
    """
    midnight = datetime.combine(day, time.min, tzinfo=tz)
    return midnight + timedelta(hours=work_start), midnight + timedelta(hours=work_end)


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    if tz is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def _zone_of(busy: list[BusyInterval]) -> tzinfo | None:
    # Naive and aware datetimes can't be compared
    for interval in busy:
        for value in (interval.start, interval.end):
            if value.tzinfo is not None:
                return value.tzinfo
    return None


def clip_to_window(
    busy: Iterable[BusyInterval],
    window_start: datetime,
    window_end: datetime,
    tz: tzinfo | None = None,
) -> list[BusyInterval]:
    """Clip intervals to the window, dropping those entirely outside it.

    The result is sorted by (start, end).
    """
    clipped = []
    for interval in busy:
        start = max(_localize(interval.start, tz), window_start)
        end = min(_localize(interval.end, tz), window_end)
        if start < end:
            clipped.append(BusyInterval(start=start, end=end))
    return sorted(clipped, key=lambda iv: (iv.start, iv.end))


def _merge_free(
    day: date, window_start: datetime, window_end: datetime, busy: list[BusyInterval]
) -> list[FreeSlot]:
    free = []
    cursor = window_start
    for interval in busy:
        if interval.start > cursor:
            slot_end = min(interval.start, window_end)
            if slot_end > cursor:
                free.append(FreeSlot(date=day, start=cursor, end=slot_end))
        cursor = max(cursor, interval.end, window_start)
    if cursor < window_end:
        free.append(FreeSlot(date=day, start=cursor, end=window_end))
    return free


def _step_free(
    window_start: datetime,
    free: list[FreeSlot],
    step: timedelta,
    length: timedelta,
) -> list[FreeSlot]:
    """Enumerate grid-aligned candidates of ``length`` inside each free slot.

    The grid is anchored at the window start, so a free slot starting at
    10:10 with a 30-minute step yields candidates from 10:30.
    """
    candidates = []
    for slot in free:
        offset = slot.start - window_start
        steps = -(-offset // step)  # ceiling division on timedeltas
        start = window_start + steps * step
        while start + length <= slot.end:
            candidates.append(FreeSlot(date=slot.date, start=start, end=start + length))
            start += step
    return candidates


def compute_free_slots(
    day: date,
    work_start: int,
    work_end: int,
    busy: Iterable[BusyInterval],
    mode: SlotMode | str = SlotMode.MERGE,
    step_minutes: int = 30,
    slot_minutes: int = 60,
    tz: tzinfo | None = None,
) -> list[FreeSlot]:
    """
    Compute the free slots of ``day`` between ``work_start`` and ``work_end``.

    Busy intervals may be unordered, overlapping, or extend outside the
    window or the day; they are clipped to the window first. An empty or
    inverted window (work_start >= work_end) yields no slots.

    Args:
        day: The calendar date.
        work_start: First working hour (0-24).
        work_end: Hour the working day ends (0-24).
        busy: Busy intervals, naive or timezone-aware.
        mode: "merge" for maximal free intervals, "step" for fixed-length
            candidates on a ``step_minutes`` grid.
        step_minutes: Grid spacing for step mode.
        slot_minutes: Candidate length for step mode.
        tz: Timezone of the working hours. Aware busy datetimes are
            converted into it; naive ones are assumed to be in it. When
            omitted, the zone of the first aware busy datetime is used.

    Returns:
        Free slots ordered by start time.
    """
    mode = SlotMode(mode)
    if work_start >= work_end:
        return []

    busy = list(busy)
    if tz is None:
        tz = _zone_of(busy)
    window_start, window_end = working_window(day, work_start, work_end, tz)
    clipped = clip_to_window(busy, window_start, window_end, tz)
    free = _merge_free(day, window_start, window_end, clipped)

    if mode is SlotMode.STEP:
        if step_minutes <= 0 or slot_minutes <= 0:
            raise ValueError("step_minutes and slot_minutes must be positive")
        return _step_free(
            window_start,
            free,
            timedelta(minutes=step_minutes),
            timedelta(minutes=slot_minutes),
        )
    return free


def compute_free_slots_for_dates(
    days: Iterable[date],
    work_start: int,
    work_end: int,
    busy: Iterable[BusyInterval],
    mode: SlotMode | str = SlotMode.MERGE,
    step_minutes: int = 30,
    slot_minutes: int = 60,
    tz: tzinfo | None = None,
) -> list[FreeSlot]:
    """Run ``compute_free_slots`` for each distinct date, in date order."""
    busy = list(busy)
    slots = []
    for day in sorted(set(days)):
        slots.extend(
            compute_free_slots(
                day,
                work_start,
                work_end,
                busy,
                mode=mode,
                step_minutes=step_minutes,
                slot_minutes=slot_minutes,
                tz=tz,
            )
        )
    return slots
