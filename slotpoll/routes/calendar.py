"""Calendar routes for proposing candidate slots from free time."""
import logging
from datetime import date
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field, model_validator

from slotpoll.calendar.client import load_busy_intervals
from slotpoll.core.auth import get_current_organizer
from slotpoll.core.config import settings
from slotpoll.models import Organizer
from slotpoll.scheduling.intervals import SlotMode, compute_free_slots_for_dates

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/calendar", tags=["calendar"])


class AvailableSlotsRequest(BaseModel):
    dates: list[date] = Field(min_length=1)
    work_start_hour: int = Field(default=settings.work_start_hour, ge=0, le=24)
    work_end_hour: int = Field(default=settings.work_end_hour, ge=0, le=24)
    mode: SlotMode = SlotMode.MERGE
    step_minutes: int = Field(default=settings.slot_step_minutes, gt=0)
    slot_minutes: int = Field(default=settings.slot_length_minutes, gt=0)

    @model_validator(mode="after")
    def check_dates(self) -> "AvailableSlotsRequest":
        if len(set(self.dates)) > 62:
            raise ValueError("at most 62 dates per request")
        return self


@router.post("/available-slots")
async def available_slots(
    req: AvailableSlotsRequest,
    x_calendar_token: str | None = Header(default=None),
    organizer: Organizer = Depends(get_current_organizer),
):
    """
    Compute free slots on the requested dates from the organizer's calendar.

    The calendar is read with the access token in ``X-Calendar-Token`` or,
    without one, the server's configured credentials. If the calendar
    cannot be read the whole working window is returned as free and
    ``busy_data_available`` is false.
    """
    tz = ZoneInfo(settings.timezone)
    busy, busy_data_available = load_busy_intervals(req.dates, tz=tz, access_token=x_calendar_token)

    slots = compute_free_slots_for_dates(
        req.dates,
        req.work_start_hour,
        req.work_end_hour,
        busy,
        mode=req.mode,
        step_minutes=req.step_minutes,
        slot_minutes=req.slot_minutes,
        tz=tz,
    )
    logger.info(
        f"Computed {len(slots)} free slots over {len(set(req.dates))} dates for {organizer.email}"
    )
    return {
        "busy_data_available": busy_data_available,
        "available_slots": [
            {
                "date": slot.date.isoformat(),
                "start_time": slot.start_time.strftime("%H:%M"),
                "end_time": slot.end_time.strftime("%H:%M"),
            }
            for slot in slots
        ],
    }
