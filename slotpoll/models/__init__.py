from slotpoll.models.event import Event, EventStatus
from slotpoll.models.organizer import Organizer
from slotpoll.models.respondent import Respondent
from slotpoll.models.response import Response, ResponseStatus
from slotpoll.models.time_slot import TimeSlot

__all__ = [
    "Event",
    "EventStatus",
    "Organizer",
    "Respondent",
    "Response",
    "ResponseStatus",
    "TimeSlot",
]
