"""Google Calendar API client for reading an organizer's busy time."""
import logging
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Iterable

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from slotpoll.core.config import settings
from slotpoll.core.errors import CalendarError, CalendarTransportError, CalendarUnauthorized
from slotpoll.scheduling.intervals import BusyInterval

logger = logging.getLogger(__name__)

# Busy time only needs read access
SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

# Cached credentials for the configured refresh token
_credentials: Credentials | None = None


def get_credentials(access_token: str | None = None) -> Credentials:
    """
    Get credentials for a calendar request.

    A per-request OAuth access token (from the organizer's sign-in) wins.
    Otherwise the refresh token from the environment is used and refreshed
    when needed.

    Raises:
        CalendarUnauthorized: No credentials are configured or the refresh
            token was rejected.
        CalendarTransportError: The token endpoint could not be reached.
    """
    global _credentials

    if access_token:
        return Credentials(token=access_token, scopes=SCOPES)

    if not settings.google_refresh_token:
        logger.warning("No calendar access token sent and no GOOGLE_REFRESH_TOKEN configured")
        raise CalendarUnauthorized()

    if _credentials and _credentials.valid:
        return _credentials

    credentials = Credentials(
        token=None,
        refresh_token=settings.google_refresh_token,
        token_uri="https://oauth2.googleapis.com/token",
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        scopes=SCOPES,
    )
    try:
        credentials.refresh(Request())
    except RefreshError as e:
        logger.error(f"Failed to refresh credentials: {e}")
        _credentials = None
        raise CalendarUnauthorized() from e
    except TransportError as e:
        logger.error(f"Token endpoint unreachable: {e}")
        raise CalendarTransportError() from e

    logger.info("Refreshed Google API credentials")
    _credentials = credentials
    return _credentials


def get_calendar_service(access_token: str | None = None):
    """Build authenticated Calendar API service."""
    creds = get_credentials(access_token)
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


def has_valid_credentials() -> bool:
    """Check if server-side calendar credentials are configured."""
    return bool(settings.google_refresh_token)


def _parse_datetime(dt_dict: dict) -> datetime | None:
    """Parse a timed Google Calendar datetime; all-day dates give None."""
    dt_str = dt_dict.get("dateTime")
    if not dt_str:
        return None
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))


def _to_busy(google_event: dict) -> BusyInterval | None:
    if google_event.get("status") == "cancelled":
        return None
    # Events marked "free" don't block time
    if google_event.get("transparency") == "transparent":
        return None
    start = _parse_datetime(google_event.get("start", {}))
    end = _parse_datetime(google_event.get("end", {}))
    if start is None or end is None:
        return None
    return BusyInterval(start=start, end=end)


def fetch_busy_intervals(
    service,
    time_min: datetime,
    time_max: datetime,
    calendar_id: str | None = None,
) -> list[BusyInterval]:
    """
    List the timed, opaque events between ``time_min`` and ``time_max``.

    Cancelled, transparent and all-day events are skipped.

    Raises:
        CalendarUnauthorized: The API rejected the credentials (401/403).
        CalendarTransportError: Any other API or network failure.
    """
    calendar_id = calendar_id or settings.google_calendar_id
    busy = []
    page_token = None

    try:
        while True:
            params = {
                "calendarId": calendar_id,
                "timeMin": time_min.isoformat(),
                "timeMax": time_max.isoformat(),
                "singleEvents": True,
                "orderBy": "startTime",
            }
            if page_token:
                params["pageToken"] = page_token
            events_result = service.events().list(**params).execute()
            for google_event in events_result.get("items", []):
                interval = _to_busy(google_event)
                if interval is not None:
                    busy.append(interval)

            page_token = events_result.get("nextPageToken")
            if not page_token:
                break
    except HttpError as e:
        if e.resp.status in (401, 403):
            logger.warning(f"Calendar rejected credentials: {e}")
            raise CalendarUnauthorized() from e
        logger.error(f"Calendar request failed: {e}")
        raise CalendarTransportError() from e
    except RefreshError as e:
        raise CalendarUnauthorized() from e
    except (TransportError, httplib2.HttpLib2Error, OSError) as e:
        logger.error(f"Calendar unreachable: {e}")
        raise CalendarTransportError() from e

    logger.info(f"Fetched {len(busy)} busy intervals from calendar {calendar_id}")
    return busy


def load_busy_intervals(
    days: Iterable[date],
    tz: tzinfo | None = None,
    access_token: str | None = None,
) -> tuple[list[BusyInterval], bool]:
    """
    Fetch busy time covering ``days``, treating failure as no data.

    Returns:
        (busy intervals, True) on success, ([], False) when the calendar
        is unauthorized or unreachable.
    """
    days = sorted(set(days))
    if not days:
        return [], True

    # The API needs an explicit offset
    tz = tz or UTC
    time_min = datetime.combine(days[0], time.min, tzinfo=tz)
    time_max = datetime.combine(days[-1] + timedelta(days=1), time.min, tzinfo=tz)

    try:
        service = get_calendar_service(access_token)
        return fetch_busy_intervals(service, time_min, time_max), True
    except CalendarError as e:
        logger.warning(f"No busy data available ({e.kind}), continuing without calendar")
        return [], False
