"""Authentication status routes."""
from fastapi import APIRouter

from slotpoll.calendar.client import has_valid_credentials

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/status")
async def auth_status():
    """
    Check if server-side calendar credentials are configured.

    Organizers can still pass their own access token per request; this
    only reports whether the fallback refresh token is set.
    """
    configured = has_valid_credentials()
    return {
        "calendar_configured": configured,
        "message": (
            "Calendar credentials configured"
            if configured
            else "Send X-Calendar-Token or set GOOGLE_REFRESH_TOKEN to read busy time"
        ),
    }
