"""Organizer identity for authenticated routes.

Sign-in happens upstream; the auth proxy forwards the organizer's email
(and optionally display name) as request headers.
"""
from fastapi import Depends, Header, HTTPException
from sqlmodel import Session

from slotpoll.core.database import get_session
from slotpoll.models import Organizer
from slotpoll.services.events import get_or_create_organizer


def get_current_organizer(
    x_organizer_email: str | None = Header(default=None),
    x_organizer_name: str | None = Header(default=None),
    session: Session = Depends(get_session),
) -> Organizer:
    """Dependency resolving the signed-in organizer. 401 when absent."""
    email = (x_organizer_email or "").strip().lower()
    if not email:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return get_or_create_organizer(session, email, (x_organizer_name or "").strip() or None)
