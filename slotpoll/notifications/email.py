"""Email notifications to organizers, sent through Resend."""
import logging
from pathlib import Path

import resend
from jinja2 import Environment, FileSystemLoader, select_autoescape

from slotpoll.core.config import settings
from slotpoll.models import Event, Organizer

logger = logging.getLogger(__name__)

templates = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent.parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def render_response_notification(event: Event, organizer: Organizer, respondent_name: str) -> str:
    """Render the HTML body telling an organizer about a new answer."""
    template = templates.get_template("response_notification.html")
    return template.render(
        event=event,
        organizer=organizer,
        respondent_name=respondent_name,
        event_url=f"{settings.app_url.rstrip('/')}/events/{event.id}",
    )


def notify_response_received(event: Event, organizer: Organizer, respondent_name: str) -> dict | None:
    """
    Email the organizer that ``respondent_name`` answered ``event``.

    Returns the Resend response, or None when email is not configured.
    Errors from Resend propagate; callers decide whether they matter.
    """
    if not settings.resend_api_key:
        logger.info("Email notification skipped: RESEND_API_KEY not configured")
        return None

    resend.api_key = settings.resend_api_key
    email_data = {
        "from": settings.email_from_address,
        "to": [organizer.email],
        "subject": f"{respondent_name} answered \"{event.title}\"",
        "html": render_response_notification(event, organizer, respondent_name),
    }
    response = resend.Emails.send(email_data)
    logger.info(f"Notified {organizer.email} about a response to event {event.id}")
    return response
