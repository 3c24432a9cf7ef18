"""Shared test fixtures."""

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from slotpoll.core.database import get_session
from slotpoll.main import app
from slotpoll.models import Event, EventStatus, Organizer, TimeSlot

ORGANIZER_EMAIL = "organizer@example.com"


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_headers")
def auth_headers_fixture() -> dict:
    return {"X-Organizer-Email": ORGANIZER_EMAIL, "X-Organizer-Name": "Olivia"}


@pytest.fixture(name="organizer")
def organizer_fixture(session: Session) -> Organizer:
    organizer = Organizer(email=ORGANIZER_EMAIL, name="Olivia")
    session.add(organizer)
    session.commit()
    session.refresh(organizer)
    return organizer


@pytest.fixture(name="other_organizer")
def other_organizer_fixture(session: Session) -> Organizer:
    organizer = Organizer(email="someone.else@example.com", name="Sam")
    session.add(organizer)
    session.commit()
    session.refresh(organizer)
    return organizer


def _make_event(session: Session, organizer: Organizer, **kwargs) -> Event:
    event = Event(organizer_id=organizer.id, title=kwargs.pop("title", "Team Lunch"), **kwargs)
    session.add(event)
    session.flush()

    for day, start, end in [
        (date(2026, 11, 2), time(10, 0), time(11, 0)),
        (date(2026, 11, 2), time(13, 0), time(14, 0)),
        (date(2026, 11, 3), time(10, 0), time(11, 0)),
    ]:
        session.add(TimeSlot(event_id=event.id, date=day, start_time=start, end_time=end))

    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="sample_event")
def sample_event_fixture(session: Session, organizer: Organizer) -> Event:
    """An active event with three slots over two dates."""
    return _make_event(session, organizer, description="Pick a lunch slot")


@pytest.fixture(name="closed_event")
def closed_event_fixture(session: Session, organizer: Organizer) -> Event:
    """An event that no longer accepts answers."""
    return _make_event(session, organizer, title="Closed Poll", status=EventStatus.CLOSED)


@pytest.fixture(name="foreign_event")
def foreign_event_fixture(session: Session, other_organizer: Organizer) -> Event:
    """An event owned by a different organizer."""
    return _make_event(session, other_organizer, title="Not Yours")
