"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.database import get_session
from app.main import app
from app.models import Event, EventTeam, Location, LocationType, TeamRole, User
from app.registration.tickets import new_event_id


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


def auth_headers(user: User) -> dict:
    """Headers the identity gateway would forward for this user."""
    return {"X-User-Id": user.id, "X-User-Email": user.email}


@pytest.fixture(name="auth")
def auth_fixture():
    return auth_headers


def _make_user(session: Session, user_id: str, email: str, name: str) -> User:
    user = User(id=user_id, email=email, full_name=name)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="organizer")
def organizer_fixture(session: Session) -> User:
    return _make_user(session, "organizer-1", "organizer@example.com", "Olivia Organizer")


@pytest.fixture(name="user_a")
def user_a_fixture(session: Session) -> User:
    return _make_user(session, "user-a", "a@example.com", "Alex A")


@pytest.fixture(name="user_b")
def user_b_fixture(session: Session) -> User:
    return _make_user(session, "user-b", "b@example.com", "Blake B")


@pytest.fixture(name="make_event")
def make_event_fixture(session: Session, organizer: User):
    """Factory creating an event owned by ``organizer``."""

    def make_event(
        location_type: LocationType = LocationType.VENUE,
        capacity: int | None = None,
        require_approval: bool = False,
        **overrides,
    ) -> Event:
        location_id = None
        if location_type == LocationType.VENUE:
            location = Location(description="1 Main St, Springfield", main_text="Town Hall")
            session.add(location)
            session.flush()
            location_id = location.id

        fields = {
            "event_id": new_event_id(),
            "name": "Test Event",
            "description": '{"type": "doc", "content": []}',
            "organizer": "Test Org",
            "start_date": datetime.now(UTC) + timedelta(days=1),
            "end_date": datetime.now(UTC) + timedelta(days=1, hours=2),
            "location_type": location_type,
            "location_id": location_id,
            "capacity": capacity,
            "require_approval": require_approval,
        }
        fields.update(overrides)
        event = Event(**fields)
        session.add(event)
        session.flush()
        session.add(EventTeam(event_id=event.id, user_id=organizer.id, role=TeamRole.CREATOR))
        session.commit()
        session.refresh(event)
        return event

    return make_event


@pytest.fixture(name="venue_event")
def venue_event_fixture(make_event) -> Event:
    """Open venue event: no capacity, no approval."""
    return make_event()


@pytest.fixture(name="online_event")
def online_event_fixture(make_event) -> Event:
    """Online event requiring approval."""
    return make_event(
        location_type=LocationType.ONLINE,
        require_approval=True,
        meeting_link="https://meet.example.com/abc",
    )
