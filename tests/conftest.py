"""Shared test fixtures and configuration."""
import json

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eventsync.main import app
from eventsync.db.base import Base
from eventsync.db.changes import ChangeFeed
from eventsync.api.deps import get_coordinator, get_db, get_gateway
from eventsync.core.security import create_access_token
from eventsync.services.events import create_event
from eventsync.services.problems import create_problem
from eventsync.services.registrations import submit_registration
from eventsync.services.sheets_gateway import SheetsGateway
from eventsync.services.sync import SyncCoordinator


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
GATEWAY_URL = "https://script.example.test/macros/s/test/exec"


class FakeSheets:
    """
    Stands in for the Apps Script endpoint behind an httpx.MockTransport.

    - calls: decoded request bodies, in arrival order
    - replies: action -> dict (sent as a 200 JSON body) or a callable taking
      the body and returning a dict or an httpx.Response
    - gates: action -> asyncio.Event; replies for that action wait until set
    """

    def __init__(self):
        self.calls = []
        self.replies = {
            "syncEvent": {"status": 200, "success": True, "spreadsheetId": "sheet-1"},
            "syncProblem": {"status": 200, "success": True, "tabName": "Problem"},
        }
        self.gates = {}

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append(body)

        gate = self.gates.get(body["action"])
        if gate is not None:
            await gate.wait()

        reply = self.replies.get(body["action"], {"status": 200, "success": True})
        if callable(reply):
            reply = reply(body)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)

    @property
    def actions(self):
        return [call["action"] for call in self.calls]


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from eventsync.core.rate_limit import limiter

    limiter.reset()
    if "rate_limit" in request.keywords:
        yield
    else:
        limiter.enabled = False
        try:
            yield
        finally:
            limiter.enabled = True
    limiter.reset()


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_sheets():
    return FakeSheets()


@pytest.fixture
def gateway(fake_sheets):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_sheets))
    return SheetsGateway(GATEWAY_URL, client=client)


@pytest.fixture
def change_feed():
    return ChangeFeed()


@pytest.fixture
def coordinator(session_factory, gateway, change_feed):
    return SyncCoordinator(session_factory, gateway, feed=change_feed)


@pytest.fixture(scope="function")
def client(db_session, coordinator, gateway):
    """Create a test client with a test database and a stubbed gateway."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    """Generate a valid admin JWT token."""
    return create_access_token({"is_admin": True})


@pytest.fixture
def admin_client(client, admin_token):
    """Create a test client with admin cookie already set."""
    client.cookies.set("admin_token", admin_token)
    return client


@pytest.fixture
def event(db_session):
    return create_event(db_session, "Hack Night", description="Annual hackathon", max_team_size=4)


@pytest.fixture
def problem(db_session, event):
    return create_problem(db_session, event.id, "Smart Campus", "Build something useful")


@pytest.fixture
def registration(db_session, event, problem):
    return submit_registration(
        db_session,
        event.id,
        problem.id,
        team_name="Null Pointers",
        team_members=["Ada", "Linus", "Grace"],
        college_name="City College",
        contact_number="5550100",
        email="team@example.com",
    )
