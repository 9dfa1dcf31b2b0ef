"""
Madurai Clean - Test Configuration and Fixtures
"""
import os
from typing import Callable, Dict, Generator, List, Optional

import pytest

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['JWT_SECRET'] = 'test-jwt-secret-for-testing-only'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['SEED_ON_STARTUP'] = 'false'
os.environ.pop('GMAIL_USER', None)
os.environ.pop('GMAIL_PASS', None)

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import build_engine, get_db, init_db
from app.config.seed_data import seed_events, seed_wards
from app.main import app
from app.services.email_service import get_mailer


class RecordingMailer:
    """Stands in for the SMTP mailer and keeps every message it was asked to send."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[Dict] = []

    @property
    def enabled(self) -> bool:
        return True

    async def send_report_email(self, to: str, subject: str, report_data: Dict) -> bool:
        self.sent.append({"to": to, "subject": subject, "data": report_data})
        return self.succeed

    def subjects_for(self, address: str) -> List[str]:
        return [m["subject"] for m in self.sent if m["to"] == address]


@pytest.fixture
def engine():
    """Fresh in-memory database per test, shared across connections."""
    eng = build_engine('sqlite://', poolclass=StaticPool)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """Session for seeding and inspecting the store directly"""
    session = session_factory()
    seed_wards(session)
    seed_events(session)
    session.commit()
    yield session
    session.close()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def client(db_session: Session, session_factory, mailer) -> Generator[TestClient, None, None]:
    """Create test client with database and mailer overrides"""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    # Not used as a context manager, so the startup hook (real DB + seed) does not run
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., Dict]:
    """
    Register and log in a user; returns {"id", "token", "headers", "email"}.
    """
    counter = {"n": 0}

    def _register(
        name: str = "Citizen",
        role: str = "citizen",
        ward_id: Optional[int] = None,
        email: Optional[str] = None,
        password: str = "password123",
    ) -> Dict:
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        body = {"name": name, "email": email, "password": password, "role": role}
        if ward_id is not None:
            body["ward_id"] = ward_id

        resp = client.post('/auth/register', json=body)
        assert resp.status_code == 201, resp.text

        login = client.post('/auth/login', json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        token = login.json()["token"]
        return {
            "id": resp.json()["id"],
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _register


@pytest.fixture
def report_payload() -> Dict:
    return {
        "ward_id": 2,
        "category": "Garbage Pile",
        "urgency": "high",
        "description": "Garbage heap near the Anna Nagar bus stop, growing every day since the weekend market.",
        "lat": 9.9252,
        "lng": 78.1450,
        "image_urls": ["https://example.com/garbage.jpg"],
    }


@pytest.fixture
def create_report(client: TestClient, report_payload: Dict) -> Callable[..., int]:
    def _create(headers: Dict, **overrides) -> int:
        resp = client.post('/reports', json={**report_payload, **overrides}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["id"]

    return _create
