# backend/tests/conftest.py
"""
Pytest configuration for the studio booking API.

Tests run against an in-memory SQLite database; every test gets fresh
tables. Access tokens are signed with a test-only secret and verified by the
real JWT identity provider.
"""

import os

# Set test configuration BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["STUDIO_OPEN_HOUR"] = "9"
os.environ["STUDIO_CLOSE_HOUR"] = "22"
os.environ["SLOT_STEP_MINUTES"] = "30"

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, Generator

from fastapi.testclient import TestClient
import jwt
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies.database import get_db
from app.auth import JWTIdentityProvider, get_identity_provider
from app.database import Base
from app.main import app
from app.models import PrivateClass, Room, RoomImage

TEST_JWT_SECRET = "test-identity-secret"
TEST_AUDIENCE = "authenticated"

USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"


def make_token(
    subject: str = USER_ID,
    *,
    secret: str = TEST_JWT_SECRET,
    audience: str = TEST_AUDIENCE,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Sign an access token the way the identity provider does."""
    now = datetime.now(timezone.utc)
    payload = {"sub": subject, "aud": audience, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def booking_date() -> date:
    return date.today() + timedelta(days=7)


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def identity_provider() -> JWTIdentityProvider:
    return JWTIdentityProvider(TEST_JWT_SECRET, audience=TEST_AUDIENCE)


@pytest.fixture
def client(engine, identity_provider) -> Generator[TestClient, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )

    def override_get_db() -> Generator[Session, None, None]:
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(USER_ID)}"}


@pytest.fixture
def other_auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}


@pytest.fixture
def headers_for() -> Callable[[str], Dict[str, str]]:
    def _headers(subject: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(subject)}"}

    return _headers


@pytest.fixture
def test_room(db: Session) -> Room:
    room = Room(
        name="Studio A",
        type="recording",
        description="Vocal booth with control room",
        capacity=4,
        hourly_rate=Decimal("40.00"),
        amenities=["microphones", "monitors"],
        is_available=True,
    )
    room.images = [
        RoomImage(image_url="https://cdn.example.com/a-2.jpg", display_order=2),
        RoomImage(image_url="https://cdn.example.com/a-1.jpg", display_order=1),
    ]
    db.add(room)
    db.commit()
    return room


@pytest.fixture
def practice_room(db: Session) -> Room:
    room = Room(
        name="Practice 1",
        type="practice",
        capacity=2,
        hourly_rate=Decimal("15.00"),
        amenities=[],
    )
    db.add(room)
    db.commit()
    return room


@pytest.fixture
def hidden_room(db: Session) -> Room:
    room = Room(
        name="Storage",
        type="rehearsal",
        capacity=8,
        hourly_rate=Decimal("25.00"),
        is_available=False,
    )
    db.add(room)
    db.commit()
    return room


@pytest.fixture
def test_class(db: Session) -> PrivateClass:
    private_class = PrivateClass(
        instructor_name="Maria Lopez",
        instrument="guitar",
        description="Beginner to intermediate guitar",
        lesson_rate=Decimal("50.00"),
        duration_minutes=60,
    )
    db.add(private_class)
    db.commit()
    return private_class


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return make_token
