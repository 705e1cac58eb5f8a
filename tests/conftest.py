"""Shared test configuration and fixtures.

Each test gets its own SQLite database file under ``tmp_path``, so tests are
fully isolated and need no external services. Outbound email is replaced by
``RecordingDispatcher``, which remembers every notification it was asked to
send.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from aura_inn.auth.jwt import create_token_pair
from aura_inn.auth.passwords import hash_password
from aura_inn.database import Base, get_db
from aura_inn.main import app
from aura_inn.models.booking import Booking
from aura_inn.models.room_type import RoomType
from aura_inn.models.user import User
from aura_inn.services.activity_log import ActivityLog, get_activity_log
from aura_inn.services.booking_repository import SqlBookingStore, get_booking_store
from aura_inn.services.notifications import NotificationDispatcher, NotificationKind, SmtpMailer, get_dispatcher

OWNER_EMAIL = "owner@theaurainn.com"


class RecordingDispatcher(NotificationDispatcher):
    """Dispatcher that records sends instead of talking to an SMTP relay."""

    def __init__(self, succeed: bool = True) -> None:
        super().__init__(
            SmtpMailer(host="", port=0),
            owner_email=OWNER_EMAIL,
            hotel_name="The Aura Inn",
            location_url="https://maps.google.com/?q=aura+inn",
        )
        self.succeed = succeed
        self.sent: list[tuple[NotificationKind, int, str]] = []

    async def send(self, kind: NotificationKind, booking: Booking, owner_email: str | None = None) -> bool:
        to_email = self.recipient(kind, booking, owner_email)
        if not to_email:
            return False
        self.sent.append((kind, booking.id, to_email))
        return self.succeed

    def kinds(self) -> list[NotificationKind]:
        return [kind for kind, _, _ in self.sent]


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Engine over a throwaway SQLite file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging test data. Commit so requests can see it."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def booking_store(session_factory) -> SqlBookingStore:
    return SqlBookingStore(session_factory)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def activity_log() -> ActivityLog:
    return ActivityLog(maxlen=50)


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    session_factory,
    booking_store: SqlBookingStore,
    dispatcher: RecordingDispatcher,
    activity_log: ActivityLog,
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test database and fakes."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_store] = lambda: booking_store
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_activity_log] = lambda: activity_log

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def _create_user(db_session: AsyncSession, role: str = "admin", is_active: bool = True) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role}-{unique}@theaurainn.com",
        hashed_password=hash_password("testpass123"),
        name=f"Test {role.title()}",
        is_active=is_active,
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session)


@pytest_asyncio.fixture
async def staff_user(db_session: AsyncSession) -> User:
    """Active user without the admin role."""
    return await _create_user(db_session, role="staff")


@pytest.fixture
def auth_headers(admin_user: User) -> dict[str, str]:
    """Return Authorization headers for the admin user."""
    tokens = create_token_pair(str(admin_user.id))
    return {"Authorization": f"Bearer {tokens['access_token']}"}


# ---------------------------------------------------------------------------
# Reference data and bookings
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def deluxe_room(db_session: AsyncSession) -> RoomType:
    room_type = RoomType(
        name="Deluxe",
        price=5000,
        description="King room with balcony",
        capacity=3,
        assigned_rooms=["201", "202", "203"],
    )
    db_session.add(room_type)
    await db_session.commit()
    return room_type


def make_booking(**overrides) -> Booking:
    """Unsaved booking with sensible defaults."""
    fields = {
        "guest_name": "Asha Verma",
        "phone": "+91 90000 00000",
        "email": "asha@guestmail.com",
        "check_in": date(2026, 3, 1),
        "check_out": date(2026, 3, 3),
        "adults": "2",
        "children": "0",
        "room_type": "Deluxe",
        "breakfast": False,
        "pickup": False,
        "flight_no": "",
        "arrival_time": "",
        "special_requests": "",
        "total_price": 10000,
        "utr": "UTR123",
        "status": "Pending",
        "created_at": datetime.now(timezone.utc),
        "pre_arrival_email_sent": False,
    }
    fields.update(overrides)
    return Booking(**fields)


@pytest_asyncio.fixture
async def stored_booking(booking_store: SqlBookingStore) -> Booking:
    async with booking_store.open() as bookings:
        return await bookings.create(make_booking())


@pytest.fixture
def new_booking():
    """Factory fixture for unsaved bookings (see ``make_booking``)."""
    return make_booking
