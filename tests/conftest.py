"""Shared test fixtures for the booking engine tests."""

from datetime import date, datetime
from typing import AsyncGenerator

import logfire
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import booking_engine.models  # noqa: F401  (registers tables)
from booking_engine.database import Base
from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.models.user import User, UserRole
from booking_engine.scheduling import TimeOfDay

logfire.configure(send_to_logfire=False, console=False)

# Tuesday, 10:00
NOW = datetime(2026, 3, 10, 10, 0, 0)
TOMORROW = date(2026, 3, 11)  # Wednesday
THURSDAY = date(2026, 3, 12)
FRIDAY = date(2026, 3, 13)
SATURDAY = date(2026, 3, 14)
SUNDAY = date(2026, 3, 15)
NEXT_MONDAY = date(2026, 3, 16)


class FixedClock:
    """Callable clock whose time the test controls."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared by every session of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def make_user(db: AsyncSession, external_id: str, role: UserRole = UserRole.USER) -> User:
    user = User(
        external_id=external_id,
        name=f"Member {external_id}",
        email=f"{external_id}@example.org",
        role=role.value,
    )
    db.add(user)
    await db.commit()
    return user


async def make_appointment(
    db: AsyncSession,
    user: User,
    day: date,
    start: str,
    status: AppointmentStatus = AppointmentStatus.CONFIRMED,
    duration: int = 30,
) -> Appointment:
    start_tod = TimeOfDay.parse(start)
    appointment = Appointment(
        user_id=user.id,
        appointment_date=day,
        start_time=start_tod.to_time(),
        end_time=start_tod.add_minutes(duration).to_time(),
        reason="Consultation",
        status=status.value,
    )
    db.add(appointment)
    await db.commit()
    return appointment


@pytest.fixture
async def member(db) -> User:
    return await make_user(db, "member-1")


@pytest.fixture
async def other_member(db) -> User:
    return await make_user(db, "member-2")


@pytest.fixture
async def admin(db) -> User:
    return await make_user(db, "admin-1", UserRole.ADMIN)
