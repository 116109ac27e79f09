import os

# Configure the app for tests BEFORE importing it
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta, UTC
from typing import AsyncGenerator, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from leadwatch.core.base import Base
from leadwatch.core.database import get_db
from leadwatch.core.security import create_access_token
from leadwatch.models.appointment import Appointment
from leadwatch.models.lead import Lead, LeadStatus
from leadwatch.models.note import LeadNote
from leadwatch.models.quote import Quote
from leadwatch.models.user import User, UserRole

# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory schema per test, shared by every session of the test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer header for a user as the upstream auth service would issue it."""

    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ──────────────────────────────────────────────
# Seed data
# ──────────────────────────────────────────────

async def _make_user(db_session, full_name: str, email: str, role: UserRole) -> User:
    user = User(full_name=full_name, email=email, role=role, is_active=True)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin(db_session) -> User:
    return await _make_user(db_session, "Ada Admin", "ada@example.com", UserRole.ADMIN)


@pytest.fixture
async def rep(db_session) -> User:
    return await _make_user(db_session, "Sam Rep", "sam@example.com", UserRole.SALES_REP)


@pytest.fixture
async def other_rep(db_session) -> User:
    return await _make_user(db_session, "Ria Rep", "ria@example.com", UserRole.SALES_REP)


@pytest.fixture
def make_lead(db_session):
    """Factory: persist a lead, optionally with a note at ``note_at``."""

    async def _make(
        owner: Optional[User],
        status: LeadStatus = LeadStatus.ASSIGNED,
        note_at: Optional[datetime] = None,
        full_name: str = "Lead",
        closed_at: Optional[datetime] = None,
    ) -> Lead:
        lead = Lead(
            full_name=full_name,
            status=status,
            assigned_to_id=owner.id if owner else None,
            closed_at=closed_at,
        )
        db_session.add(lead)
        await db_session.flush()
        if note_at is not None:
            db_session.add(LeadNote(lead_id=lead.id, content="Called, no answer", created_at=note_at))
        await db_session.commit()
        return lead

    return _make


@pytest.fixture
def add_activity(db_session):
    """Factory: record a note, appointment or quote for a lead at ``at``."""

    async def _add(lead: Lead, kind: str, at: datetime, sales_rep_id: Optional[int] = None) -> None:
        if kind == "note":
            record = LeadNote(lead_id=lead.id, content="Follow-up", created_at=at)
        elif kind == "appointment":
            record = Appointment(
                lead_id=lead.id,
                sales_rep_id=sales_rep_id,
                scheduled_for=at + timedelta(days=2),
                created_at=at,
            )
        elif kind == "quote":
            record = Quote(lead_id=lead.id, amount=125000, created_at=at)
        else:
            raise ValueError(kind)
        db_session.add(record)
        await db_session.commit()

    return _add


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 2, 12, 0, tzinfo=UTC)
