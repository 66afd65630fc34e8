"""
CapTrack - Test Configuration

Pytest fixtures and configuration.

Tests run against an in-memory SQLite database (aiosqlite). One connection
is shared through StaticPool so every session sees the same tables.
"""

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from captrack.database import Database, get_async_session
from captrack.models.developer import Developer, DeveloperRole
from captrack.models.entry import DailyEntry, EntryStatus, ManualEntry
from captrack.models.period_lock import PeriodLock, PeriodStatus
from captrack.models.project import Project, ProjectPhase
from captrack.services.entry_workflow import Actor
from captrack.utils.security import create_access_token
from main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Dates used across the suite
OPEN_DATE = date(2026, 3, 10)
LOCKED_DATE = date(2026, 1, 15)


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """A fresh database with all tables for each test."""
    db = Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with database.session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers_for(developer: Developer, auth_method: Optional[str] = None) -> dict:
    """Authorization headers carrying the developer's id."""
    claims = {"sub": str(developer.id)}
    if auth_method:
        claims["auth_method"] = auth_method
    token = create_access_token(data=claims)
    return {"Authorization": f"Bearer {token}"}


# ===========================================
# DATA FIXTURES
# ===========================================

async def _add_developer(db_session: AsyncSession, name: str, role: DeveloperRole) -> Developer:
    developer = Developer(
        id=uuid4(),
        email=f"{name}@example.com",
        display_name=name.title(),
        role=role,
        is_active=True,
    )
    db_session.add(developer)
    await db_session.commit()
    await db_session.refresh(developer)
    return developer


@pytest_asyncio.fixture
async def developer(db_session: AsyncSession) -> Developer:
    return await _add_developer(db_session, "ada", DeveloperRole.DEVELOPER)


@pytest_asyncio.fixture
async def other_developer(db_session: AsyncSession) -> Developer:
    return await _add_developer(db_session, "grace", DeveloperRole.DEVELOPER)


@pytest_asyncio.fixture
async def manager(db_session: AsyncSession) -> Developer:
    return await _add_developer(db_session, "margaret", DeveloperRole.MANAGER)


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> Developer:
    return await _add_developer(db_session, "linus", DeveloperRole.ADMIN)


@pytest.fixture
def developer_actor(developer: Developer) -> Actor:
    return Actor(developer=developer)


@pytest.fixture
def manager_actor(manager: Developer) -> Actor:
    return Actor(developer=manager)


async def _add_project(
    db_session: AsyncSession,
    name: str,
    phase: ProjectPhase,
    parent: Optional[Project] = None,
    requires_manager_approval: bool = False,
) -> Project:
    project = Project(
        id=uuid4(),
        name=name,
        phase=phase,
        parent_project_id=parent.id if parent else None,
        requires_manager_approval=requires_manager_approval,
    )
    db_session.add(project)
    await db_session.commit()
    await db_session.refresh(project)
    return project


@pytest_asyncio.fixture
async def parent_project(db_session: AsyncSession) -> Project:
    """A shipped product; new work on it goes to enhancement projects."""
    return await _add_project(db_session, "Billing Platform", ProjectPhase.POST_IMPLEMENTATION)


@pytest_asyncio.fixture
async def enhancement_project(db_session: AsyncSession, parent_project: Project) -> Project:
    return await _add_project(
        db_session, "Billing Platform - Invoicing v2",
        ProjectPhase.APPLICATION_DEVELOPMENT, parent=parent_project,
    )


@pytest_asyncio.fixture
async def unrelated_enhancement(db_session: AsyncSession) -> Project:
    other_parent = await _add_project(db_session, "Mobile App", ProjectPhase.POST_IMPLEMENTATION)
    return await _add_project(
        db_session, "Mobile App - Offline Mode",
        ProjectPhase.APPLICATION_DEVELOPMENT, parent=other_parent,
    )


@pytest_asyncio.fixture
async def approval_project(db_session: AsyncSession) -> Project:
    return await _add_project(
        db_session, "Regulated Ledger", ProjectPhase.APPLICATION_DEVELOPMENT,
        requires_manager_approval=True,
    )


EntryFactory = Callable[..., Awaitable[DailyEntry]]


@pytest_asyncio.fixture
async def make_entry(db_session: AsyncSession, developer: Developer, parent_project: Project) -> EntryFactory:
    """Factory for daily entries; defaults to a pending 5h suggestion."""

    async def factory(
        owner: Optional[Developer] = None,
        project: Optional[Project] = None,
        entry_date: date = OPEN_DATE,
        hours_estimated: str = "5.00",
        status: EntryStatus = EntryStatus.PENDING,
        phase_suggested: Optional[ProjectPhase] = ProjectPhase.APPLICATION_DEVELOPMENT,
        hours_confirmed: Optional[str] = None,
        enhancement_suggested: bool = False,
        description_suggested: Optional[str] = "Implemented invoice export endpoints",
        unmatched: bool = False,
    ) -> DailyEntry:
        entry = DailyEntry(
            id=uuid4(),
            developer_id=(owner or developer).id,
            project_id=None if unmatched else (project or parent_project).id,
            entry_date=entry_date,
            hours_estimated=Decimal(hours_estimated),
            phase_suggested=phase_suggested,
            description_suggested=description_suggested,
            source_session_ids=["sess-1"],
            source_commit_ids=["abc123"],
            enhancement_suggested=enhancement_suggested,
            status=status,
        )
        if hours_confirmed is not None:
            entry.hours_confirmed = Decimal(hours_confirmed)
            entry.phase_confirmed = phase_suggested
            entry.description_confirmed = entry.description_suggested
        db_session.add(entry)
        await db_session.commit()
        await db_session.refresh(entry)
        return entry

    return factory


@pytest_asyncio.fixture
async def make_manual_entry(db_session: AsyncSession, developer: Developer, parent_project: Project):
    """Factory for manual entries stored directly, bypassing policy."""

    async def factory(
        owner: Optional[Developer] = None,
        entry_date: date = OPEN_DATE,
        hours: str = "6.00",
        status: EntryStatus = EntryStatus.PENDING_APPROVAL,
    ) -> ManualEntry:
        entry = ManualEntry(
            id=uuid4(),
            developer_id=(owner or developer).id,
            project_id=parent_project.id,
            entry_date=entry_date,
            hours=Decimal(hours),
            phase=ProjectPhase.APPLICATION_DEVELOPMENT,
            description="Design review and pairing",
            status=status,
        )
        db_session.add(entry)
        await db_session.commit()
        await db_session.refresh(entry)
        return entry

    return factory


@pytest_asyncio.fixture
async def lock_period(db_session: AsyncSession):
    """Factory that stores a period status for (year, month)."""

    async def factory(year: int, month: int, status: PeriodStatus = PeriodStatus.LOCKED) -> PeriodLock:
        period = PeriodLock(id=uuid4(), year=year, month=month, status=status, note="Month-end close")
        db_session.add(period)
        await db_session.commit()
        await db_session.refresh(period)
        return period

    return factory


@pytest_asyncio.fixture
async def locked_january(lock_period) -> PeriodLock:
    return await lock_period(LOCKED_DATE.year, LOCKED_DATE.month)
