"""Pytest configuration and fixtures."""
import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Ensure the application uses a dedicated SQLite database during tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["ENVIRONMENT"] = "test"

from backend.config import get_settings
from backend.models.meal_claim import MealClaim
from backend.models.participant import Participant


BASE_DIR = Path(__file__).resolve().parent.parent
TEST_DB_PATH = BASE_DIR / "test.db"
settings = get_settings()


@pytest.fixture(scope="session", autouse=True)
def apply_migrations():
    """Apply database migrations against the test database."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

    alembic_cfg = AlembicConfig(str(BASE_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, "head")

    yield

    if TEST_DB_PATH.exists():
        try:
            TEST_DB_PATH.unlink()
        except PermissionError:
            # On Windows, database might still be in use
            pass


@pytest.fixture
async def test_engine():
    """Create test database engine using the same database as migrations."""
    engine = create_async_engine(settings.database_url, echo=False)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def clean_tables(session_factory):
    """Start every test from an empty participant store and history log."""
    async with session_factory() as session:
        await session.execute(delete(MealClaim))
        await session.execute(delete(Participant))
        await session.commit()
    yield


@pytest.fixture
async def db_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()
        await session.close()


@pytest.fixture
async def test_app(session_factory):
    """Create test app with database override."""
    from backend.main import app
    from backend.database import get_db

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def participant_factory(session_factory):
    """Factory inserting committed participants, all meals unclaimed unless overridden."""

    async def _create_participant(
        participant_id: str = "T01-M1",
        team_id: str | None = None,
        team_name: str = "Byte Me",
        member_name: str = "Asha",
        member_number: int | None = None,
        **meal_state,
    ) -> Participant:
        team_id = team_id or participant_id.split("-")[0]
        if member_number is None:
            member_number = int(participant_id.rsplit("M", 1)[-1])

        state = {"breakfast_claimed": False, "lunch_claimed": False, "dinner_claimed": False}
        state.update(meal_state)
        participant = Participant(
            participant_id=participant_id,
            team_id=team_id,
            team_name=team_name,
            member_name=member_name,
            member_number=member_number,
            **state,
        )
        async with session_factory() as session:
            session.add(participant)
            await session.commit()
        return participant

    return _create_participant
