"""Shared fixtures: a throwaway SQLite database per test and an HTTP client bound to it."""
from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from music_school.core.config import Settings
from music_school.core.database import create_database
from music_school.main import create_app
from music_school.models import ConfiguredLesson, Shift, Teacher


@pytest_asyncio.fixture
async def database(tmp_path):
    db = create_database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.connect()
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def client(database):
    # ASGITransport does not run the lifespan, so the app gets the test database directly
    app = create_app(Settings(database_url=database.url, auto_create_tables=False))
    app.state.database = database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def teacher(session):
    teacher = Teacher(name="Ana Souza", email="ana@school.test", specialty="Piano")
    session.add(teacher)
    await session.commit()
    return teacher


@pytest_asyncio.fixture
async def lesson(session, teacher):
    lesson = ConfiguredLesson(
        teacher_id=teacher.id,
        instrument="Piano",
        shift=Shift.MORNING,
        start_date=date(2024, 1, 1),
    )
    session.add(lesson)
    await session.commit()
    return lesson


@pytest.fixture
def next_monday():
    """First Monday strictly after today."""
    today = date.today()
    return today + timedelta(days=7 - today.weekday())
