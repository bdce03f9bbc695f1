"""
Pytest configuration and shared fixtures for service and API tests.

Every test gets a fresh in-memory SQLite database. API tests share its
single connection with the fixtures, so fixtures commit before the client
is used and API tests assert through the API.
"""
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scenebook.core.config import settings
from scenebook.db.base import create_engine_for_url, get_db
from scenebook.main import app
from scenebook.models import Base, User
from scenebook.services.character_service import CharacterService
from scenebook.services.scene_service import SceneService

from .utils import make_movie, scene_data


# Database fixtures
@pytest.fixture
async def engine():
    """In-memory SQLite engine with every table created."""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_user(db_session):
    """The implicit single user the API acts as."""
    user = User(name="Default User", email=settings.DEFAULT_USER_EMAIL)
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def other_user(db_session):
    user = User(name="Someone Else", email="someone.else@email.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def test_movie(db_session, test_user):
    """The user's default movie."""
    movie = make_movie(test_user, "The Last Page", default=True)
    db_session.add(movie)
    await db_session.commit()
    return movie


@pytest.fixture
async def test_characters(db_session, test_movie):
    """Raghav (Main), Maya (Main) and Child (Secondary)."""
    service = CharacterService(db_session)
    characters = [
        await service.create_character(test_movie.id, {
            "name": "Raghav", "gender": "M", "type": "M", "lower_age": 55, "upper_age": 65,
            "description": "An aging librarian", "exp_screen_time": 15, "notes": "Soft-spoken",
        }),
        await service.create_character(test_movie.id, {
            "name": "Maya", "gender": "F", "type": "M", "lower_age": 55, "upper_age": 65,
            "description": "A schoolteacher", "exp_screen_time": 10, "notes": "Warm smile",
        }),
        await service.create_character(test_movie.id, {
            "name": "Child", "gender": "M", "type": "S", "lower_age": 10, "upper_age": 12,
            "description": "A curious child", "exp_screen_time": 2, "notes": "Carries a satchel",
        }),
    ]
    await db_session.commit()
    return characters


@pytest.fixture
async def test_scenes(db_session, test_movie):
    """Four dialogue scenes numbered 1..4, described "Scene 1".."Scene 4"."""
    service = SceneService(db_session)
    scenes = [await service.create_scene(test_movie.id, scene_data(n)) for n in range(1, 5)]
    await db_session.commit()
    return scenes


# API fixtures
@pytest.fixture
async def client(session_factory, test_user):
    """HTTP client against the app with get_db bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
