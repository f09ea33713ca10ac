"""
Pytest fixtures for test database, client, and authentication.

The schema is created and dropped around every test. The app gets its own
session per request, exactly as in production; fixtures seed data through a
separate session.

Set TEST_DATABASE_URL to a postgresql+asyncpg URL to run against PostgreSQL
(required for the true concurrency test); the default is a SQLite file.
"""

import os

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./cinebook_test.db")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["REDIS_ENABLED"] = "false"
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from cinebook.main import app
from cinebook.db.base import Base
from cinebook.db.session import get_db
from cinebook.core.security import create_access_token, hash_password
from cinebook.models import Movie, Showtime, Screen, Theater, User, UserRole

IS_SQLITE = TEST_DATABASE_URL.startswith("sqlite")

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

requires_postgres = pytest.mark.skipif(
    IS_SQLITE, reason="needs row-level locking; set TEST_DATABASE_URL to PostgreSQL"
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a fresh session on the test database."""

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(session: AsyncSession, email: str, role: UserRole = UserRole.USER) -> User:
    user = User(
        email=email,
        first_name="Test",
        last_name="User",
        hashed_password=hash_password("testpassword123"),
        role=role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "test@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "other@example.com")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin@example.com", role=UserRole.ADMIN)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Authorization headers with Bearer token."""
    return _headers(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return _headers(admin_user)


@pytest_asyncio.fixture
async def test_movie(db_session: AsyncSession, admin_user: User) -> Movie:
    movie = Movie(
        name="The Long Night",
        description="A test movie",
        genres=["Drama", "Thriller"],
        languages=["English", "Hindi"],
        duration=140,
        cast=["A. Actor", "B. Actress"],
        director="C. Director",
        release_date=date(2026, 1, 15),
        rating=8.1,
        created_by=admin_user.id,
    )
    db_session.add(movie)
    await db_session.commit()
    await db_session.refresh(movie)
    return movie


@pytest_asyncio.fixture
async def test_theater(db_session: AsyncSession, admin_user: User) -> Theater:
    theater = Theater(
        name="Grand Cinema",
        address="1 Main Street",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
        amenities=["Parking", "IMAX"],
        created_by=admin_user.id,
        screens=[
            Screen(screen_number=1, total_seats=50),
            Screen(screen_number=2, total_seats=100),
        ],
    )
    db_session.add(theater)
    await db_session.commit()
    await db_session.refresh(theater)
    return theater


async def make_showtime(
    session: AsyncSession,
    movie: Movie,
    theater: Theater,
    admin: User,
    starts_in: timedelta = timedelta(hours=3),
    total_seats: int = 50,
    price: str = "200.00",
    screen_number: int = 1,
) -> Showtime:
    show_time = (datetime.now(timezone.utc) + starts_in).replace(microsecond=0)
    showtime = Showtime(
        movie_id=movie.id,
        theater_id=theater.id,
        screen_number=screen_number,
        show_date=show_time.date(),
        show_time=show_time,
        price=Decimal(price),
        total_seats=total_seats,
        available_seats=total_seats,
        created_by=admin.id,
    )
    session.add(showtime)
    await session.commit()
    await session.refresh(showtime)
    return showtime


@pytest_asyncio.fixture
async def test_showtime(db_session, test_movie, test_theater, admin_user) -> Showtime:
    """50 seats at 200.00, starting three hours from now."""
    return await make_showtime(db_session, test_movie, test_theater, admin_user)


@pytest.fixture
def showtime_id(test_showtime: Showtime) -> int:
    return test_showtime.id
