import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import create_app
from app.profiles.models import Profile
from app.rate_limit import limiter
from shared.auth.config import AuthSettings
from shared.constants import Role
from shared.database.postgres import Base


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

MakeProfile = Callable[[str], Awaitable[uuid.UUID]]


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def make_profile(db_session: AsyncSession) -> MakeProfile:
    """Insert and commit a profile, returning its id."""

    async def _make(username: str) -> uuid.UUID:
        profile = Profile(id=uuid.uuid4(), username=username, display_name=username.title())
        db_session.add(profile)
        await db_session.commit()
        return profile.id

    return _make


@pytest_asyncio.fixture
async def read_counts(db_session: AsyncSession) -> Callable[[uuid.UUID], Awaitable[tuple[int, int]]]:
    """(followers_count, following_count) as currently stored."""

    async def _read(user_id: uuid.UUID) -> tuple[int, int]:
        profile = await db_session.get(Profile, user_id)
        await db_session.refresh(profile)
        return profile.followers_count, profile.following_count

    return _read


def make_token(user_id: uuid.UUID, roles: list[Role] | None = None) -> str:
    settings = AuthSettings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "roles": [r.value for r in (roles or [Role.USER])],
        "iss": settings.issuer,
        "aud": settings.audience,
        "iat": now,
        "exp": now + timedelta(minutes=15),
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    def _headers(user_id: uuid.UUID, roles: list[Role] | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, roles)}"}

    return _headers


@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _get_db
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
