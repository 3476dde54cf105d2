import os

# Set testing mode before the application reads its settings
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from photofeed.config import settings
from photofeed.db.session import build_engine, get_db
from photofeed.main import app
from photofeed.models import Base, User, Post, Comment
from photofeed.services.auth_service import AuthService

# Test database URL - in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)

@pytest.fixture
async def test_engine():
    """Fresh in-memory database for every test"""
    engine = build_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and checking results directly"""
    async with session_factory() as session:
        yield session

@pytest.fixture(autouse=True)
def override_get_db(session_factory):
    """Point the application at the test database"""
    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def make_user(test_db: AsyncSession):
    """Factory for users"""
    async def _make_user(username: str, **fields) -> User:
        user = User(
            id=fields.pop("id", f"id-{username}"),
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            **fields
        )
        test_db.add(user)
        await test_db.commit()
        return user

    return _make_user

@pytest.fixture
def make_post(test_db: AsyncSession):
    """Factory for posts"""
    async def _make_post(user: User, caption: str = "A sunny day", **fields) -> Post:
        post = Post(
            user_id=user.id,
            caption=caption,
            image_url=fields.pop("image_url", "data:image/png;base64,AAAA"),
            **fields
        )
        test_db.add(post)
        await test_db.commit()
        return post

    return _make_post

@pytest.fixture
def make_comment(test_db: AsyncSession):
    """Factory for comments"""
    async def _make_comment(user: User, post: Post, content: str = "Nice!") -> Comment:
        comment = Comment(user_id=user.id, post_id=post.id, content=content)
        test_db.add(comment)
        await test_db.commit()
        return comment

    return _make_comment

@pytest.fixture
async def anonymous_client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

@pytest.fixture
async def client_for(test_db: AsyncSession):
    """Factory for clients logged in as a given user through a real session row"""
    clients = []

    async def _client_for(user: User) -> AsyncClient:
        sid = await AuthService(test_db).create_session(user.id)
        client = AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}={sid}"},
        )
        clients.append(client)
        return client

    yield _client_for

    for client in clients:
        await client.aclose()

@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
