import base64
import json
from typing import Any
from urllib.parse import quote, unquote

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from stampbook.db.database import get_session
from stampbook.main import app
from stampbook.models.card import STAMP_CAPACITY, Card, ThemeColor
from stampbook.models.db import Base

_URI_COMPONENT_SAFE = "-_.!~*'()"


def _escaped_json(payload: Any) -> bytes:
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return quote(text, safe=_URI_COMPONENT_SAFE).encode("ascii")


def legacy_token(payload: Any) -> str:
    """Token as the browser app built it: btoa(encodeURIComponent(JSON))."""
    return base64.b64encode(_escaped_json(payload)).decode("ascii")


def versioned_token(payload: Any) -> str:
    """Current-format token around an arbitrary payload."""
    body = base64.urlsafe_b64encode(_escaped_json(payload)).decode("ascii").rstrip("=")
    return "c2." + body


def token_payload(token: str) -> Any:
    """Unwrap a current-format token without going through the codec."""
    body = token.removeprefix("c2.")
    raw = base64.urlsafe_b64decode(body + "=" * (-len(body) % 4))
    return json.loads(unquote(raw.decode("ascii")))


def stamps_at(*indices: int) -> tuple[bool, ...]:
    return tuple(i in indices for i in range(STAMP_CAPACITY))


@pytest.fixture
def make_legacy_token():
    return legacy_token


@pytest.fixture
def make_versioned_token():
    return versioned_token


@pytest.fixture
def read_payload():
    return token_payload


@pytest.fixture
def make_stamps():
    return stamps_at


@pytest.fixture
def ben() -> Card:
    return Card(
        id=1704412800000,
        name="Ben",
        stamps=stamps_at(0, 5, 29),
        created_at="2024/1/5",
        theme=ThemeColor.INDIGO,
    )


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(async_engine):
    """Provide an async test client with overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
