"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for API tests.

The app runs against a throwaway SQLite database (aiosqlite) and talks to
stubbed AI gateway and storage endpoints through ``httpx.MockTransport``.
Access tokens are signed locally with the configured JWT secret.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Optional
from uuid import UUID, uuid4

import httpx
import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pitchscout.config import settings
from pitchscout.database import Base
from pitchscout.dependencies import get_db, get_gateway, get_storage, get_usage_limiter
from pitchscout.gateway import AIGatewayClient
from pitchscout.main import app
from pitchscout.models import Club
from pitchscout.rate_limit import DailyUsageLimiter
from pitchscout.seed_data import CLUB_PROFILES
from pitchscout.sse import encode_delta
from pitchscout.storage import VideoStorage

TEST_MODEL = "test/model"


# =============================================================================
# STUBBED UPSTREAMS
# =============================================================================

class GatewayStub:
    """Records chat-completion requests and answers with queued responses."""

    def __init__(self):
        self.requests: list[dict] = []
        self._responses: list[httpx.Response] = []

    def reply_with_content(self, content: str) -> None:
        self._responses.append(httpx.Response(
            200,
            json={"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]},
        ))

    def reply_with_json(self, data: dict, fenced: bool = True) -> None:
        body = json.dumps(data, indent=2)
        self.reply_with_content(f"```json\n{body}\n```" if fenced else body)

    def reply_with_status(self, status_code: int, body: str = "upstream error") -> None:
        self._responses.append(httpx.Response(status_code, text=body))

    def reply_with_stream(self, fragments: list[str]) -> bytes:
        body = b"".join(encode_delta(f) for f in fragments) + b"data: [DONE]\n\n"
        self._responses.append(httpx.Response(
            200, headers={"content-type": "text/event-stream"}, content=body,
        ))
        return body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if not self._responses:
            return httpx.Response(500, text="no stubbed response")
        return self._responses.pop(0)


class StorageStub:
    """Accepts every object upload and remembers it."""

    def __init__(self):
        self.uploads: list[httpx.Request] = []
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.uploads.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "storage down"})
        return httpx.Response(200, json={"Key": request.url.path})


# =============================================================================
# DATABASE
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pitchscout.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def count_rows(session_factory) -> Callable:
    """Count rows of a model in a new session, so earlier reads are never cached."""

    async def _count(model, *criteria) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model).where(*criteria))

    return _count


@pytest_asyncio.fixture(scope="function")
async def clubs(db_session: AsyncSession) -> list[Club]:
    """The five reference clubs."""
    rows = [Club(**profile) for profile in CLUB_PROFILES]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


# =============================================================================
# AUTH
# =============================================================================

def sign_token(
    user_id: UUID,
    *,
    expires_in: int = 3600,
    secret: Optional[str] = None,
    audience: str = "authenticated",
) -> str:
    payload = {
        "sub": str(user_id),
        "aud": audience,
        "role": "authenticated",
        "email": f"{str(user_id)[:8]}@example.com",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Sign access tokens with custom subject, expiry, secret or audience."""
    return sign_token


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers(user_id: UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {sign_token(user_id)}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Headers for a second, unrelated user."""
    return {"Authorization": f"Bearer {sign_token(uuid4())}"}


# =============================================================================
# APPLICATION CLIENT
# =============================================================================

@pytest.fixture
def ai_model() -> str:
    """Model identifier the stubbed gateway client sends."""
    return TEST_MODEL


@pytest.fixture
def gateway_stub() -> GatewayStub:
    return GatewayStub()


@pytest.fixture
def storage_stub() -> StorageStub:
    return StorageStub()


@pytest.fixture
def usage_limiter() -> DailyUsageLimiter:
    return DailyUsageLimiter()


@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory,
    gateway_stub: GatewayStub,
    storage_stub: StorageStub,
    usage_limiter: DailyUsageLimiter,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client wired to the test database and stubs."""
    gateway_http = httpx.AsyncClient(transport=httpx.MockTransport(gateway_stub.handler))
    storage_http = httpx.AsyncClient(transport=httpx.MockTransport(storage_stub.handler))
    gateway = AIGatewayClient(
        api_key="test-key",
        url="https://gateway.test/v1/chat/completions",
        model=TEST_MODEL,
        client=gateway_http,
    )
    storage = VideoStorage(
        base_url="https://storage.test",
        service_key="service-key",
        bucket="videos",
        client=storage_http,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_usage_limiter] = lambda: usage_limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await gateway_http.aclose()
    await storage_http.aclose()


# =============================================================================
# SAMPLE AI OUTPUT
# =============================================================================

@pytest.fixture
def sample_analysis() -> dict:
    return {
        "overall_score": 78,
        "technical_skills": {"passing": 75, "ball_control": 80, "shooting": 72, "dribbling": 81},
        "physical_metrics": {"speed": 84, "stamina": 76, "agility": 79},
        "tactical_awareness": {"positioning": 73, "decision_making": 70, "vision": 76},
        "events_detected": {"passes": 32, "shots": 4, "tackles": 1, "interceptions": 3, "sprints": 12},
        "summary": "Quick, direct forward who stretches the back line.",
        "improvement_tips": ["Hold the ball up under pressure", "Work on the weaker foot", "Time runs later"],
    }


@pytest.fixture
def sample_report() -> dict:
    return {
        "report_id": "SR-2026-0001",
        "report_date": "2026-10-19",
        "player_summary": {"name": "Sam Carter", "position": "ST", "age": 17},
        "scout_classification": "B+",
        "recommendation": {"action": "Monitor", "reasoning": "Promising movement, raw finishing."},
        "potential_rating": 82,
    }
