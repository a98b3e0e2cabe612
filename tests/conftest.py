"""Shared test fixtures and configuration for CFO Helper backend tests."""
import os

# Settings are read at import time, so the environment must be in place first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("GEMINI_API_KEY", "AIza-test-key")
os.environ.setdefault("CLERK_PUBLISHABLE_KEY", "pk_test_cfo_helper")

from typing import AsyncGenerator, Dict, List, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cfo_helper.database import Base
from cfo_helper import models  # noqa: F401
from cfo_helper.advisor.rate_gate import RateGate
from cfo_helper.advisor.schemas import GenerationConfig
from cfo_helper.advisor.session import AdvisorSession
from cfo_helper.identity.schemas import Identity


# =============================================================================
# Fakes
# =============================================================================

class FakeModelClient:
    """ModelClient that answers from a dict and raises for configured models."""

    def __init__(self):
        self.replies: Dict[str, str] = {}
        self.failures: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, str]] = []

    async def generate(self, model: str, prompt: str, config: GenerationConfig) -> str:
        self.calls.append((model, prompt))
        if model in self.failures:
            raise self.failures[model]
        return self.replies.get(model, f"reply from {model}")

    @property
    def models_called(self) -> List[str]:
        return [model for model, _ in self.calls]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_client():
    return FakeModelClient()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def advisor(fake_client):
    """Advisor with two models and no minimum interval between requests."""
    return AdvisorSession(
        client=fake_client,
        models=["model-a", "model-b"],
        rate_gate=RateGate(min_interval=0, max_per_minute=100),
    )


@pytest.fixture
def identity():
    return Identity(
        user_id="user_test_123",
        email="founder@example.com",
        full_name="Test Founder",
        metadata={
            "onboardingCompleted": True,
            "organizationData": {
                "organizationType": "startup",
                "companyName": "Acme",
                "teamSize": 8,
                "industry": "SaaS",
            },
        },
    )


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """In-memory sqlite session with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
