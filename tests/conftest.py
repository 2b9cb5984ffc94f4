"""Pytest configuration and fixtures."""

import json
import os
from types import SimpleNamespace
from typing import Any, Generator

# The application refuses to start without a credential
os.environ.setdefault("GROQ_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient

from app.analyzer.config import get_settings
from app.analyzer.main import app
from app.analyzer.services.ai import AIService, get_ai_service
from app.analyzer.services.rate_limit import SlidingWindowRateLimiter, get_rate_limiter
from app.analyzer.services.stats import RequestCounter, get_request_counter


class FakeCompletions:
    """Stand-in for ``client.chat.completions`` recording every call."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    @property
    def last_prompt(self) -> str:
        return self.calls[-1]["messages"][0]["content"]


class FakeGroqClient:
    """Minimal AsyncOpenAI look-alike."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.chat = SimpleNamespace(completions=FakeCompletions(reply, error))

    @property
    def completions(self) -> FakeCompletions:
        return self.chat.completions


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def complete_reply_data() -> dict[str, Any]:
    """A model answer with every field filled in."""
    return {
        "title": "Deep Learning for Protein Folding",
        "authors": ["A. Martin", "B. Dupont"],
        "abstract": "We study protein folding with neural networks.",
        "doi": "10.1000/xyz123",
        "year": "2021",
        "keywords": ["protein", "folding", "deep learning"],
        "theme": "Bioinformatique",
        "themeScore": 88,
        "objectives": ["Predict structures"],
        "summary": {
            "problem": "Structure prediction is slow",
            "method": "Transformer network",
            "data": "PDB entries",
            "results": "State of the art accuracy",
        },
        "conclusions": ["Neural networks work"],
        "gaps": ["Small dataset"],
        "futurework": ["Larger models"],
        "researchDomain": "Biologie computationnelle",
    }


@pytest.fixture
def complete_reply(complete_reply_data: dict[str, Any]) -> str:
    """Model reply text wrapping the JSON answer in some prose."""
    return "Voici l'analyse demandée :\n" + json.dumps(complete_reply_data) + "\nBonne lecture."


@pytest.fixture
def sample_text() -> str:
    """Document text comfortably above the minimum length."""
    return "Deep learning for protein folding. " * 10


@pytest.fixture
def make_client() -> type[FakeGroqClient]:
    """Factory for fake upstream clients with a chosen reply or error."""
    return FakeGroqClient


@pytest.fixture
def fake_client(complete_reply: str) -> FakeGroqClient:
    return FakeGroqClient(reply=complete_reply)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(fake_clock: FakeClock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(max_requests=10, window_seconds=60, clock=fake_clock)


@pytest.fixture
def request_counter() -> RequestCounter:
    return RequestCounter()


@pytest.fixture
def ai_service(fake_client: FakeGroqClient) -> AIService:
    return AIService(api_key="test-key", client=fake_client)


@pytest.fixture
def client(
    ai_service: AIService,
    rate_limiter: SlidingWindowRateLimiter,
    request_counter: RequestCounter,
) -> Generator[TestClient, None, None]:
    """Create a test client with fresh state and a fake upstream model."""
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_request_counter] = lambda: request_counter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so environment tweaks do not leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
