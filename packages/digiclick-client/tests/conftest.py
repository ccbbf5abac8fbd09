"""Test fixtures and configuration."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from digiclick_client.client import ResilientFetchClient
from digiclick_client.config import Settings, get_settings
from digiclick_client.services.rate_limit import FixedWindowRateLimiter
from digiclick_client.services.response_cache import ResponseCache

API_URL = "http://api.test"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Drop the cached Settings singleton around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_url=API_URL,
        request_retries=3,
        retry_delay_seconds=1.0,
        request_timeout_seconds=5.0,
        cache_duration_seconds=300,
        rate_limit_max_requests=100,
        rate_limit_window_seconds=60.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest_asyncio.fixture
async def client(
    settings: Settings, clock: FakeClock, sleeper: SleepRecorder
) -> AsyncGenerator[ResilientFetchClient, None]:
    """Client with a fake clock for limiter/cache and a recording backoff sleep."""
    fetch_client = ResilientFetchClient(
        settings,
        rate_limiter=FixedWindowRateLimiter(
            settings.rate_limit_max_requests,
            settings.rate_limit_window_seconds,
            clock=clock,
        ),
        cache=ResponseCache(settings.cache_duration_seconds, clock=clock),
        sleep=sleeper,
    )
    yield fetch_client
    await fetch_client.aclose()
