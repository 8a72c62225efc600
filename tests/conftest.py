"""Global pytest configuration and fixtures."""

from collections.abc import Generator
from typing import Any

import pytest
import respx

from spotify_agent.core.state import InMemoryStateStore, SignedStateManager
from tests.fixtures.env_helpers import (
    empty_env,
    mock_env_vars,
    service_api_key,
    settings,
)
from tests.fixtures.http_helpers import common_http_errors, http_mock_helpers
from tests.fixtures.mock_clients import (
    echo_agent,
    fake_registry,
    mock_refresher,
    open_agent,
)


class FakeClock:
    """Controllable replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def respx_mock() -> Generator[Any, None, None]:
    """Provide respx mock for testing HTTP requests."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state_store(clock: FakeClock) -> InMemoryStateStore:
    return InMemoryStateStore(clock)


@pytest.fixture
def state_manager(
    state_store: InMemoryStateStore, clock: FakeClock
) -> SignedStateManager:
    """State manager with a fixed secret and a controllable clock."""
    return SignedStateManager("test-state-secret", store=state_store, clock=clock)
