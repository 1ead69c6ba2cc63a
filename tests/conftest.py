from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from posync.config import Credentials, GatewayConfig, OperationRetry, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine


ENDPOINT = "https://catalog.test/api/runtime/app"

_POSYNC_ENV = (
    "POSYNC_API_URL",
    "POSYNC_AUTH_PROFILE",
    "POSYNC_USERNAME",
    "POSYNC_PASSWORD",
    "POSYNC_ACTION_CREATE_PO",
    "POSYNC_ACTION_UPDATE_PO",
    "POSYNC_ACTION_CREATE_SN",
    "POSYNC_ACTION_UPDATE_SN",
    "POSYNC_MAX_ATTEMPTS",
    "POSYNC_RETRY_DELAY_SECONDS",
    "POSYNC_TIMEOUT_SECONDS",
    "POSYNC_RATE_LIMIT_PER_SECOND",
    "POSYNC_CONNECT_RETRIES",
    "POSYNC_MAX_CONCURRENT_POS",
    "POSYNC_AMBIGUOUS_MATCH",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _POSYNC_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        endpoint=ENDPOINT,
        credentials=Credentials(
            auth_profile_uuid="profile-uuid",
            username="agents",
            password="secret",
        ),
        retry=OperationRetry(max_attempts=3, delay_seconds=2.0),
        resilience=ResilienceConfig(name="catalog-test"),
    )


@pytest.fixture
def recorded_sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps: list[float]) -> Callable[[float], Coroutine[None, None, None]]:
    async def sleep(delay: float) -> None:
        recorded_sleeps.append(delay)

    return sleep
