"""Remote catalog gateway configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    OperationRetry,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

DEFAULT_CREATE_PURCHASE_ORDER_ACTION = "2ac1f7de7e134ec4943ac985a2f7f2d3"
DEFAULT_UPDATE_PURCHASE_ORDER_ACTION = "62ca74f99d3543d98fcb14fec2fee600"
DEFAULT_CREATE_STYLE_NUMBER_ACTION = "6144dee3fbca4f77a0b8c2487e825e0b"
DEFAULT_UPDATE_STYLE_NUMBER_ACTION = "7eb7dcd49e34457585f64b455d363621"


@dataclass(frozen=True, slots=True)
class Credentials:
    auth_profile_uuid: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class ActionIds:
    """Opaque identifiers of the four write actions exposed by the catalog."""

    create_purchase_order: str = DEFAULT_CREATE_PURCHASE_ORDER_ACTION
    update_purchase_order: str = DEFAULT_UPDATE_PURCHASE_ORDER_ACTION
    create_style_number: str = DEFAULT_CREATE_STYLE_NUMBER_ACTION
    update_style_number: str = DEFAULT_UPDATE_STYLE_NUMBER_ACTION


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Everything the gateway needs, passed in at construction time."""

    endpoint: str
    credentials: Credentials
    actions: ActionIds = field(default_factory=ActionIds)
    retry: OperationRetry = field(default_factory=OperationRetry)
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(name="catalog")
    )


def get_gateway_config() -> GatewayConfig:
    values = require_env_vars(
        ("POSYNC_API_URL", "POSYNC_AUTH_PROFILE", "POSYNC_USERNAME", "POSYNC_PASSWORD")
    )

    actions = ActionIds(
        create_purchase_order=optional_env_var(
            "POSYNC_ACTION_CREATE_PO", DEFAULT_CREATE_PURCHASE_ORDER_ACTION
        ),
        update_purchase_order=optional_env_var(
            "POSYNC_ACTION_UPDATE_PO", DEFAULT_UPDATE_PURCHASE_ORDER_ACTION
        ),
        create_style_number=optional_env_var(
            "POSYNC_ACTION_CREATE_SN", DEFAULT_CREATE_STYLE_NUMBER_ACTION
        ),
        update_style_number=optional_env_var(
            "POSYNC_ACTION_UPDATE_SN", DEFAULT_UPDATE_STYLE_NUMBER_ACTION
        ),
    )

    retry = OperationRetry(
        max_attempts=env_int("POSYNC_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS, minimum=1),
        delay_seconds=env_float(
            "POSYNC_RETRY_DELAY_SECONDS", DEFAULT_RETRY_DELAY_SECONDS, minimum=0.0
        )
        or 0.0,
    )

    rate = _positive(
        "POSYNC_RATE_LIMIT_PER_SECOND", env_float("POSYNC_RATE_LIMIT_PER_SECOND", None)
    )
    timeout = _positive(
        "POSYNC_TIMEOUT_SECONDS", env_float("POSYNC_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
    )
    connect_retries = env_int("POSYNC_CONNECT_RETRIES", 0, minimum=0)
    resilience = ResilienceConfig(
        name="catalog",
        timeout_seconds=timeout or DEFAULT_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0 / rate) if rate is not None else None,
        transport_retry=RetryPolicy(total=connect_retries) if connect_retries else None,
        default_headers={"Content-Type": "application/json"},
    )

    return GatewayConfig(
        endpoint=values["POSYNC_API_URL"].strip(),
        credentials=Credentials(
            auth_profile_uuid=values["POSYNC_AUTH_PROFILE"].strip(),
            username=values["POSYNC_USERNAME"],
            password=values["POSYNC_PASSWORD"],
        ),
        actions=actions,
        retry=retry,
        resilience=resilience,
    )


def _positive(name: str, value: float | None) -> float | None:
    if value is not None and value <= 0:
        raise ConfigurationError(f"{name} must be greater than 0, got {value}")
    return value
