"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .gateway import ActionIds, Credentials, GatewayConfig, get_gateway_config
from .http_resilience import OperationRetry, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .sync import AmbiguousMatchPolicy, ReconcileConfig, get_reconcile_config

__all__ = [
    "ActionIds",
    "AmbiguousMatchPolicy",
    "ConfigurationError",
    "Credentials",
    "GatewayConfig",
    "MissingConfigurationError",
    "OperationRetry",
    "RateLimit",
    "ReconcileConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "env_float",
    "env_int",
    "get_gateway_config",
    "get_reconcile_config",
    "optional_env_var",
    "require_env_vars",
]
