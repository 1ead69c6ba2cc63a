"""Reconciliation defaults."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .env import env_int, optional_env_var
from .errors import ConfigurationError

DEFAULT_MAX_CONCURRENT_POS = 1


class AmbiguousMatchPolicy(StrEnum):
    """What to do when an existence check returns more than one record."""

    FIRST = "first"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    max_concurrent_pos: int = DEFAULT_MAX_CONCURRENT_POS
    ambiguous_match: AmbiguousMatchPolicy = AmbiguousMatchPolicy.FIRST

    def __post_init__(self) -> None:
        if self.max_concurrent_pos < 1:
            raise ValueError("max_concurrent_pos must be at least 1")


def get_reconcile_config() -> ReconcileConfig:
    raw_policy = optional_env_var("POSYNC_AMBIGUOUS_MATCH", AmbiguousMatchPolicy.FIRST.value)
    try:
        policy = AmbiguousMatchPolicy(raw_policy.lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in AmbiguousMatchPolicy)
        raise ConfigurationError(
            f"POSYNC_AMBIGUOUS_MATCH must be one of {allowed}, got {raw_policy!r}"
        ) from exc

    return ReconcileConfig(
        max_concurrent_pos=env_int(
            "POSYNC_MAX_CONCURRENT_POS", DEFAULT_MAX_CONCURRENT_POS, minimum=1
        ),
        ambiguous_match=policy,
    )
