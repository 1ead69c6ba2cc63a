"""Port and result shapes for the remote graph gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class Success[T]:
    data: T
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ApplicationFailure:
    """Terminal failure after the catalog kept answering with ``errors``."""

    message: str
    errors: tuple[dict[str, object], ...] = ()
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """Terminal failure carrying the last exception seen (network, status or auth)."""

    error: Exception
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


type Failure = ApplicationFailure | TransportFailure
type CatalogResult[T] = Success[T] | ApplicationFailure | TransportFailure
type GatewayResult = CatalogResult[dict[str, Any]]


@runtime_checkable
class Gateway(Protocol):
    """Execute one named query or mutation against the remote catalog."""

    async def execute(
        self,
        operation: str,
        variables: Mapping[str, object] | None = None,
    ) -> GatewayResult: ...


__all__ = [
    "ApplicationFailure",
    "CatalogResult",
    "Failure",
    "Gateway",
    "GatewayResult",
    "Success",
    "TransportFailure",
]
