"""Failure taxonomy for record reconciliation.

Gateway problems are exceptions because they are raised and caught inside the
gateway's retry loop. Everything the orchestrator deals with afterwards is a
plain value: it gets logged, collected on the outcome, and processing moves on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import EntityKind


class GatewayError(RuntimeError):
    """Base class for failures talking to the remote catalog."""


class TransportError(GatewayError):
    """Network failure or non-success HTTP status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApplicationError(GatewayError):
    """The remote catalog answered with structured ``errors``."""

    def __init__(self, message: str, *, errors: tuple[dict[str, object], ...] = ()) -> None:
        super().__init__(message)
        self.errors = errors


class AuthError(GatewayError):
    """The login exchange failed after exhausting retries."""


class RecordValidationError(ValueError):
    """Raised when raw batch input cannot be read as shipment records."""


class ParseWarningReason(StrEnum):
    ORPHAN_CONTINUATION = "orphan_continuation"
    MALFORMED_ANCHOR = "malformed_anchor"


@dataclass(frozen=True, slots=True)
class ParseWarning:
    token: str
    reason: ParseWarningReason

    def __str__(self) -> str:
        if self.reason is ParseWarningReason.ORPHAN_CONTINUATION:
            return f'Token "{self.token}" encountered without a preceding PO; skipping'
        return f'Token "{self.token}" has an empty PO or style number; skipping'


@dataclass(frozen=True, slots=True)
class ResolutionFailure:
    """An entity that could be neither found nor created."""

    kind: EntityKind
    label: str
    stage: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind} {self.label!r} failed during {self.stage}: {self.message}"


class EmptyInputReason(StrEnum):
    MISSING_FIELD = "missing_field"
    NO_PURCHASE_ORDERS = "no_purchase_orders"
    MISSING_IDENTIFIERS = "missing_identifiers"
    NOTHING_RESOLVED = "nothing_resolved"


@dataclass(frozen=True, slots=True)
class EmptyInputFailure:
    """A record that produced nothing worth sending to the catalog."""

    reason: EmptyInputReason
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.reason}: {self.detail}" if self.detail else str(self.reason)
