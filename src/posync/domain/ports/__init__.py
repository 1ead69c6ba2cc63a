"""Domain ports implemented by adapters."""

from __future__ import annotations

from .catalog import Catalog, CatalogMatch
from .gateway import (
    ApplicationFailure,
    CatalogResult,
    Failure,
    Gateway,
    GatewayResult,
    Success,
    TransportFailure,
)

__all__ = [
    "ApplicationFailure",
    "Catalog",
    "CatalogMatch",
    "CatalogResult",
    "Failure",
    "Gateway",
    "GatewayResult",
    "Success",
    "TransportFailure",
]
