"""Public interface for the catalog adapter."""

from __future__ import annotations

from .client import CatalogClient
from .schema import (
    BookingDetail,
    PurchaseOrderNode,
    ShipmentDetail,
    StyleNumberNode,
)

__all__ = [
    "BookingDetail",
    "CatalogClient",
    "PurchaseOrderNode",
    "ShipmentDetail",
    "StyleNumberNode",
]
