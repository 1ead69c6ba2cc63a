"""Catalog operations the reconciliation needs, independent of the wire format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from posync.domain.model import EntityId, Target
    from posync.domain.payloads import PurchaseOrderUpdate, StyleNumberUpdate

    from .gateway import CatalogResult


@dataclass(frozen=True, slots=True)
class CatalogMatch:
    """One record returned by an existence check."""

    id: EntityId
    label: str


@runtime_checkable
class Catalog(Protocol):
    async def lookup_purchase_order(
        self,
        order_number: str,
        *,
        shipper_id: int,
        customer_id: int,
    ) -> CatalogResult[list[CatalogMatch]]: ...

    async def lookup_style_number(
        self,
        style_number: str,
        *,
        order_number: str,
        shipment_id: EntityId,
    ) -> CatalogResult[list[CatalogMatch]]: ...

    async def create_purchase_order(
        self,
        order_number: str,
        *,
        target: Target,
    ) -> CatalogResult[EntityId]: ...

    async def create_style_number(
        self,
        style_number: str,
        *,
        purchase_order_id: EntityId,
        target: Target,
    ) -> CatalogResult[EntityId]: ...

    async def update_purchase_orders(
        self, payload: PurchaseOrderUpdate
    ) -> CatalogResult[object]: ...

    async def update_style_numbers(self, payload: StyleNumberUpdate) -> CatalogResult[object]: ...


__all__ = ["Catalog", "CatalogMatch"]
