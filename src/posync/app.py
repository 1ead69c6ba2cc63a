"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from posync.adapters.catalog import CatalogClient
from posync.adapters.gateway import GraphGateway
from posync.adapters.ingest import RejectedRecord, parse_batch
from posync.config import get_gateway_config, get_reconcile_config
from posync.domain.reconcile import BatchResult, RecordReconciler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from posync.adapters.catalog import (
        BookingDetail,
        PurchaseOrderNode,
        ShipmentDetail,
        StyleNumberNode,
    )
    from posync.config import GatewayConfig, ReconcileConfig
    from posync.domain.model import EntityId, Record
    from posync.domain.ports.gateway import CatalogResult

GatewayFactory = Callable[["GatewayConfig"], GraphGateway]

log = getLogger(__name__)


@dataclass(slots=True)
class ReconcileReport:
    """Batch outcome plus the input rows that never became records."""

    result: BatchResult
    rejected: list[RejectedRecord] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        return {**self.result.summary(), "rejected": len(self.rejected)}


def _default_gateway_factory(config: GatewayConfig) -> GraphGateway:
    return GraphGateway(config=config)


def reconcile_payloads(
    raw: object,
    *,
    gateway_config: GatewayConfig | None = None,
    reconcile_config: ReconcileConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> ReconcileReport:
    """Validate raw batch input and reconcile every record it contains."""

    batch = parse_batch(raw)
    log.info(
        f"Starting reconciliation: records={len(batch.records)}, rejected={len(batch.rejected)}"
    )
    result = asyncio.run(
        reconcile_records(
            batch.records,
            gateway_config=gateway_config,
            reconcile_config=reconcile_config,
            gateway_factory=gateway_factory,
        )
    )
    report = ReconcileReport(result=result, rejected=batch.rejected)
    log.info(f"Finished reconciliation: {report.summary}")
    return report


async def reconcile_records(
    records: Sequence[Record],
    *,
    gateway_config: GatewayConfig | None = None,
    reconcile_config: ReconcileConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> BatchResult:
    effective_gateway_config = gateway_config or get_gateway_config()
    effective_config = reconcile_config or get_reconcile_config()
    factory = gateway_factory or _default_gateway_factory

    async with factory(effective_gateway_config) as gateway:
        catalog = CatalogClient(gateway=gateway, actions=effective_gateway_config.actions)
        reconciler = RecordReconciler(catalog=catalog, config=effective_config)
        return await reconciler.process_batch(records)


def fetch_shipment(
    shipment_id: EntityId,
    *,
    gateway_config: GatewayConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> CatalogResult[ShipmentDetail | None]:
    return _run_catalog(
        lambda catalog: catalog.shipment_detail(shipment_id),
        gateway_config=gateway_config,
        gateway_factory=gateway_factory,
    )


def fetch_booking(
    booking_id: EntityId,
    *,
    gateway_config: GatewayConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> CatalogResult[BookingDetail | None]:
    return _run_catalog(
        lambda catalog: catalog.booking_detail(booking_id),
        gateway_config=gateway_config,
        gateway_factory=gateway_factory,
    )


def search_purchase_orders(
    text: str,
    *,
    purchaser_id: EntityId,
    exact: bool = False,
    gateway_config: GatewayConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> CatalogResult[list[PurchaseOrderNode]]:
    def call(catalog: CatalogClient) -> Awaitable[CatalogResult[list[PurchaseOrderNode]]]:
        if exact:
            return catalog.find_purchase_orders(text, purchaser_id=purchaser_id)
        return catalog.search_purchase_orders(text, purchaser_id=purchaser_id)

    return _run_catalog(call, gateway_config=gateway_config, gateway_factory=gateway_factory)


def search_style_numbers(
    text: str,
    *,
    company_id: EntityId,
    gateway_config: GatewayConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> CatalogResult[list[StyleNumberNode]]:
    return _run_catalog(
        lambda catalog: catalog.search_style_numbers(text, company_id=company_id),
        gateway_config=gateway_config,
        gateway_factory=gateway_factory,
    )


def purchase_order_style_numbers(
    purchase_order_id: EntityId,
    *,
    gateway_config: GatewayConfig | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> CatalogResult[list[StyleNumberNode]]:
    return _run_catalog(
        lambda catalog: catalog.style_numbers_for_purchase_order(purchase_order_id),
        gateway_config=gateway_config,
        gateway_factory=gateway_factory,
    )


def _run_catalog[T](
    call: Callable[[CatalogClient], Awaitable[CatalogResult[T]]],
    *,
    gateway_config: GatewayConfig | None,
    gateway_factory: GatewayFactory | None,
) -> CatalogResult[T]:
    effective_config = gateway_config or get_gateway_config()
    factory = gateway_factory or _default_gateway_factory

    async def run() -> CatalogResult[T]:
        async with factory(effective_config) as gateway:
            return await call(CatalogClient(gateway=gateway, actions=effective_config.actions))

    return asyncio.run(run())
