"""Drive records through parse -> resolve -> build -> update."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from posync.config.sync import ReconcileConfig

from .errors import EmptyInputFailure, EmptyInputReason, ParseWarning, ResolutionFailure
from .model import ProcessedPurchaseOrder, Record, Target, TargetKind
from .payloads import build_payloads
from .ports.gateway import Success
from .resolution import EntityResolver
from .tokens import parse_tokens, unique_in_order

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .payloads import UpdatePayloads
    from .ports.catalog import Catalog
    from .ports.gateway import CatalogResult

log = getLogger(__name__)


class RecordStatus(StrEnum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    FAILED = "failed"


class UpdateOperation(StrEnum):
    PURCHASE_ORDERS = "purchase orders"
    STYLE_NUMBERS = "style numbers"


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    target: Target
    operation: UpdateOperation
    ok: bool
    message: str | None = None


@dataclass(slots=True)
class RecordOutcome:
    """What happened to one record. Partial success is a normal outcome."""

    record: Record
    processed: list[ProcessedPurchaseOrder] = field(default_factory=list)
    parse_warnings: list[ParseWarning] = field(default_factory=list)
    resolution_failures: list[ResolutionFailure] = field(default_factory=list)
    updates: list[UpdateOutcome] = field(default_factory=list)
    skipped: EmptyInputFailure | None = None
    error: str | None = None

    @property
    def status(self) -> RecordStatus:
        if self.error is not None:
            return RecordStatus.FAILED
        if self.skipped is not None:
            return RecordStatus.SKIPPED
        if self.resolution_failures or not all(update.ok for update in self.updates):
            return RecordStatus.PARTIAL
        return RecordStatus.COMPLETED


@dataclass(slots=True)
class BatchResult:
    outcomes: list[RecordOutcome] = field(default_factory=list)

    def count(self, status: RecordStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    def summary(self) -> dict[str, int]:
        return {status.value: self.count(status) for status in RecordStatus}


@dataclass(frozen=True, slots=True)
class _Parent:
    """The validated identifiers every purchase order of a record resolves under."""

    target: Target
    shipper_id: int
    customer_id: int


@dataclass(slots=True)
class RecordReconciler:
    """Reconcile shipment records against the catalog, one record at a time.

    Purchase orders inside a record resolve in token order. Setting
    ``config.max_concurrent_pos`` above one lets independent purchase orders
    resolve concurrently; style numbers under one purchase order always resolve
    sequentially and the payload keeps token order either way.
    """

    catalog: Catalog
    config: ReconcileConfig = field(default_factory=ReconcileConfig)

    @property
    def resolver(self) -> EntityResolver:
        return EntityResolver(self.catalog, ambiguous_match=self.config.ambiguous_match)

    async def process_batch(self, records: Iterable[Record]) -> BatchResult:
        result = BatchResult()
        for record in records:
            try:
                outcome = await self.process(record)
            except Exception as exc:  # noqa: BLE001
                log.exception(f"Unexpected error processing shipment {record.shipment_id}")
                outcome = RecordOutcome(record=record, error=str(exc) or type(exc).__name__)
            result.outcomes.append(outcome)
        log.info(f"Processing complete: {result.summary()}")
        return result

    async def process(self, record: Record) -> RecordOutcome:
        log.info(f"Processing record: {record}")
        outcome = RecordOutcome(record=record)

        if not record.combined_field:
            return _skip(
                outcome,
                EmptyInputReason.MISSING_FIELD,
                "Input record does not have the 'purchase_orders_and_styles' field.",
            )

        parsed = parse_tokens(record.combined_field)
        outcome.parse_warnings.extend(parsed.warnings)
        if not parsed.purchase_orders:
            return _skip(
                outcome,
                EmptyInputReason.NO_PURCHASE_ORDERS,
                "No purchase orders found in the input.",
            )

        shipment_id, shipper_id, customer_id = (
            record.shipment_id,
            record.shipper_id,
            record.customer_id,
        )
        if shipment_id is None or shipper_id is None or customer_id is None:
            return _skip(
                outcome,
                EmptyInputReason.MISSING_IDENTIFIERS,
                "Record is missing required identifiers: "
                f"{', '.join(record.missing_identifiers())}",
            )

        shipment = Target(kind=TargetKind.SHIPMENT, id=shipment_id)
        outcome.processed = await self._resolve_all(
            parsed.purchase_orders,
            parent=_Parent(target=shipment, shipper_id=shipper_id, customer_id=customer_id),
            outcome=outcome,
        )
        if not outcome.processed:
            return _skip(
                outcome,
                EmptyInputReason.NOTHING_RESOLVED,
                f"No purchase orders could be resolved for shipment {shipment.id}; "
                "skipping updates.",
            )

        await self._push(shipment, outcome)
        if record.booking_id is not None:
            log.info(
                f"Booking record detected with booking_id {record.booking_id}. "
                "Preparing booking update payloads..."
            )
            await self._push(Target(kind=TargetKind.BOOKING, id=record.booking_id), outcome)

        return outcome

    async def _resolve_all(
        self,
        purchase_orders: dict[str, list[str]],
        *,
        parent: _Parent,
        outcome: RecordOutcome,
    ) -> list[ProcessedPurchaseOrder]:
        resolver = self.resolver
        if self.config.max_concurrent_pos <= 1:
            results = [
                await self._process_purchase_order(
                    resolver, order_number, style_numbers, parent, outcome
                )
                for order_number, style_numbers in purchase_orders.items()
            ]
        else:
            results = await self._resolve_concurrently(
                resolver, purchase_orders, parent=parent, outcome=outcome
            )
        return [processed for processed in results if processed is not None]

    async def _resolve_concurrently(
        self,
        resolver: EntityResolver,
        purchase_orders: dict[str, list[str]],
        *,
        parent: _Parent,
        outcome: RecordOutcome,
    ) -> list[ProcessedPurchaseOrder | None]:
        """Resolve purchase orders under a semaphore, keeping token order.

        A failing purchase order cancels and awaits its siblings before the
        error propagates.
        """

        semaphore = asyncio.Semaphore(self.config.max_concurrent_pos)

        async def bounded(
            order_number: str, style_numbers: list[str]
        ) -> ProcessedPurchaseOrder | None:
            async with semaphore:
                return await self._process_purchase_order(
                    resolver, order_number, style_numbers, parent, outcome
                )

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(bounded(number, styles))
                    for number, styles in purchase_orders.items()
                ]
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from errors
        return [task.result() for task in tasks]

    async def _process_purchase_order(
        self,
        resolver: EntityResolver,
        order_number: str,
        style_numbers: list[str],
        parent: _Parent,
        outcome: RecordOutcome,
    ) -> ProcessedPurchaseOrder | None:
        resolved = await resolver.resolve_purchase_order(
            order_number,
            shipper_id=parent.shipper_id,
            customer_id=parent.customer_id,
            target=parent.target,
        )
        if isinstance(resolved, ResolutionFailure):
            outcome.resolution_failures.append(resolved)
            return None

        processed = ProcessedPurchaseOrder.from_entity(resolved)
        for style_number in unique_in_order(style_numbers):
            style = await resolver.resolve_style_number(
                style_number, purchase_order=resolved, target=parent.target
            )
            if isinstance(style, ResolutionFailure):
                outcome.resolution_failures.append(style)
                continue
            processed.style_numbers.append(style)
        return processed

    async def _push(self, target: Target, outcome: RecordOutcome) -> None:
        payloads = build_payloads(target, outcome.processed)
        _log_payloads(target, payloads)

        po_result = await self.catalog.update_purchase_orders(payloads.po_payload)
        outcome.updates.append(_update_outcome(target, UpdateOperation.PURCHASE_ORDERS, po_result))
        sn_result = await self.catalog.update_style_numbers(payloads.sn_payload)
        outcome.updates.append(_update_outcome(target, UpdateOperation.STYLE_NUMBERS, sn_result))


def _update_outcome(
    target: Target,
    operation: UpdateOperation,
    result: CatalogResult[object],
) -> UpdateOutcome:
    if isinstance(result, Success):
        log.info(f"Update of {operation} successful for {target.kind} {target.id}")
        return UpdateOutcome(target=target, operation=operation, ok=True)
    message = result.message
    log.error(f"Update of {operation} failed for {target.kind} {target.id}: {message}")
    return UpdateOutcome(target=target, operation=operation, ok=False, message=message)


def _log_payloads(target: Target, payloads: UpdatePayloads) -> None:
    log.info(
        f"Final payload to update {target.kind} purchase orders: "
        f"{json.dumps(payloads.po_payload, indent=2)}"
    )
    log.info(
        f"Final payload to update {target.kind} style numbers: "
        f"{json.dumps(payloads.sn_payload, indent=2)}"
    )


def _skip(outcome: RecordOutcome, reason: EmptyInputReason, detail: str) -> RecordOutcome:
    log.error(detail)
    outcome.skipped = EmptyInputFailure(reason=reason, detail=detail)
    return outcome
