"""Catalog operations expressed as gateway queries and actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from posync.config.gateway import ActionIds
from posync.domain.ports.catalog import CatalogMatch
from posync.domain.ports.gateway import ApplicationFailure, Success

from . import queries
from .schema import (
    ActionData,
    BookingDetail,
    BookingPage,
    PurchaseOrderNode,
    PurchaseOrderPage,
    ShipmentDetail,
    ShipmentPage,
    StyleNumberNode,
    StyleNumberPage,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from posync.domain.model import EntityId, Target
    from posync.domain.payloads import PurchaseOrderUpdate, StyleNumberUpdate
    from posync.domain.ports.catalog import Catalog
    from posync.domain.ports.gateway import CatalogResult, Gateway, GatewayResult

log = getLogger(__name__)


@dataclass(slots=True)
class CatalogClient:
    """Typed catalog access on top of a ``Gateway``.

    Lookups return ``CatalogMatch`` lists for the resolver; the detail and
    search helpers return the validated pydantic models for callers that want
    the whole record.
    """

    gateway: Gateway
    actions: ActionIds = field(default_factory=ActionIds)

    async def lookup_purchase_order(
        self,
        order_number: str,
        *,
        shipper_id: int,
        customer_id: int,
    ) -> CatalogResult[list[CatalogMatch]]:
        result = await self.gateway.execute(
            queries.purchase_order_lookup(
                order_number, shipper_id=shipper_id, customer_id=customer_id
            )
        )
        return _map(
            result,
            lambda data: [
                CatalogMatch(id=node.id, label=node.order_numbers or order_number)
                for node in _page(data, "allPurchaseOrder", PurchaseOrderPage).results
            ],
        )

    async def lookup_style_number(
        self,
        style_number: str,
        *,
        order_number: str,
        shipment_id: EntityId,
    ) -> CatalogResult[list[CatalogMatch]]:
        result = await self.gateway.execute(
            queries.style_number_lookup(
                style_number, order_number=order_number, shipment_id=shipment_id
            )
        )
        return _map(
            result,
            lambda data: [
                CatalogMatch(id=node.id, label=node.style_number or style_number)
                for node in _page(data, "allStyleNumber", StyleNumberPage).results
            ],
        )

    async def create_purchase_order(
        self,
        order_number: str,
        *,
        target: Target,
    ) -> CatalogResult[EntityId]:
        payload = {"type": target.kind.value, "id": target.id, "orderNumber": order_number}
        return await self._create(self.actions.create_purchase_order, payload)

    async def create_style_number(
        self,
        style_number: str,
        *,
        purchase_order_id: EntityId,
        target: Target,
    ) -> CatalogResult[EntityId]:
        payload = {
            "styleNumber": style_number,
            "poId": purchase_order_id,
            "type": target.kind.value,
            "id": target.id,
        }
        return await self._create(self.actions.create_style_number, payload)

    async def update_purchase_orders(self, payload: PurchaseOrderUpdate) -> CatalogResult[object]:
        return await self.run_action(self.actions.update_purchase_order, dict(payload))

    async def update_style_numbers(self, payload: StyleNumberUpdate) -> CatalogResult[object]:
        return await self.run_action(self.actions.update_style_number, dict(payload))

    async def run_action(
        self,
        action_id: str,
        payload: Mapping[str, object],
    ) -> CatalogResult[Any]:
        result = await self.gateway.execute(
            queries.ACTION_MUTATION,
            {"action_id": action_id, "input": {"payload": dict(payload)}},
        )
        if not isinstance(result, Success):
            return result
        try:
            action = ActionData.model_validate(result.data).action
        except ValidationError as exc:
            return _unexpected_shape(exc, result.attempts)
        if action is None or not action.results:
            return ApplicationFailure(
                message=f"Action {action_id} returned no results",
                attempts=result.attempts,
            )
        return Success(data=action.results, attempts=result.attempts)

    async def shipment_detail(self, shipment_id: EntityId) -> CatalogResult[ShipmentDetail | None]:
        result = await self.gateway.execute(queries.shipment_detail(shipment_id))
        return _map(result, lambda data: _first(_page(data, "allShipments", ShipmentPage).results))

    async def booking_detail(self, booking_id: EntityId) -> CatalogResult[BookingDetail | None]:
        result = await self.gateway.execute(queries.booking_detail(booking_id))
        return _map(result, lambda data: _first(_page(data, "allBooking", BookingPage).results))

    async def search_purchase_orders(
        self,
        text: str,
        *,
        purchaser_id: EntityId,
    ) -> CatalogResult[list[PurchaseOrderNode]]:
        result = await self.gateway.execute(
            queries.purchase_order_search(text, purchaser_id=purchaser_id)
        )
        return _map(result, lambda data: _page(data, "allPurchaseOrder", PurchaseOrderPage).results)

    async def find_purchase_orders(
        self,
        order_number: str,
        *,
        purchaser_id: EntityId,
    ) -> CatalogResult[list[PurchaseOrderNode]]:
        result = await self.gateway.execute(
            queries.purchase_order_search(order_number, purchaser_id=purchaser_id, exact=True)
        )
        return _map(result, lambda data: _page(data, "allPurchaseOrder", PurchaseOrderPage).results)

    async def search_style_numbers(
        self,
        text: str,
        *,
        company_id: EntityId,
    ) -> CatalogResult[list[StyleNumberNode]]:
        result = await self.gateway.execute(
            queries.style_number_search(text, company_id=company_id)
        )
        return _map(result, lambda data: _page(data, "allStyleNumber", StyleNumberPage).results)

    async def style_numbers_for_purchase_order(
        self,
        purchase_order_id: EntityId,
    ) -> CatalogResult[list[StyleNumberNode]]:
        result = await self.gateway.execute(
            queries.style_numbers_for_purchase_order(purchase_order_id)
        )
        return _map(result, lambda data: _page(data, "allStyleNumber", StyleNumberPage).results)

    async def _create(
        self,
        action_id: str,
        payload: dict[str, object],
    ) -> CatalogResult[EntityId]:
        result = await self.run_action(action_id, payload)
        if not isinstance(result, Success):
            return result
        if isinstance(result.data, (int, str)) and not isinstance(result.data, bool):
            return Success(data=result.data, attempts=result.attempts)
        if isinstance(result.data, dict) and "id" in result.data:
            return Success(data=result.data["id"], attempts=result.attempts)
        return ApplicationFailure(
            message=f"Action {action_id} did not return an identifier: {result.data!r}",
            attempts=result.attempts,
        )


def _page[M: BaseModel](data: dict[str, Any], key: str, model: type[M]) -> M:
    return model.model_validate(data.get(key) or {})


def _first[T](items: list[T]) -> T | None:
    return items[0] if items else None


def _map[T](
    result: GatewayResult,
    convert: Callable[[dict[str, Any]], T],
) -> CatalogResult[T]:
    if not isinstance(result, Success):
        return result
    try:
        return Success(data=convert(result.data), attempts=result.attempts)
    except ValidationError as exc:
        return _unexpected_shape(exc, result.attempts)


def _unexpected_shape(exc: ValidationError, attempts: int) -> ApplicationFailure:
    log.error(f"Unexpected catalog response shape: {exc}")
    return ApplicationFailure(message=f"Unexpected response shape: {exc}", attempts=attempts)


if TYPE_CHECKING:
    _catalog_check: Catalog = CatalogClient(gateway=None)  # type: ignore[arg-type]
