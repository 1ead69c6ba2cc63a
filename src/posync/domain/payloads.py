"""Assemble the update payloads sent back to the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import EntityId, ProcessedPurchaseOrder, Target


class SelectedStyleNumber(TypedDict):
    id: EntityId


class SelectedPurchaseOrder(TypedDict):
    id: EntityId
    selectedSN: list[SelectedStyleNumber]


PurchaseOrderUpdate = TypedDict(
    "PurchaseOrderUpdate",
    {"type": str, "id": "EntityId", "selectedPOs": list[SelectedPurchaseOrder]},
)
StyleNumberUpdate = TypedDict(
    "StyleNumberUpdate",
    {"type": str, "id": "EntityId", "purchaseOrder": list[SelectedPurchaseOrder]},
)


@dataclass(frozen=True, slots=True)
class UpdatePayloads:
    po_payload: PurchaseOrderUpdate
    sn_payload: StyleNumberUpdate


def build_payloads(
    target: Target,
    processed: Sequence[ProcessedPurchaseOrder],
) -> UpdatePayloads:
    """Build the PO-keyed and SN-keyed payloads for ``target``.

    Pure: the same ``processed`` input always gives equal payloads, and each
    payload gets its own lists so callers may mutate one without touching the other.
    """

    po_payload: PurchaseOrderUpdate = {
        "type": target.kind.value,
        "id": target.id,
        "selectedPOs": _selections(processed),
    }
    sn_payload: StyleNumberUpdate = {
        "type": target.kind.value,
        "id": target.id,
        "purchaseOrder": _selections(processed),
    }
    return UpdatePayloads(po_payload=po_payload, sn_payload=sn_payload)


def _selections(processed: Sequence[ProcessedPurchaseOrder]) -> list[SelectedPurchaseOrder]:
    return [
        {
            "id": purchase_order.id,
            "selectedSN": [{"id": style.id} for style in purchase_order.style_numbers],
        }
        for purchase_order in processed
    ]
