"""Value objects flowing through one record's reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

type EntityId = int | str


class EntityKind(StrEnum):
    PURCHASE_ORDER = "purchase_order"
    STYLE_NUMBER = "style_number"


class EntitySource(StrEnum):
    """Whether a resolved entity was already in the catalog or created by us."""

    EXISTING = "existing"
    CREATED = "created"


class TargetKind(StrEnum):
    SHIPMENT = "shipment"
    BOOKING = "booking"


@dataclass(frozen=True, slots=True)
class Record:
    """One shipment row as received from ingestion. Never mutated."""

    shipment_id: EntityId | None
    shipper_id: int | None
    customer_id: int | None
    combined_field: str | None
    booking_id: EntityId | None = None

    def missing_identifiers(self) -> tuple[str, ...]:
        checks = (
            ("shipmentID", self.shipment_id),
            ("shipper_id", self.shipper_id),
            ("customer_id", self.customer_id),
        )
        return tuple(name for name, value in checks if value is None)


@dataclass(frozen=True, slots=True)
class Target:
    """Entity whose PO/SN selections are rewritten by the update actions."""

    kind: TargetKind
    id: EntityId


@dataclass(frozen=True, slots=True)
class ResolvedEntity:
    id: EntityId
    label: str
    source: EntitySource
    kind: EntityKind


@dataclass(slots=True)
class ProcessedPurchaseOrder:
    """A resolved PO plus the style numbers resolved beneath it."""

    id: EntityId
    order_number: str
    style_numbers: list[ResolvedEntity] = field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: ResolvedEntity) -> ProcessedPurchaseOrder:
        return cls(id=entity.id, order_number=entity.label)
