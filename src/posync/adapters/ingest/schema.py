"""Pydantic models describing incoming shipment records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class IngestBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RecordPayload(IngestBaseModel):
    """One element of the webhook/batch JSON array."""

    shipment_id: int | str | None = Field(default=None, alias="shipmentID")
    shipper_id: int | None = None
    customer_id: int | None = None
    purchase_orders_and_styles: str | None = None
    booking_id: int | str | None = None

    _normalize_ids = field_validator(
        "shipment_id", "shipper_id", "customer_id", "booking_id", mode="before"
    )(_blank_to_none)


class BatchEnvelope(IngestBaseModel):
    """One-shot batch input wrapping the records in a ``payloads`` key."""

    payloads: list[object]
