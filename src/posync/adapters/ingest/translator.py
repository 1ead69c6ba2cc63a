"""Translate raw batch input into domain records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger

from pydantic import ValidationError

from posync.domain.errors import RecordValidationError
from posync.domain.model import Record

from .schema import BatchEnvelope, RecordPayload

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RejectedRecord:
    index: int
    reason: str


@dataclass(slots=True)
class BatchInput:
    records: list[Record] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)


def parse_record(payload: object) -> Record:
    """Validate one raw record. Raises ``RecordValidationError`` on bad input."""

    try:
        model = RecordPayload.model_validate(payload)
    except ValidationError as exc:
        raise RecordValidationError(f"Invalid shipment record: {exc}") from exc

    return Record(
        shipment_id=model.shipment_id,
        shipper_id=model.shipper_id,
        customer_id=model.customer_id,
        combined_field=model.purchase_orders_and_styles,
        booking_id=model.booking_id,
    )


def parse_batch(raw: object) -> BatchInput:
    """Read a JSON array of records, or ``{"payloads": [...]}``.

    Records that fail validation are logged and reported on ``rejected`` so
    one bad row never hides the rest of the batch.
    """

    items = _unwrap_batch(raw)
    batch = BatchInput()
    for index, item in enumerate(items):
        try:
            batch.records.append(parse_record(item))
        except RecordValidationError as exc:
            log.error(f"Skipping record #{index}: {exc}")
            batch.rejected.append(RejectedRecord(index=index, reason=str(exc)))
    return batch


def _unwrap_batch(raw: object) -> list[object]:
    if isinstance(raw, list):
        return list(raw)
    if isinstance(raw, Mapping):
        try:
            return BatchEnvelope.model_validate(raw).payloads
        except ValidationError as exc:
            raise RecordValidationError('Input must contain a "payloads" array') from exc
    raise RecordValidationError("Input must be a JSON array of records")
