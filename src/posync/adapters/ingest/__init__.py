"""Public interface for the record ingestion adapter."""

from __future__ import annotations

from .schema import RecordPayload
from .translator import BatchInput, RejectedRecord, parse_batch, parse_record

__all__ = [
    "BatchInput",
    "RecordPayload",
    "RejectedRecord",
    "parse_batch",
    "parse_record",
]
