#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import BaseModel

from posync.app import (
    fetch_booking,
    fetch_shipment,
    purchase_order_style_numbers,
    reconcile_payloads,
    search_purchase_orders,
    search_style_numbers,
)
from posync.config import (
    AmbiguousMatchPolicy,
    ConfigurationError,
    configure_logging,
    get_reconcile_config,
)
from posync.domain.errors import RecordValidationError
from posync.domain.ports.gateway import Success

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from posync.domain.ports.gateway import CatalogResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile shipment purchase orders and style numbers with the catalog"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser("process", help="Reconcile a batch of shipment records")
    process.add_argument(
        "input",
        nargs="?",
        default="-",
        help='JSON file with an array of records or {"payloads": [...]} (default: stdin)',
    )
    process.add_argument(
        "--max-concurrent-pos",
        type=int,
        help="Resolve up to this many purchase orders of a record concurrently",
    )
    process.add_argument(
        "--ambiguous-match",
        choices=[policy.value for policy in AmbiguousMatchPolicy],
        help="How to treat lookups that match more than one catalog record",
    )

    shipment = subparsers.add_parser("shipment", help="Show a shipment with its POs and styles")
    shipment.add_argument("shipment_id", type=int)

    booking = subparsers.add_parser("booking", help="Show a booking with its POs and styles")
    booking.add_argument("booking_id", type=int)

    search_pos = subparsers.add_parser("search-pos", help="Search purchase orders by number")
    search_pos.add_argument("text")
    search_pos.add_argument("--purchaser-id", type=int, required=True)
    search_pos.add_argument(
        "--exact", action="store_true", help="Match the order number exactly"
    )

    search_sns = subparsers.add_parser("search-sns", help="Search style numbers")
    search_sns.add_argument("text")
    search_sns.add_argument("--company-id", type=int, required=True)

    po_styles = subparsers.add_parser("po-styles", help="List style numbers of a purchase order")
    po_styles.add_argument("purchase_order_id", type=int)

    return parser.parse_args(list(argv))


def _read_input(source: str) -> object:
    try:
        text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read {source}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Input is not valid JSON: {exc}") from exc


def _to_jsonable(value: object) -> object:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _emit(result: CatalogResult[object]) -> None:
    if not isinstance(result, Success):
        print(f"Error: {result.message}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(_to_jsonable(result.data), indent=2))


def _process(args: argparse.Namespace) -> None:
    try:
        raw = _read_input(args.input)
        config = get_reconcile_config()
        if args.max_concurrent_pos is not None:
            config = replace(config, max_concurrent_pos=args.max_concurrent_pos)
        if args.ambiguous_match is not None:
            config = replace(config, ambiguous_match=AmbiguousMatchPolicy(args.ambiguous_match))
        report = reconcile_payloads(raw, reconcile_config=config)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    print(json.dumps(report.summary, indent=2))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        match args.command:
            case "process":
                _process(args)
            case "shipment":
                _emit(fetch_shipment(args.shipment_id))
            case "booking":
                _emit(fetch_booking(args.booking_id))
            case "search-pos":
                _emit(
                    search_purchase_orders(
                        args.text, purchaser_id=args.purchaser_id, exact=args.exact
                    )
                )
            case "search-sns":
                _emit(search_style_numbers(args.text, company_id=args.company_id))
            case "po-styles":
                _emit(purchase_order_style_numbers(args.purchase_order_id))
    except (ConfigurationError, RecordValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        log.exception("Processing error")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
