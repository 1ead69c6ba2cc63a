"""Parse the combined ``purchase_orders_and_styles`` field.

Grammar, comma separated::

    PO100-SN1, SN2, PO200-SN3

``PO-SN`` is an *anchor*: it makes ``PO`` the current purchase order and adds
its first style number. A bare token is a *continuation* and adds another style
number to the current purchase order. A PO that shows up again in a later anchor
keeps accumulating style numbers under the same key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import ParseWarning, ParseWarningReason

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)

TOKEN_SEPARATOR = ","
ANCHOR_SEPARATOR = "-"

type PurchaseOrderMap = dict[str, list[str]]


@dataclass(slots=True)
class ParsedTokens:
    purchase_orders: PurchaseOrderMap = field(default_factory=dict)
    warnings: list[ParseWarning] = field(default_factory=list)


def parse_tokens(text: str | None) -> ParsedTokens:
    """Parse ``text`` into an ordered PO -> style numbers map plus dropped-token warnings.

    Never raises. Absent or blank input yields an empty map.
    """

    parsed = ParsedTokens()
    if not text:
        return parsed

    current: str | None = None
    for raw_token in text.split(TOKEN_SEPARATOR):
        token = raw_token.strip()
        if not token:
            continue

        if ANCHOR_SEPARATOR in token:
            parts = [part.strip() for part in token.split(ANCHOR_SEPARATOR)]
            order_number, style_number = parts[0], parts[1]
            if not order_number or not style_number:
                _warn(parsed, token, ParseWarningReason.MALFORMED_ANCHOR)
                continue
            current = order_number
            parsed.purchase_orders.setdefault(current, []).append(style_number)
            continue

        if current is None:
            _warn(parsed, token, ParseWarningReason.ORPHAN_CONTINUATION)
            continue
        parsed.purchase_orders[current].append(token)

    return parsed


def parse_combined_field(text: str | None) -> PurchaseOrderMap:
    return parse_tokens(text).purchase_orders


def unique_in_order(values: Iterable[str]) -> list[str]:
    """Drop repeated values, keeping the first occurrence of each."""

    return list(dict.fromkeys(values))


def _warn(parsed: ParsedTokens, token: str, reason: ParseWarningReason) -> None:
    warning = ParseWarning(token=token, reason=reason)
    parsed.warnings.append(warning)
    log.warning(str(warning))
