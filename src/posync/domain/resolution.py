"""Find-or-create resolution of purchase orders and style numbers.

Both kinds walk the same small state machine::

    checking -> found ------------> resolved
             -> creating -> resolved
                         -> failed
             -> failed

Failures come back as ``ResolutionFailure`` values, never as exceptions, so a
caller resolving many siblings can keep going after one of them fails.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from posync.config.sync import AmbiguousMatchPolicy

from .errors import ResolutionFailure
from .model import EntityKind, EntitySource, ResolvedEntity
from .ports.gateway import Success

if TYPE_CHECKING:
    from .model import EntityId, Target
    from .ports.catalog import Catalog, CatalogMatch
    from .ports.gateway import CatalogResult

log = getLogger(__name__)

type Lookup = Callable[[], Awaitable[CatalogResult[list[CatalogMatch]]]]
type Create = Callable[[], Awaitable[CatalogResult[EntityId]]]


class ResolutionState(StrEnum):
    CHECKING = "checking"
    FOUND = "found"
    CREATING = "creating"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(slots=True)
class EntityResolver:
    catalog: Catalog
    ambiguous_match: AmbiguousMatchPolicy = AmbiguousMatchPolicy.FIRST

    async def resolve_purchase_order(
        self,
        order_number: str,
        *,
        shipper_id: int,
        customer_id: int,
        target: Target,
    ) -> ResolvedEntity | ResolutionFailure:
        log.info(
            f'Checking existence for PO "{order_number}" with shipper ID {shipper_id} '
            f"and customer ID {customer_id}"
        )
        return await self._resolve(
            EntityKind.PURCHASE_ORDER,
            order_number,
            lookup=lambda: self.catalog.lookup_purchase_order(
                order_number, shipper_id=shipper_id, customer_id=customer_id
            ),
            create=lambda: self.catalog.create_purchase_order(order_number, target=target),
        )

    async def resolve_style_number(
        self,
        style_number: str,
        *,
        purchase_order: ResolvedEntity,
        target: Target,
    ) -> ResolvedEntity | ResolutionFailure:
        log.info(
            f'Checking existence for style number "{style_number}" for PO '
            f'"{purchase_order.label}" and {target.kind} {target.id}'
        )
        return await self._resolve(
            EntityKind.STYLE_NUMBER,
            style_number,
            lookup=lambda: self.catalog.lookup_style_number(
                style_number, order_number=purchase_order.label, shipment_id=target.id
            ),
            create=lambda: self.catalog.create_style_number(
                style_number, purchase_order_id=purchase_order.id, target=target
            ),
        )

    async def _resolve(
        self,
        kind: EntityKind,
        label: str,
        *,
        lookup: Lookup,
        create: Create,
    ) -> ResolvedEntity | ResolutionFailure:
        found = await lookup()
        if not isinstance(found, Success):
            return _failed(kind, label, ResolutionState.CHECKING, found.message)

        matches = found.data
        if matches:
            if len(matches) > 1:
                if self.ambiguous_match is AmbiguousMatchPolicy.FAIL:
                    return _failed(
                        kind,
                        label,
                        ResolutionState.FOUND,
                        f"{len(matches)} matching records, refusing to pick one",
                    )
                log.warning(
                    f'{kind} "{label}" matched {len(matches)} records; using the first '
                    f"(ID: {matches[0].id})"
                )
            match = matches[0]
            log.info(f'{kind} "{label}" found (ID: {match.id}).')
            return ResolvedEntity(
                id=match.id,
                label=match.label or label,
                source=EntitySource.EXISTING,
                kind=kind,
            )

        log.info(f'{kind} "{label}" not found. Creating it.')
        created = await create()
        if not isinstance(created, Success):
            return _failed(kind, label, ResolutionState.CREATING, created.message)

        log.info(f'{kind} "{label}" successfully added (new ID: {created.data}).')
        return ResolvedEntity(
            id=created.data,
            label=label,
            source=EntitySource.CREATED,
            kind=kind,
        )


def _failed(
    kind: EntityKind, label: str, stage: ResolutionState, message: str
) -> ResolutionFailure:
    failure = ResolutionFailure(kind=kind, label=label, stage=stage.value, message=message)
    log.error(str(failure))
    return failure
