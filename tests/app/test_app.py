from __future__ import annotations

from collections.abc import Awaitable, Callable  # noqa: TC003

import httpx
import pytest

from posync.adapters.gateway import GraphGateway
from posync.app import fetch_booking, reconcile_payloads, search_purchase_orders
from posync.config import GatewayConfig, MissingConfigurationError, ReconcileConfig
from posync.config.gateway import (
    DEFAULT_CREATE_PURCHASE_ORDER_ACTION,
    DEFAULT_CREATE_STYLE_NUMBER_ACTION,
    DEFAULT_UPDATE_PURCHASE_ORDER_ACTION,
    DEFAULT_UPDATE_STYLE_NUMBER_ACTION,
)
from posync.domain.ports.gateway import Success, TransportFailure
from tests.support.graph_server import GraphServer, graph_ok

type Sleep = Callable[[float], Awaitable[None]]

STYLE_IDS = {"SN1": 7, "SN2": 8, "SN3": 9}


class CatalogScript:
    """Graph responder holding PO100 (id 5) and creating everything else."""

    def __init__(self) -> None:
        self.actions: list[tuple[str, dict[str, object]]] = []

    def __call__(self, body: dict[str, object]) -> httpx.Response:
        query = str(body["query"])
        variables = body.get("variables") or {}
        assert isinstance(variables, dict)

        if "allPurchaseOrder" in query:
            results = [{"id": 5, "orderNumbers": "PO100"}] if '"PO100"' in query else []
            return graph_ok({"allPurchaseOrder": {"results": results, "totalCount": len(results)}})
        if "allStyleNumber" in query:
            return graph_ok({"allStyleNumber": {"results": [], "totalCount": 0}})

        action_id = str(variables["action_id"])
        payload = variables["input"]["payload"]
        self.actions.append((action_id, payload))
        if action_id == DEFAULT_CREATE_PURCHASE_ORDER_ACTION:
            return graph_ok({"action": {"results": {"id": 6}}})
        if action_id == DEFAULT_CREATE_STYLE_NUMBER_ACTION:
            return graph_ok({"action": {"results": {"id": STYLE_IDS[payload["styleNumber"]]}}})
        return graph_ok({"action": {"results": {"updated": True}}})


def _factory(server: GraphServer, sleep: Sleep) -> Callable[[GatewayConfig], GraphGateway]:
    def build(config: GatewayConfig) -> GraphGateway:
        return GraphGateway(config=config, client_factory=server.client_factory(), sleep=sleep)

    return build


def test_reconcile_payloads_end_to_end(gateway_config: GatewayConfig, fake_sleep: Sleep) -> None:
    script = CatalogScript()
    server = GraphServer(responder=script)
    raw = {
        "payloads": [
            {
                "shipmentID": 42,
                "shipper_id": 1,
                "customer_id": 2,
                "purchase_orders_and_styles": "PO100-SN1, SN2, PO200-SN3",
            },
            {"shipmentID": 43, "shipper_id": 1, "customer_id": 2},
            "garbage",
        ]
    }

    report = reconcile_payloads(
        raw,
        gateway_config=gateway_config,
        reconcile_config=ReconcileConfig(),
        gateway_factory=_factory(server, fake_sleep),
    )

    assert report.summary == {
        "completed": 1,
        "partial": 0,
        "skipped": 1,
        "failed": 0,
        "rejected": 1,
    }
    selections = [
        {"id": 5, "selectedSN": [{"id": 7}, {"id": 8}]},
        {"id": 6, "selectedSN": [{"id": 9}]},
    ]
    updates = [
        (action_id, payload)
        for action_id, payload in script.actions
        if action_id
        in (DEFAULT_UPDATE_PURCHASE_ORDER_ACTION, DEFAULT_UPDATE_STYLE_NUMBER_ACTION)
    ]
    assert updates == [
        (
            DEFAULT_UPDATE_PURCHASE_ORDER_ACTION,
            {"type": "shipment", "id": 42, "selectedPOs": selections},
        ),
        (
            DEFAULT_UPDATE_STYLE_NUMBER_ACTION,
            {"type": "shipment", "id": 42, "purchaseOrder": selections},
        ),
    ]
    created_po = {"type": "shipment", "id": 42, "orderNumber": "PO200"}
    assert (DEFAULT_CREATE_PURCHASE_ORDER_ACTION, created_po) in script.actions


def test_catalog_read_returns_gateway_failure(
    gateway_config: GatewayConfig, fake_sleep: Sleep
) -> None:
    server = GraphServer(responder=lambda _body: httpx.Response(502))

    result = fetch_booking(
        9, gateway_config=gateway_config, gateway_factory=_factory(server, fake_sleep)
    )

    assert isinstance(result, TransportFailure)
    assert result.attempts == 3


def test_exact_search_reads_matches(gateway_config: GatewayConfig, fake_sleep: Sleep) -> None:
    server = GraphServer(responder=CatalogScript())

    result = search_purchase_orders(
        "PO100",
        purchaser_id=3,
        exact=True,
        gateway_config=gateway_config,
        gateway_factory=_factory(server, fake_sleep),
    )

    assert isinstance(result, Success)
    assert [node.order_numbers for node in result.data] == ["PO100"]
    assert "eq:" in str(server.operation_requests[0]["query"])


def test_missing_configuration_is_raised_before_any_request() -> None:
    with pytest.raises(MissingConfigurationError):
        reconcile_payloads([])
