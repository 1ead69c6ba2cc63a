from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable  # noqa: TC003

import httpx

from posync.adapters.gateway import LOGIN_MUTATION, GraphGateway
from posync.config import GatewayConfig  # noqa: TC001
from posync.domain.errors import AuthError, TransportError
from posync.domain.ports.gateway import ApplicationFailure, Success, TransportFailure
from tests.support.graph_server import GraphServer, graph_errors, graph_ok

QUERY = "{ allPurchaseOrder { results { id } } }"

type Sleep = Callable[[float], Awaitable[None]]


def _gateway(server: GraphServer, config: GatewayConfig, sleep: Sleep) -> GraphGateway:
    return GraphGateway(config=config, client_factory=server.client_factory(), sleep=sleep)


def test_execute_logs_in_and_sends_bearer_token(
    gateway_config: GatewayConfig, fake_sleep: Sleep, recorded_sleeps: list[float]
) -> None:
    server = GraphServer(replies=[graph_ok({"allPurchaseOrder": {"results": [{"id": 5}]}})])
    gateway = _gateway(server, gateway_config, fake_sleep)

    result = asyncio.run(gateway.execute(QUERY, {"a": 1}))

    assert result == Success(data={"allPurchaseOrder": {"results": [{"id": 5}]}}, attempts=1)
    assert server.login_requests == [
        {
            "query": LOGIN_MUTATION,
            "variables": {
                "authProfileUuid": "profile-uuid",
                "username": "agents",
                "password": "secret",
            },
        }
    ]
    assert server.operation_requests == [{"query": QUERY, "variables": {"a": 1}}]
    assert server.authorization_headers == ["Bearer token-1"]
    assert recorded_sleeps == []


def test_two_failures_then_success_reports_three_attempts(
    gateway_config: GatewayConfig, fake_sleep: Sleep, recorded_sleeps: list[float]
) -> None:
    server = GraphServer(
        replies=[
            httpx.Response(503),
            graph_errors("temporarily locked"),
            graph_ok({"ok": True}),
        ]
    )

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert result == Success(data={"ok": True}, attempts=3)
    assert len(server.operation_requests) == 3
    assert recorded_sleeps == [2.0, 2.0]


def test_persistent_application_errors_become_application_failure(
    gateway_config: GatewayConfig, fake_sleep: Sleep, recorded_sleeps: list[float]
) -> None:
    server = GraphServer(responder=lambda _body: graph_errors("Order number taken", "second"))

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert isinstance(result, ApplicationFailure)
    assert result.message == "Order number taken"
    assert [error["message"] for error in result.errors] == ["Order number taken", "second"]
    assert result.attempts == 3
    assert len(server.operation_requests) == 3
    assert recorded_sleeps == [2.0, 2.0]


def test_persistent_server_errors_become_transport_failure(
    gateway_config: GatewayConfig, fake_sleep: Sleep
) -> None:
    server = GraphServer(responder=lambda _body: httpx.Response(503))

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert isinstance(result, TransportFailure)
    assert isinstance(result.error, TransportError)
    assert result.error.status_code == 503
    assert result.attempts == 3
    assert result.ok is False


def test_network_errors_are_retried(gateway_config: GatewayConfig, fake_sleep: Sleep) -> None:
    server = GraphServer(
        replies=[httpx.ConnectError("connection refused"), graph_ok({"ok": True})]
    )

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert result == Success(data={"ok": True}, attempts=2)


def test_null_data_without_errors_is_a_failure(
    gateway_config: GatewayConfig, fake_sleep: Sleep
) -> None:
    server = GraphServer(responder=lambda _body: httpx.Response(200, json={"data": None}))

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert isinstance(result, ApplicationFailure)
    assert result.message == "Response carried no data"


def test_login_failure_sends_no_operation(
    gateway_config: GatewayConfig, fake_sleep: Sleep, recorded_sleeps: list[float]
) -> None:
    server = GraphServer(
        login_replies=[graph_errors("Invalid credentials") for _ in range(3)],
        replies=[graph_ok({"ok": True})],
    )

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert isinstance(result, TransportFailure)
    assert isinstance(result.error, AuthError)
    assert "Invalid credentials" in result.message
    assert len(server.login_requests) == 3
    assert server.operation_requests == []
    assert recorded_sleeps == [2.0, 2.0]


def test_unauthorized_response_triggers_fresh_login(
    gateway_config: GatewayConfig, fake_sleep: Sleep
) -> None:
    server = GraphServer(replies=[httpx.Response(401), graph_ok({"ok": True})])

    result = asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert result == Success(data={"ok": True}, attempts=2)
    assert server.authorization_headers == ["Bearer token-1", "Bearer token-2"]


def test_each_operation_logs_in_again(gateway_config: GatewayConfig, fake_sleep: Sleep) -> None:
    server = GraphServer(responder=lambda _body: graph_ok({"ok": True}))
    gateway = _gateway(server, gateway_config, fake_sleep)

    async def run_twice() -> None:
        async with gateway:
            await gateway.execute(QUERY)
            await gateway.execute(QUERY)

    asyncio.run(run_twice())

    assert len(server.login_requests) == 2
    assert server.authorization_headers == ["Bearer token-1", "Bearer token-2"]


def test_login_token_is_reused_across_retries(
    gateway_config: GatewayConfig, fake_sleep: Sleep
) -> None:
    server = GraphServer(replies=[httpx.Response(500), graph_ok({"ok": True})])

    asyncio.run(_gateway(server, gateway_config, fake_sleep).execute(QUERY))

    assert len(server.login_requests) == 1
    assert server.authorization_headers == ["Bearer token-1", "Bearer token-1"]
