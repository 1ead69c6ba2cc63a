"""Scripted stand-in for the remote graph endpoint, served through httpx.MockTransport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from posync.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from posync.config import ResilienceConfig

type Reply = httpx.Response | Exception
type Responder = Callable[[dict[str, object]], Reply]


def graph_ok(data: dict[str, object]) -> httpx.Response:
    return httpx.Response(200, json={"data": data})


def graph_errors(*messages: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={"data": None, "errors": [{"message": message} for message in messages]},
    )


def login_ok(token: str) -> httpx.Response:
    return graph_ok({"login": {"jwtToken": token, "refreshToken": f"refresh-{token}"}})


def is_login(body: dict[str, object]) -> bool:
    query = body.get("query")
    return isinstance(query, str) and query.lstrip().startswith("mutation Login")


@dataclass
class GraphServer:
    """Answers login calls with numbered tokens and operations from a script.

    ``replies`` is consumed one entry per operation request. Pass ``responder``
    instead to compute replies from the request body.
    """

    replies: list[Reply] = field(default_factory=list)
    responder: Responder | None = None
    login_replies: list[Reply] = field(default_factory=list)
    login_requests: list[dict[str, object]] = field(default_factory=list)
    operation_requests: list[dict[str, object]] = field(default_factory=list)
    authorization_headers: list[str | None] = field(default_factory=list)

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if is_login(body):
            self.login_requests.append(body)
            if self.login_replies:
                return _deliver(self.login_replies.pop(0))
            return login_ok(f"token-{len(self.login_requests)}")

        self.operation_requests.append(body)
        self.authorization_headers.append(request.headers.get("Authorization"))
        if self.responder is not None:
            return _deliver(self.responder(body))
        return _deliver(self.replies.pop(0))

    def client_factory(self) -> Callable[[ResilienceConfig], ResilientClient]:
        async def async_handler(request: httpx.Request) -> httpx.Response:
            return self.handle(request)

        def factory(resilience: ResilienceConfig) -> ResilientClient:
            client = ResilientClient(resilience)
            client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            return client

        return factory


def _deliver(reply: Reply) -> httpx.Response:
    if isinstance(reply, Exception):
        raise reply
    return reply
