"""HTTP gateway to the remote graph catalog."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from posync.adapters.http_resilience import ResilientClient
from posync.domain.errors import ApplicationError, AuthError, GatewayError, TransportError
from posync.domain.ports.gateway import ApplicationFailure, Success, TransportFailure

from .schema import GraphResponse, LoginData

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from posync.config.gateway import GatewayConfig
    from posync.config.http_resilience import ResilienceConfig
    from posync.domain.ports.gateway import GatewayResult

log = getLogger(__name__)

LOGIN_MUTATION = """
mutation Login($authProfileUuid: String!, $username: String!, $password: String!) {
  login(authProfileUuid: $authProfileUuid, username: $username, password: $password) {
    jwtToken
    refreshToken
  }
}
"""

_RETRYABLE = (TransportError, ApplicationError, httpx.HTTPError)

type Sleep = Callable[[float], Awaitable[None]]


@dataclass(slots=True)
class _Credential:
    token: str | None = None


class GraphGateway:
    """Execute queries and mutations with a fixed retry ceiling.

    Every ``execute`` call logs in first and reuses that token for its attempts;
    a 401 drops the token so the next attempt logs in again. Non-200 responses,
    network errors and responses carrying ``errors`` are all retried the same
    way, up to ``config.retry.max_attempts`` tries with a fixed delay in between.
    """

    def __init__(
        self,
        *,
        config: GatewayConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._sleep = sleep or asyncio.sleep
        self._client: ResilientClient | None = None

    @property
    def config(self) -> GatewayConfig:
        return self._config

    async def __aenter__(self) -> GraphGateway:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        operation: str,
        variables: Mapping[str, object] | None = None,
    ) -> GatewayResult:
        body = {"query": operation, "variables": dict(variables or {})}
        description = _describe(operation)
        credential = _Credential()

        async with self._session() as client:
            try:
                data, attempts = await self._retrying(
                    lambda: self._attempt(client, body, credential),
                    description=description,
                )
            except AuthError as exc:
                return TransportFailure(error=exc, attempts=0)
            except ApplicationError as exc:
                return ApplicationFailure(
                    message=str(exc),
                    errors=exc.errors,
                    attempts=self._config.retry.max_attempts,
                )
            except (TransportError, httpx.HTTPError) as exc:
                return TransportFailure(error=exc, attempts=self._config.retry.max_attempts)

        return Success(data=data, attempts=attempts)

    async def _attempt(
        self,
        client: ResilientClient,
        body: dict[str, object],
        credential: _Credential,
    ) -> dict[str, Any]:
        if credential.token is None:
            credential.token = await self._login(client)

        response = await client.post(
            self._config.endpoint,
            json=body,
            headers={"Authorization": f"Bearer {credential.token}"},
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            credential.token = None
        return _unwrap(response)

    async def _login(self, client: ResilientClient) -> str:
        try:
            token, _ = await self._retrying(
                lambda: self._login_attempt(client),
                description="login",
            )
        except (GatewayError, httpx.HTTPError) as exc:
            raise AuthError(f"Error obtaining JWT token: {exc}") from exc
        return token

    async def _login_attempt(self, client: ResilientClient) -> str:
        credentials = self._config.credentials
        response = await client.post(
            self._config.endpoint,
            json={
                "query": LOGIN_MUTATION,
                "variables": {
                    "authProfileUuid": credentials.auth_profile_uuid,
                    "username": credentials.username,
                    "password": credentials.password,
                },
            },
        )
        try:
            login = LoginData.model_validate(_unwrap(response)).login
        except ValidationError as exc:
            raise ApplicationError("Login response has an unexpected shape") from exc
        if login is None or not login.jwt_token:
            raise ApplicationError("Login response did not include a token")
        return login.jwt_token

    async def _retrying[T](
        self,
        call: Callable[[], Awaitable[T]],
        *,
        description: str,
    ) -> tuple[T, int]:
        retry = self._config.retry
        attempt = 1
        while True:
            try:
                return await call(), attempt
            except _RETRYABLE as exc:
                if attempt >= retry.max_attempts:
                    log.error(f"All {retry.max_attempts} attempts failed for {description}: {exc}")
                    raise
                log.warning(
                    f"Attempt {attempt} failed for {description}: {exc}. "
                    f"Retrying in {retry.delay_seconds}s."
                )
            await self._sleep(retry.delay_seconds)
            attempt += 1

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[ResilientClient]:
        if self._client is not None:
            yield self._client
            return
        client = self._client_factory(self._config.resilience)
        try:
            yield client
        finally:
            await client.aclose()


def _unwrap(response: httpx.Response) -> dict[str, Any]:
    if response.status_code != httpx.codes.OK:
        raise TransportError(
            f"Server error (HTTP {response.status_code})",
            status_code=response.status_code,
        )
    try:
        envelope = GraphResponse.model_validate(response.json())
    except ValueError as exc:
        raise TransportError("Response body is not a graph response envelope") from exc

    if envelope.errors:
        raise ApplicationError(
            envelope.first_error_message or "Unknown error",
            errors=tuple(error.model_dump() for error in envelope.errors),
        )
    if envelope.data is None:
        raise ApplicationError("Response carried no data")
    return envelope.data


def _describe(operation: str) -> str:
    for line in operation.splitlines():
        stripped = line.strip().rstrip("{").strip()
        if stripped:
            return stripped[:60]
    return "operation"
