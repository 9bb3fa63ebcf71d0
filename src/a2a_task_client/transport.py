"""HTTP transport for A2A JSON-RPC calls and agent card discovery."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .auth import A2AAuthConfig
from .exceptions import (
    A2AConnectionError,
    A2ATimeoutError,
    MalformedResponseError,
    TransportError,
    _raise_for_rpc_error,
)
from .jsonrpc import JSONRPCRequest

logger = logging.getLogger(__name__)

AGENT_CARD_PATH = "/.well-known/agent.json"

_JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def agent_card_url(base_url: str) -> str:
    """Resolve the well-known agent card path against ``base_url``."""
    return str(httpx.URL(base_url).join(AGENT_CARD_PATH))


class A2ATransport:
    """Sends JSON-RPC envelopes to an agent over HTTP.

    One call is one HTTP request; nothing is retried. The transport may be
    shared across concurrent invocations: it holds no per-task state, only
    the (optionally injected) ``httpx.AsyncClient`` connection pool.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the transport.

        Args:
            http_client: Shared client to use. It is not closed by
                :meth:`close`; the owner manages its lifecycle.
            timeout: Request timeout in seconds for a client created here.
        """
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            logger.debug("Creating HTTP client with %ss timeout", self._timeout)
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._http_client

    def detached(self) -> A2ATransport:
        """Return a transport for use on another event loop.

        An injected client is shared, since its owner manages it. Otherwise
        the new transport creates and closes its own client.
        """
        if self._owns_client:
            return A2ATransport(timeout=self._timeout)
        return A2ATransport(self._http_client, timeout=self._timeout)

    @staticmethod
    def build_headers(auth: A2AAuthConfig | None = None) -> dict[str, str]:
        headers = dict(_JSON_HEADERS)
        if auth:
            headers.update(auth.build_headers())
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json: dict[str, Any] | None = None,
    ) -> Any:
        client = self._ensure_client()
        try:
            response = await client.request(method, url, headers=headers, json=json)
        except httpx.TimeoutException as e:
            raise A2ATimeoutError(
                f"Request to A2A agent {url} timed out after {self._timeout}s",
                url=url,
                cause=e,
            ) from e
        except httpx.ConnectError as e:
            raise A2AConnectionError(
                f"Failed to connect to A2A agent at {url}",
                url=url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error talking to A2A agent at {url}: {e}",
                url=url,
                cause=e,
            ) from e

        if not response.is_success:
            raise TransportError(
                f"A2A agent at {url} returned HTTP {response.status_code}"
                f" - Response: {response.text}",
                status_code=response.status_code,
                body=response.text,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"A2A agent at {url} returned invalid JSON",
                status_code=response.status_code,
                body=response.text,
                url=url,
                cause=e,
            ) from e

    async def send(
        self,
        base_url: str,
        request: JSONRPCRequest,
        auth: A2AAuthConfig | None = None,
    ) -> dict[str, Any]:
        """POST a JSON-RPC request to the agent and unwrap the response.

        Returns:
            The ``result`` member of the response.

        Raises:
            ProtocolError: If the response carries an ``error`` member.
            MalformedResponseError: If it carries neither member.
            TransportError: On connection, timeout, HTTP status or JSON
                decoding failures.
        """
        logger.debug("Sending %s (rpc id %s) to %s", request.method, request.id, base_url)
        body = await self._request(
            "POST",
            base_url,
            headers=self.build_headers(auth),
            json=request.to_wire(),
        )

        if not isinstance(body, dict):
            raise MalformedResponseError(
                "A2A response error: response body is not a JSON object",
                response=body,
            )

        error = body.get("error")
        if error is not None:
            _raise_for_rpc_error(error)

        result = body.get("result")
        if result is None:
            raise MalformedResponseError(
                'A2A response error: missing "result" field in successful response',
                response=body,
            )
        if not isinstance(result, dict):
            raise MalformedResponseError(
                'A2A response error: "result" is not a JSON object',
                response=body,
            )
        return result

    async def discover(self, base_url: str) -> Any:
        """Fetch the agent card from the well-known path.

        Returns:
            The decoded JSON document, unvalidated.
        """
        url = agent_card_url(base_url)
        logger.debug("Fetching agent card from %s", url)
        return await self._request("GET", url, headers={"Accept": "application/json"})

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> A2ATransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
