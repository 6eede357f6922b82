"""
JSON-RPC 2.0 client for EVM nodes.

Every request is retried with bounded backoff on transport failures and
5xx answers. A JSON-RPC error object is a definitive answer from the node
and is raised at once as `RpcError`.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from stealth_pool.types import RpcError

from .config import RpcConfig
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (httpx.TransportError, httpx.HTTPStatusError)
"""Failures worth another attempt. Status errors are only raised for 5xx."""


class JsonRpcClient:
    """
    Async JSON-RPC client over a single pooled HTTP connection.

    Use as an async context manager, or call `aclose()` when done.
    """

    def __init__(
        self, config: RpcConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        """
        Args:
            config: Node URL, timeout and retry policy.
            transport: Optional transport override, e.g. `httpx.MockTransport` in tests.
        """
        self.config = config
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def call(self, method: str, params: list[Any] | None = None) -> Any:
        """
        Invoke `method` and return its `result`.

        Raises:
            RpcError: If the node returns an error object or a malformed reply.
            RetryExhausted: If transient failures outlast the retry policy.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }

        async def attempt() -> Any:
            response = await self._client.post(self.config.url, json=payload)
            if response.status_code >= 500:
                response.raise_for_status()
            if response.status_code >= 400:
                raise RpcError(f"HTTP {response.status_code} for {method}: {response.text[:200]}")
            return self._unwrap(method, response)

        return await retry_with_backoff(
            attempt,
            self.config.retry,
            TRANSIENT_ERRORS,
            name=method,
        )

    @staticmethod
    def _unwrap(method: str, response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError as exc:
            raise RpcError(f"Malformed reply to {method}: {exc}") from exc

        if not isinstance(body, dict):
            raise RpcError(f"Malformed reply to {method}: expected an object")

        error = body.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(str(error.get("message", "unknown error")), error.get("code"))
            raise RpcError(str(error))

        if "result" not in body:
            raise RpcError(f"Reply to {method} has neither result nor error")

        logger.debug("%s -> ok", method)
        return body["result"]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> JsonRpcClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.aclose()
