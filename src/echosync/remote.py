#!/usr/bin/env python3
"""Remote clipboard client for the relay service.

Wraps the two relay operations (push the local value, pull the desktop
value) behind an httpx AsyncClient. No retries happen here: a failed call
raises NetworkError and the reconciliation engine simply tries again on
its next tick.
"""

from __future__ import annotations

import logging

import httpx

from echosync.constants import DEFAULT_TIMEOUT
from echosync.errors import NetworkError
from echosync.protocol import decode_pull_response, encode_pull_params, encode_push_body

logger = logging.getLogger(__name__)


class RemoteClipboard:
    """Single-slot clipboard value held by the relay.

    Args:
        push_url: Endpoint receiving POSTed local values.
        pull_url: Endpoint returning the latest desktop value.
        timeout: Per-request timeout in seconds.
        client: Optional preconfigured AsyncClient (used by tests to inject
            a mock transport). The caller keeps ownership of it.
    """

    def __init__(
        self,
        push_url: str,
        pull_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.push_url = push_url
        self.pull_url = pull_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> RemoteClipboard:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def push(self, value: str) -> None:
        """Send a local clipboard value to the relay.

        Args:
            value: Clipboard text to publish.

        Raises:
            NetworkError: On transport failure or a non-2xx response.
        """
        try:
            response = await self._client.post(
                self.push_url, json=encode_push_body(value)
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Push to {self.push_url} failed: {e}") from e
        if not response.is_success:
            raise NetworkError(f"Push rejected with status {response.status_code}")
        logger.debug("Pushed %d characters to relay", len(value))

    async def pull(self) -> str | None:
        """Fetch the latest desktop clipboard value from the relay.

        Returns:
            The desktop value, or None if the relay holds nothing or the
            response body is not in the expected shape.

        Raises:
            NetworkError: On transport failure or a non-2xx response.
        """
        try:
            response = await self._client.get(
                self.pull_url, params=encode_pull_params()
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Pull from {self.pull_url} failed: {e}") from e
        if not response.is_success:
            raise NetworkError(f"Pull rejected with status {response.status_code}")
        try:
            data = response.json()
        except ValueError:
            logger.debug("Pull response was not JSON, treating as empty")
            return None
        return decode_pull_response(data)
