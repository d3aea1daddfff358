"""Asynchronous HTTP transport -- one authenticated exchange per call.

This module provides :class:`Transport`, a thin wrapper around
:class:`httpx.AsyncClient` that:

- prefixes every path with the configured ``base_url``,
- attaches ``Authorization: Bearer <api_key>`` plus the optional
  organization/project scope headers,
- sends JSON or multipart bodies and query parameters,
- returns the raw status, headers and body as a :class:`RawResponse`,
- maps every network-level failure to
  :class:`~tensorlake_cloud.exceptions.TransportError`, including redirect
  loops and bodies whose ``Content-Encoding`` cannot be decoded.

A well-formed HTTP error response is *not* a transport failure; it is
returned like any other response and classified by the caller. No retry
is ever attempted.

Cancelling the task that awaits :meth:`Transport.send` aborts the
exchange; httpx closes the underlying stream and the partial response is
discarded.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from tensorlake_cloud import __version__
from tensorlake_cloud.exceptions import TransportError
from tensorlake_cloud.models import ClientConfig
from tensorlake_cloud.output import get_output

USER_AGENT = f"tensorlake-cloud-sdk/{__version__}"


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and body of a completed HTTP exchange."""

    status_code: int
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """``True`` for any 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> Optional[int]:
        raw = self.headers.get("content-length")
        if raw is None or not raw.strip().isdigit():
            return None
        return int(raw)


class Transport:
    """Authenticated HTTP transport bound to one :class:`ClientConfig`.

    Opens its :class:`httpx.AsyncClient` lazily on first use (or on
    ``async with``) and shares its connection pool between concurrent
    calls. The configuration is never mutated.

    Args:
        config: Base URL, token, scope and request defaults.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        async with Transport(config) as transport:
            raw = await transport.send("GET", "/v1/namespaces/default/applications")
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> Transport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the connection pool. The transport may be reopened by later calls."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    async def send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        content: Optional[bytes] = None,
        files: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """Execute a single HTTP request and return the raw response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, HEAD).
            path: URL path appended to the configured ``base_url``.
            params: Query parameters. Order is irrelevant.
            content: Pre-encoded JSON body. Sets ``Content-Type:
                application/json``.
            files: Multipart parts (mutually exclusive with *content*).
            timeout: Per-call timeout override in seconds.

        Returns:
            The :class:`RawResponse` for any status code the server sent.

        Raises:
            TransportError: On connection, timeout, protocol, redirect-loop,
                content-decoding or I/O failure.
        """
        client = self._ensure_client()
        output = get_output()

        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "params": dict(params) if params else None,
        }
        if files is not None:
            kwargs["files"] = files
        elif content is not None:
            kwargs["content"] = content
            kwargs["headers"] = {"Content-Type": "application/json"}
        if timeout is not None:
            kwargs["timeout"] = timeout

        output.debug(f"{method} {self._config.base_url}{path}")
        started = time.monotonic()
        try:
            response = await client.request(**kwargs)
        except httpx.TimeoutException as exc:
            effective = timeout if timeout is not None else self._config.request.timeout
            raise TransportError(
                f"{method} {path} timed out after {effective}s: {exc}", cause=exc
            ) from exc
        except httpx.RequestError as exc:
            # Network errors, redirect loops and corrupt Content-Encoding bodies.
            raise TransportError(
                f"{method} {path} failed: {str(exc) or type(exc).__name__}", cause=exc
            ) from exc
        except httpx.StreamError as exc:
            raise TransportError(f"{method} {path} stream error: {exc}", cause=exc) from exc

        elapsed_ms = (time.monotonic() - started) * 1000
        output.debug(f"<- {response.status_code} ({elapsed_ms:.0f} ms)")

        return RawResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                headers=self._default_headers(),
                timeout=self._config.request.timeout,
                verify=self._config.request.verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def _default_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._config.api_key.get_secret_value()}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self._config.organization_id and self._config.project_id:
            headers["X-Tensorlake-Organization-Id"] = self._config.organization_id
            headers["X-Tensorlake-Project-Id"] = self._config.project_id
        return headers
