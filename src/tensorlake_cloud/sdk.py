"""Top-level client handle.

:class:`CloudClient` holds the immutable connection settings, owns the
HTTP transport and exposes the resource operations::

    async with CloudClient("https://api.tensorlake.ai", api_key) as client:
        apps = await client.applications.list_applications("default")
        async for page in client.requests.iter_request_pages("default", "my-app"):
            ...

Any number of clients with different credentials can coexist in one
process; there is no module-level client state.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from tensorlake_cloud.client.transport import Transport
from tensorlake_cloud.config import DEFAULT_TIMEOUT, build_config, resolve_config
from tensorlake_cloud.models import ClientConfig
from tensorlake_cloud.resources import ApplicationsResource, RequestsResource


class CloudClient:
    """Client for the applications API.

    Safe to share between concurrently running tasks: the only state is
    the frozen :class:`~tensorlake_cloud.models.ClientConfig` and the
    connection pool of the underlying :class:`httpx.AsyncClient`.

    Args:
        base_url: API root, e.g. ``https://api.tensorlake.ai``.
        api_key: Bearer token; must be non-empty.
        organization_id: Optional organization scope (requires *project_id*).
        project_id: Optional project scope (requires *organization_id*).
        timeout: Default per-request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional httpx transport, mainly for tests.
        config: A pre-built configuration; when given, the connection
            arguments above are ignored.

    Raises:
        ConfigError: If *base_url* or *api_key* is empty.
    """

    def __init__(
        self,
        base_url: str = "",
        api_key: str = "",
        organization_id: Optional[str] = None,
        project_id: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        if config is None:
            config = build_config(
                base_url=base_url,
                api_key=api_key,
                organization_id=organization_id,
                project_id=project_id,
                timeout=timeout,
                verify_ssl=verify_ssl,
            )
        self._config = config
        self._transport = Transport(config, transport=transport)
        self._applications = ApplicationsResource(self._transport)
        self._requests = RequestsResource(self._transport)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> CloudClient:
        """Build a client from an already resolved :class:`ClientConfig`."""
        return cls(config=config, transport=transport)

    @classmethod
    def from_env(cls, **overrides: Any) -> CloudClient:
        """Build a client from ``TENSORLAKE_*`` environment variables.

        Keyword arguments override the environment; see
        :func:`~tensorlake_cloud.config.resolve_config`.
        """
        transport = overrides.pop("transport", None)
        return cls.from_config(resolve_config(**overrides), transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def applications(self) -> ApplicationsResource:
        return self._applications

    @property
    def requests(self) -> RequestsResource:
        return self._requests

    async def __aenter__(self) -> CloudClient:
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release pooled connections."""
        await self._transport.aclose()

    def __repr__(self) -> str:
        return f"CloudClient(base_url={self._config.base_url!r})"
