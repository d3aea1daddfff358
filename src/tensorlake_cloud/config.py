"""Configuration resolution for tensorlake_cloud clients.

:func:`resolve_config` merges explicit arguments, environment variables and
built-in defaults into a frozen :class:`~tensorlake_cloud.models.ClientConfig`.

Precedence (high to low):
    1. Explicit arguments
    2. Environment variables (``TENSORLAKE_API_URL``, ``TENSORLAKE_API_KEY``,
       ``TENSORLAKE_ORGANIZATION_ID``, ``TENSORLAKE_PROJECT_ID``,
       ``TENSORLAKE_TIMEOUT``)
    3. Defaults

How the token ends up in the environment (shell profile, secret manager,
CI variable) is the caller's business; this module only reads it.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import ValidationError

from tensorlake_cloud.exceptions import ConfigError
from tensorlake_cloud.models import ClientConfig, RequestConfig

DEFAULT_BASE_URL = "https://api.tensorlake.ai"
DEFAULT_TIMEOUT = 30.0

ENV_BASE_URL = "TENSORLAKE_API_URL"
ENV_API_KEY = "TENSORLAKE_API_KEY"
ENV_ORGANIZATION_ID = "TENSORLAKE_ORGANIZATION_ID"
ENV_PROJECT_ID = "TENSORLAKE_PROJECT_ID"
ENV_TIMEOUT = "TENSORLAKE_TIMEOUT"


def _env(name: str) -> Optional[str]:
    """Return a non-empty environment value or ``None``."""
    value = os.environ.get(name, "").strip()
    return value or None


def _env_timeout() -> Optional[float]:
    raw = _env(ENV_TIMEOUT)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {ENV_TIMEOUT} value {raw!r}: {exc}") from exc


def build_config(
    base_url: str,
    api_key: str,
    organization_id: Optional[str] = None,
    project_id: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    verify_ssl: bool = True,
) -> ClientConfig:
    """Validate the given values and return a frozen :class:`ClientConfig`.

    Raises:
        ConfigError: If the base URL or token is empty, or the timeout is
            not positive.
    """
    if not api_key or not api_key.strip():
        raise ConfigError("An API key (bearer token) is required")
    if not base_url or not base_url.strip():
        raise ConfigError("A base URL is required")
    if (organization_id is None) != (project_id is None):
        raise ConfigError("organization_id and project_id must be set together")
    try:
        return ClientConfig(
            base_url=base_url.strip().rstrip("/"),
            api_key=api_key.strip(),
            organization_id=organization_id,
            project_id=project_id,
            request=RequestConfig(timeout=timeout, verify_ssl=verify_ssl),
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


def resolve_config(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    organization_id: Optional[str] = None,
    project_id: Optional[str] = None,
    timeout: Optional[float] = None,
    verify_ssl: bool = True,
) -> ClientConfig:
    """Resolve a client configuration with the full precedence chain.

    Args:
        base_url: API root. Falls back to ``TENSORLAKE_API_URL``, then
            :data:`DEFAULT_BASE_URL`.
        api_key: Bearer token. Falls back to ``TENSORLAKE_API_KEY``.
        organization_id: Organization scope. Falls back to
            ``TENSORLAKE_ORGANIZATION_ID``.
        project_id: Project scope. Falls back to ``TENSORLAKE_PROJECT_ID``.
        timeout: Default request timeout in seconds. Falls back to
            ``TENSORLAKE_TIMEOUT``, then :data:`DEFAULT_TIMEOUT`.
        verify_ssl: Verify TLS certificates.

    Returns:
        The resolved :class:`~tensorlake_cloud.models.ClientConfig`.

    Raises:
        ConfigError: If no token can be found or a value is invalid.
    """
    resolved_key = api_key or _env(ENV_API_KEY)
    if not resolved_key:
        raise ConfigError(
            f"No API key given and environment variable '{ENV_API_KEY}' is not set"
        )

    resolved_timeout = timeout
    if resolved_timeout is None:
        resolved_timeout = _env_timeout()
    if resolved_timeout is None:
        resolved_timeout = DEFAULT_TIMEOUT

    return build_config(
        base_url=base_url or _env(ENV_BASE_URL) or DEFAULT_BASE_URL,
        api_key=resolved_key,
        organization_id=organization_id or _env(ENV_ORGANIZATION_ID),
        project_id=project_id or _env(ENV_PROJECT_ID),
        timeout=resolved_timeout,
        verify_ssl=verify_ssl,
    )
