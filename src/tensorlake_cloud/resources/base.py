"""Shared plumbing for resource operations.

Every operation follows the same four steps: validate arguments locally,
build the path and query, send one request through the
:class:`~tensorlake_cloud.client.Transport`, then decode the response or
raise the classified error.
"""

from __future__ import annotations

from typing import Optional, Union
from urllib.parse import quote

from tensorlake_cloud.client.transport import Transport
from tensorlake_cloud.exceptions import InvalidUsageError
from tensorlake_cloud.models import CursorDirection

API_PREFIX = "/v1/namespaces"


def require_segment(name: str, value: str) -> str:
    """Return *value* percent-encoded for use as one path segment.

    Raises:
        InvalidUsageError: If *value* is not a non-empty string.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidUsageError(f"{name} must be a non-empty string")
    return quote(value, safe="")


def require_limit(limit: int) -> int:
    """Reject non-positive (or non-integer) page sizes before any request is sent."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidUsageError(f"limit must be a positive integer, got {limit!r}")
    return limit


def coerce_direction(direction: Union[CursorDirection, str]) -> CursorDirection:
    try:
        return CursorDirection(direction)
    except ValueError as exc:
        raise InvalidUsageError(
            f"direction must be 'forward' or 'backward', got {direction!r}"
        ) from exc


def cursor_params(
    limit: Optional[int],
    cursor: Optional[str],
    direction: Optional[Union[CursorDirection, str]],
) -> dict[str, str]:
    """Build the ``limit`` / ``cursor`` / ``direction`` query for listing calls.

    The cursor is passed through verbatim.
    """
    params: dict[str, str] = {}
    if limit is not None:
        params["limit"] = str(require_limit(limit))
    if cursor is not None:
        if not isinstance(cursor, str):
            raise InvalidUsageError(f"cursor must be a string, got {type(cursor).__name__}")
        params["cursor"] = cursor
    if direction is not None:
        params["direction"] = coerce_direction(direction).value
    return params


def applications_path(namespace: str) -> str:
    return f"{API_PREFIX}/{require_segment('namespace', namespace)}/applications"


def application_path(namespace: str, application: str) -> str:
    return f"{applications_path(namespace)}/{require_segment('application', application)}"


def requests_path(namespace: str, application: str) -> str:
    return f"{application_path(namespace, application)}/requests"


def request_path(namespace: str, application: str, request_id: str) -> str:
    return f"{requests_path(namespace, application)}/{require_segment('request_id', request_id)}"


class Resource:
    """Base class for a group of operations sharing one transport.

    Args:
        transport: The client's transport. Borrowed, never closed here.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
