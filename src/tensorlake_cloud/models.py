"""Canonical Pydantic models shared across all tensorlake_cloud modules.

The models fall into two groups:

**Configuration models** -- immutable settings held by a client:
    :class:`RequestConfig` and :class:`ClientConfig`.

**API data contracts** -- transient values decoded from response bodies:
    :class:`CursorDirection`, :class:`Application`, :class:`ApplicationList`,
    :class:`ExecutionRequest`, :class:`RequestError`, :class:`RequestPage`,
    :class:`ProgressUpdate`, :class:`ProgressUpdatesPage`,
    :class:`InvocationAck`, :class:`DownloadOutput` and
    :class:`ApiErrorPayload`.

The field sets of the data contracts are owned by the server's API
schema. Models that mirror server resources use ``extra="allow"`` so
that fields added on the server side are preserved in ``model_extra``
instead of failing to decode. None of these values hold a reference back
to the client that produced them.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call of a client."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ClientConfig(BaseModel):
    """Connection settings for a :class:`~tensorlake_cloud.sdk.CloudClient`.

    Frozen after construction so that a single client can be shared by any
    number of concurrent operations without locking. The API key is held
    as a :class:`~pydantic.SecretStr` and never shows up in ``repr``.

    See Also:
        :func:`~tensorlake_cloud.config.resolve_config`: Build one from
        arguments and environment variables.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(min_length=1, description="API root, e.g. https://api.tensorlake.ai")
    api_key: SecretStr = Field(description="Bearer token sent on every call")
    organization_id: Optional[str] = Field(
        default=None, description="Organization scope header"
    )
    project_id: Optional[str] = Field(default=None, description="Project scope header")
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- API data contracts ---


class CursorDirection(str, enum.Enum):
    """Traversal direction for cursor-based listing endpoints."""

    FORWARD = "forward"
    BACKWARD = "backward"


class Application(BaseModel):
    """A deployable application registered in a namespace.

    Identity is ``(namespace, name)``. The server does not echo the
    namespace in its bodies, so resource operations fill it in from the
    request path. ``state`` is reported by the server and never sent back
    on upsert.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    version: str = ""
    namespace: str = ""
    description: str = ""
    tags: dict[str, str] = Field(default_factory=dict)
    entrypoint: Optional[dict[str, Any]] = None
    functions: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    tombstoned: Optional[bool] = None
    state: Optional[Any] = None

    def to_manifest(self) -> dict[str, Any]:
        """Return the JSON-ready definition sent on create/update."""
        return self.model_dump(mode="json", exclude={"state"}, exclude_none=True)


class ApplicationList(BaseModel):
    """One page of applications plus the cursor for the next page.

    The ``applications`` list is required; an object without it is not a page.
    """

    applications: list[Application]
    next_cursor: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("cursor", "next_cursor")
    )


class RequestError(BaseModel):
    """Error reported by the function that failed an execution request."""

    model_config = ConfigDict(extra="allow")

    function_name: str = ""
    message: str = ""


class ExecutionRequest(BaseModel):
    """One invocation of an application.

    Identity is ``(namespace, application, id)``. Listing endpoints return
    shallow entries (``id`` and ``created_at`` only); :meth:`get_request`
    returns the full record. Unknown fields, including any metadata echoing
    the invocation payload, are kept in ``model_extra`` unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    created_at: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    application_version: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("application_version", "applicationVersion"),
    )
    outcome: Optional[Any] = None
    failure_reason: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("failure_reason", "failureReason")
    )
    request_error: Optional[RequestError] = Field(
        default=None, validation_alias=AliasChoices("request_error", "requestError")
    )
    function_runs: list[dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("function_runs", "functionRuns"),
    )

    @property
    def status(self) -> str:
        """Lifecycle status derived from ``outcome``.

        Returns ``"pending"`` while the server reports no outcome (or
        ``"unknown"``), ``"success"``, or ``"failure"``.
        """
        outcome = self.outcome
        if outcome is None or outcome == "unknown":
            return "pending"
        if outcome == "success":
            return "success"
        if isinstance(outcome, dict) and "failure" in outcome:
            return "failure"
        return str(outcome)


class RequestPage(BaseModel):
    """One page of execution requests plus the cursor for the next page.

    ``next_cursor`` is an opaque server token. It must be passed back
    verbatim and is never parsed by the client. The ``requests`` list is
    required.
    """

    items: list[ExecutionRequest] = Field(
        validation_alias=AliasChoices("requests", "items")
    )
    next_cursor: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("cursor", "next_cursor")
    )


class ProgressUpdate(BaseModel):
    """One state change of an execution request.

    On the wire each update is an object with a single key naming the
    event (``RequestStarted``, ``FunctionRunCreated``, ``RequestFinished``
    ...) whose value holds the event fields. The event name is kept in
    ``event`` and the fields are flattened next to it; fields specific to
    one event kind land in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    event: str
    namespace: str = ""
    application_name: str = ""
    application_version: str = ""
    request_id: str = ""
    created_at: Optional[Any] = None

    @property
    def is_terminal(self) -> bool:
        """``True`` for the ``RequestFinished`` event, after which no updates follow."""
        return self.event == "RequestFinished"


class ProgressUpdatesPage(BaseModel):
    """One page of progress updates plus the token for the next page.

    ``next_token`` is opaque. :attr:`next_cursor` exposes it under the name
    :class:`~tensorlake_cloud.pagination.CursorPager` expects.
    """

    updates: list[ProgressUpdate]
    next_token: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("next_token", "nextToken")
    )

    @property
    def next_cursor(self) -> Optional[str]:
        return self.next_token


class InvocationAck(BaseModel):
    """Acknowledgment returned when an application is invoked."""

    model_config = ConfigDict(extra="allow")

    request_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("request_id", "requestId", "id")
    )


class DownloadOutput(BaseModel):
    """Raw output payload of a request or a single function call."""

    content: bytes = b""
    content_type: Optional[str] = None
    content_length: Optional[int] = None


class ApiErrorPayload(BaseModel):
    """Decoded body of a non-2xx response.

    ``body`` holds the parsed JSON document when the response was valid
    JSON, or the raw text otherwise. ``text`` always holds the raw text.
    """

    status: int
    body: Any = None
    text: str = ""

    @property
    def message(self) -> str:
        """Best-effort human-readable message extracted from the body."""
        body = self.body
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
                if isinstance(value, dict) and isinstance(value.get("message"), str):
                    return value["message"]
            return self.text[:200]
        if isinstance(body, str):
            return body[:200]
        return self.text[:200]
