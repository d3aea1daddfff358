"""Exception hierarchy for tensorlake_cloud.

Every failure of an API call is raised as exactly one of four concrete
subclasses of :class:`CloudSdkError`. Each carries a ``kind`` tag so
callers can branch on the failure class without importing every type::

    CloudSdkError
    +-- TransportError          ("transport")        network / timeout / I/O
    +-- SerializationError      ("serialization")    request body not encodable
    +-- DeserializationError    ("deserialization")  2xx body not decodable
    +-- ApiResponseError        ("api_response")     non-2xx HTTP status

Two further errors are raised *before* any request is sent and are not
part of the call taxonomy: :class:`InvalidUsageError` for local argument
violations and :class:`ConfigError` for unusable client configuration.

Example::

    try:
        app = await client.applications.get_application("default", "my-app")
    except ApiResponseError as exc:
        if exc.status == 404:
            ...
    except TransportError:
        ...  # safe to retry later
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tensorlake_cloud.models import ApiErrorPayload


class CloudSdkError(Exception):
    """Base exception for all failures of an API call.

    Args:
        message: Human-readable error description.
        cause: The underlying exception, if any. Also chained as
            ``__cause__`` by the raising site.
    """

    kind: str = "unknown"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class TransportError(CloudSdkError):
    """Raised when the HTTP exchange itself failed.

    Covers refused connections, DNS failures, TLS errors, timeouts and
    broken streams. The server may or may not have seen the request.
    """

    kind = "transport"


class SerializationError(CloudSdkError):
    """Raised when a request value cannot be represented as JSON."""

    kind = "serialization"


class DeserializationError(CloudSdkError):
    """Raised when a successful (2xx) response body is not valid JSON or
    does not match the expected shape.

    Args:
        message: Human-readable error description.
        cause: The underlying decode or validation error.
        status: The HTTP status of the response that failed to decode.
        body: The raw response text (lossily decoded).
    """

    kind = "deserialization"

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status: int = 0,
        body: str = "",
    ):
        super().__init__(message, cause)
        self.status = status
        self.body = body


class ApiResponseError(CloudSdkError):
    """Raised when the server answered with a non-2xx status.

    A 404 is reported here like any other status; there is no separate
    "not found" class.

    Args:
        status: The HTTP status code.
        payload: The decoded error body (structured JSON when parseable,
            raw text otherwise).
    """

    kind = "api_response"

    def __init__(self, status: int, payload: ApiErrorPayload):
        message = payload.message
        full_msg = f"HTTP {status}: {message}" if message else f"HTTP {status}"
        super().__init__(full_msg)
        self.status = status
        self.payload = payload


class InvalidUsageError(ValueError):
    """Raised for invalid arguments detected before any network call.

    Examples are a non-positive page ``limit`` or an empty namespace.
    """


class ConfigError(Exception):
    """Raised for configuration problems (missing token, empty base URL, bad env values)."""
