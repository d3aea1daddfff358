"""tensorlake_cloud -- async Python client for the Tensorlake Cloud applications API.

The package manages applications (create, update, delete, list), invokes
them and pages through their execution requests over HTTP+JSON with
bearer-token authentication.

Typical use::

    from tensorlake_cloud import CloudClient, ApiResponseError

    async with CloudClient.from_env() as client:
        app = await client.applications.get_application("default", "my-app")
        ack = await client.applications.invoke_application("default", "my-app", {"x": 1})

Modules:
    sdk: :class:`CloudClient`, the top-level handle.
    resources: Application and request operations.
    client: HTTP transport and response codec.
    pagination: :class:`CursorPager` async page iterator.
    models: Pydantic models for configuration and API payloads.
    config: Argument/environment/default configuration resolution.
    exceptions: The error taxonomy.
    output: Opt-in stderr debug tracing.
"""

__version__ = "0.1.0"

from tensorlake_cloud.exceptions import (  # noqa: E402
    ApiResponseError,
    CloudSdkError,
    ConfigError,
    DeserializationError,
    InvalidUsageError,
    SerializationError,
    TransportError,
)
from tensorlake_cloud.models import (  # noqa: E402
    ApiErrorPayload,
    Application,
    ApplicationList,
    ClientConfig,
    CursorDirection,
    DownloadOutput,
    ExecutionRequest,
    InvocationAck,
    ProgressUpdate,
    ProgressUpdatesPage,
    RequestConfig,
    RequestPage,
)
from tensorlake_cloud.pagination import CursorPager  # noqa: E402
from tensorlake_cloud.sdk import CloudClient  # noqa: E402

__all__ = [
    "ApiErrorPayload",
    "ApiResponseError",
    "Application",
    "ApplicationList",
    "ClientConfig",
    "CloudClient",
    "CloudSdkError",
    "ConfigError",
    "CursorDirection",
    "CursorPager",
    "DeserializationError",
    "DownloadOutput",
    "ExecutionRequest",
    "InvalidUsageError",
    "InvocationAck",
    "ProgressUpdate",
    "ProgressUpdatesPage",
    "RequestConfig",
    "RequestPage",
    "SerializationError",
    "TransportError",
    "__version__",
]
