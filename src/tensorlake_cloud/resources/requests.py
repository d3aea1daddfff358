"""Execution request operations: paginate, fetch, delete, follow progress and
download outputs.

Paths live under
``/v1/namespaces/{namespace}/applications/{application}/requests``.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from tensorlake_cloud.client.response import (
    decode_json,
    decode_model,
    raise_for_status,
    validate_value,
)
from tensorlake_cloud.client.transport import RawResponse
from tensorlake_cloud.exceptions import InvalidUsageError
from tensorlake_cloud.models import (
    CursorDirection,
    DownloadOutput,
    ExecutionRequest,
    ProgressUpdatesPage,
    RequestPage,
)
from tensorlake_cloud.pagination import CursorPager
from tensorlake_cloud.resources.base import (
    Resource,
    cursor_params,
    request_path,
    require_segment,
    requests_path,
)

DEFAULT_PAGE_LIMIT = 100


def _download(raw: RawResponse, with_content: bool = True) -> DownloadOutput:
    return DownloadOutput(
        content=raw.content if with_content else b"",
        content_type=raw.content_type,
        content_length=raw.content_length,
    )


def _flatten_update(item: Any) -> Any:
    """Turn ``{"RequestStarted": {...}}`` into ``{"event": "RequestStarted", ...}``."""
    if isinstance(item, dict) and len(item) == 1:
        ((event, fields),) = item.items()
        if isinstance(fields, dict):
            return {**fields, "event": event}
    return item


class RequestsResource(Resource):
    """Operations on the execution requests of an application.

    Obtained from :attr:`tensorlake_cloud.sdk.CloudClient.requests`.
    """

    async def list_requests(
        self,
        namespace: str,
        app_name: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        cursor: Optional[str] = None,
        direction: Union[CursorDirection, str] = CursorDirection.FORWARD,
        timeout: Optional[float] = None,
    ) -> RequestPage:
        """Fetch one page of execution requests.

        The result depends only on the arguments: passing ``cursor=None``
        always starts over from the beginning in *direction*. Each call is
        one round trip; the client neither buffers nor prefetches.

        Args:
            namespace: Namespace of the application.
            app_name: Application name.
            limit: Maximum number of items; must be a positive integer.
            cursor: ``next_cursor`` of a previous page, passed back verbatim.
            direction: ``forward`` or ``backward``. ``backward`` with a
                cursor yields the items preceding that position.
            timeout: Per-call timeout override in seconds.

        Raises:
            InvalidUsageError: If *limit* is zero or negative, or a path
                argument is empty. No request is sent in that case.
        """
        path = requests_path(namespace, app_name)
        params = cursor_params(limit, cursor, direction)

        raw = await self._transport.send("GET", path, params=params, timeout=timeout)
        raise_for_status(raw)
        return decode_model(raw, RequestPage)

    def iter_request_pages(
        self,
        namespace: str,
        app_name: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        direction: Union[CursorDirection, str] = CursorDirection.FORWARD,
        cursor: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CursorPager[RequestPage]:
        """Return a :class:`~tensorlake_cloud.pagination.CursorPager` over request pages.

        Arguments are validated immediately; no request is sent until the
        pager is iterated.
        """
        requests_path(namespace, app_name)
        cursor_params(limit, cursor, direction)

        async def fetch(page_cursor: Optional[str]) -> RequestPage:
            return await self.list_requests(
                namespace,
                app_name,
                limit=limit,
                cursor=page_cursor,
                direction=direction,
                timeout=timeout,
            )

        return CursorPager(fetch, cursor=cursor)

    async def get_request(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        timeout: Optional[float] = None,
    ) -> ExecutionRequest:
        """Fetch the full record of one execution request."""
        path = request_path(namespace, app_name, request_id)
        raw = await self._transport.send("GET", path, timeout=timeout)
        raise_for_status(raw)
        return decode_model(raw, ExecutionRequest)

    async def delete_request(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        timeout: Optional[float] = None,
    ) -> None:
        """Delete an execution request.

        A request that does not exist raises
        :class:`~tensorlake_cloud.exceptions.ApiResponseError` with the
        server's status.
        """
        path = request_path(namespace, app_name, request_id)
        raw = await self._transport.send("DELETE", path, timeout=timeout)
        raise_for_status(raw)

    async def get_progress_updates(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        next_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ProgressUpdatesPage:
        """Fetch one page of state changes recorded for a request.

        Args:
            namespace: Namespace of the application.
            app_name: Application name.
            request_id: The execution request to follow.
            next_token: ``next_token`` of a previous page, passed back
                verbatim. ``None`` starts from the first update.
            timeout: Per-call timeout override in seconds.

        Returns:
            The page. ``next_token`` is ``None`` when no further updates are
            available yet.
        """
        path = f"{request_path(namespace, app_name, request_id)}/updates"
        params: dict[str, str] = {}
        if next_token is not None:
            if not isinstance(next_token, str):
                raise InvalidUsageError(
                    f"next_token must be a string, got {type(next_token).__name__}"
                )
            params["next_token"] = next_token

        raw = await self._transport.send("GET", path, params=params, timeout=timeout)
        raise_for_status(raw)

        data = decode_json(raw)
        if isinstance(data, dict) and isinstance(data.get("updates"), list):
            data = {**data, "updates": [_flatten_update(u) for u in data["updates"]]}
        return validate_value(raw, data, ProgressUpdatesPage)

    def iter_progress_pages(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        next_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CursorPager[ProgressUpdatesPage]:
        """Return a :class:`~tensorlake_cloud.pagination.CursorPager` over progress pages.

        The walk ends at the first page without a ``next_token``. Its
        :attr:`~tensorlake_cloud.pagination.CursorPager.cursor` keeps the last
        token seen, so a caller polling for new updates resumes from there
        with a fresh pager.
        """
        request_path(namespace, app_name, request_id)

        async def fetch(page_token: Optional[str]) -> ProgressUpdatesPage:
            return await self.get_progress_updates(
                namespace, app_name, request_id, next_token=page_token, timeout=timeout
            )

        return CursorPager(fetch, cursor=next_token)

    async def download_request_output(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        timeout: Optional[float] = None,
    ) -> DownloadOutput:
        """Download the final output of a request as raw bytes."""
        path = f"{request_path(namespace, app_name, request_id)}/output"
        raw = await self._transport.send("GET", path, timeout=timeout)
        raise_for_status(raw)
        return _download(raw)

    async def download_function_output(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        function_call_id: str,
        timeout: Optional[float] = None,
    ) -> DownloadOutput:
        """Download the output of a single function call within a request."""
        path = (
            f"{request_path(namespace, app_name, request_id)}/output/"
            f"{require_segment('function_call_id', function_call_id)}"
        )
        raw = await self._transport.send("GET", path, timeout=timeout)
        raise_for_status(raw)
        return _download(raw)

    async def check_function_output(
        self,
        namespace: str,
        app_name: str,
        request_id: str,
        timeout: Optional[float] = None,
    ) -> Optional[DownloadOutput]:
        """Check whether a request has produced output, without downloading it.

        Returns:
            ``None`` when the server answers 204 (no output yet), otherwise
            a :class:`~tensorlake_cloud.models.DownloadOutput` carrying only
            the content type and length.
        """
        path = f"{request_path(namespace, app_name, request_id)}/output"
        raw = await self._transport.send("HEAD", path, timeout=timeout)
        raise_for_status(raw)
        if raw.status_code == 204:
            return None
        return _download(raw, with_content=False)
