"""Application operations: list, get, create/update, delete and invoke.

All paths live under ``/v1/namespaces/{namespace}/applications``. Every
method sends exactly one request and either returns a typed value or
raises one of the four call errors from :mod:`tensorlake_cloud.exceptions`.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from tensorlake_cloud.client.response import (
    decode_json,
    decode_model,
    encode_json,
    raise_for_status,
    validate_value,
)
from tensorlake_cloud.exceptions import InvalidUsageError, SerializationError
from tensorlake_cloud.models import (
    Application,
    ApplicationList,
    CursorDirection,
    InvocationAck,
)
from tensorlake_cloud.pagination import CursorPager
from tensorlake_cloud.resources.base import (
    Resource,
    application_path,
    applications_path,
    cursor_params,
    require_segment,
)


def _in_namespace(app: Application, namespace: str) -> Application:
    if app.namespace:
        return app
    return app.model_copy(update={"namespace": namespace})


class ApplicationsResource(Resource):
    """Operations on the applications of a namespace.

    Obtained from :attr:`tensorlake_cloud.sdk.CloudClient.applications`.
    """

    async def list_applications(
        self,
        namespace: str,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        direction: Optional[Union[CursorDirection, str]] = None,
        timeout: Optional[float] = None,
    ) -> ApplicationList:
        """List the applications registered in *namespace*.

        A namespace without applications yields an empty
        :class:`~tensorlake_cloud.models.ApplicationList`, whether the server
        answers with ``{"applications": []}``, a bare ``[]`` or an empty body.

        Args:
            namespace: Namespace to list.
            limit: Optional page size; must be positive when given.
            cursor: Opaque cursor from a previous page.
            direction: ``forward`` or ``backward``.
            timeout: Per-call timeout override in seconds.

        Raises:
            InvalidUsageError: On an empty namespace or non-positive limit.
        """
        path = applications_path(namespace)
        params = cursor_params(limit, cursor, direction)

        raw = await self._transport.send("GET", path, params=params, timeout=timeout)
        raise_for_status(raw)

        data = decode_json(raw)
        if data is None:
            data = []
        if isinstance(data, list):
            data = {"applications": data}
        page = validate_value(raw, data, ApplicationList)
        return page.model_copy(
            update={"applications": [_in_namespace(a, namespace) for a in page.applications]}
        )

    def iter_application_pages(
        self,
        namespace: str,
        limit: Optional[int] = None,
        direction: Optional[Union[CursorDirection, str]] = None,
        cursor: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CursorPager[ApplicationList]:
        """Return a :class:`~tensorlake_cloud.pagination.CursorPager` over application pages.

        Arguments are validated immediately; no request is sent until the
        pager is iterated.
        """
        require_segment("namespace", namespace)
        cursor_params(limit, cursor, direction)

        async def fetch(page_cursor: Optional[str]) -> ApplicationList:
            return await self.list_applications(
                namespace, limit=limit, cursor=page_cursor, direction=direction, timeout=timeout
            )

        return CursorPager(fetch, cursor=cursor)

    async def get_application(
        self,
        namespace: str,
        app_name: str,
        timeout: Optional[float] = None,
    ) -> Application:
        """Fetch one application.

        A missing application raises
        :class:`~tensorlake_cloud.exceptions.ApiResponseError` with status 404.
        """
        path = application_path(namespace, app_name)
        raw = await self._transport.send("GET", path, timeout=timeout)
        raise_for_status(raw)
        return _in_namespace(decode_model(raw, Application), namespace)

    async def create_or_update_application(
        self,
        namespace: str,
        app_name: str,
        definition: Union[Application, dict[str, Any]],
        code: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> Application:
        """Create *app_name* or replace its definition.

        The definition is sent as the ``application`` part of a multipart
        form; *code* (a zip archive) is sent as the ``code`` part when given.
        Sending the same definition twice leaves the application in the same
        state.

        Args:
            namespace: Target namespace.
            app_name: Application name; must match ``definition.name`` when
                the definition carries one.
            definition: An :class:`~tensorlake_cloud.models.Application` or a
                dict with the same fields.
            code: Optional zipped application code.
            timeout: Per-call timeout override in seconds.

        Returns:
            The application as stored: the server's echo when it returns one,
            otherwise the submitted definition stamped with *namespace*.

        Raises:
            InvalidUsageError: On a malformed definition or name mismatch.
            SerializationError: If the definition cannot be JSON-encoded.
        """
        path = applications_path(namespace)
        require_segment("application", app_name)

        if isinstance(definition, dict):
            definition = {"name": app_name, **definition}
            try:
                definition = Application.model_validate(definition)
            except ValidationError as exc:
                raise InvalidUsageError(f"Invalid application definition: {exc}") from exc
        if definition.name != app_name:
            raise InvalidUsageError(
                f"Definition name {definition.name!r} does not match application {app_name!r}"
            )

        submitted = definition.model_copy(update={"namespace": namespace})
        try:
            manifest = submitted.to_manifest()
        except PydanticSerializationError as exc:
            raise SerializationError(
                f"Application definition is not JSON serialisable: {exc}", cause=exc
            ) from exc

        files: dict[str, Any] = {
            "application": (None, encode_json(manifest), "application/json"),
        }
        if code is not None:
            files["code"] = ("code.zip", code, "application/zip")

        raw = await self._transport.send("POST", path, files=files, timeout=timeout)
        raise_for_status(raw)

        data = decode_json(raw)
        if data is None:
            return submitted
        return _in_namespace(validate_value(raw, data, Application), namespace)

    async def delete_application(
        self,
        namespace: str,
        app_name: str,
        timeout: Optional[float] = None,
    ) -> None:
        """Delete an application.

        Deleting an application that does not exist is not silently
        ignored: the server's status is raised as
        :class:`~tensorlake_cloud.exceptions.ApiResponseError`.
        """
        path = application_path(namespace, app_name)
        raw = await self._transport.send("DELETE", path, timeout=timeout)
        raise_for_status(raw)

    async def invoke_application(
        self,
        namespace: str,
        app_name: str,
        payload: Any = None,
        timeout: Optional[float] = None,
    ) -> InvocationAck:
        """Invoke an application with an arbitrary JSON payload.

        The payload is not validated beyond being JSON-encodable; whatever
        shape the server accepts is accepted here. When *payload* is
        ``None`` the request carries no body.

        Returns:
            The acknowledgment, with ``request_id`` when the server returns one.

        Raises:
            SerializationError: If *payload* cannot be JSON-encoded.
        """
        path = application_path(namespace, app_name)
        content = encode_json(payload) if payload is not None else None

        raw = await self._transport.send("POST", path, content=content, timeout=timeout)
        raise_for_status(raw)

        data = decode_json(raw)
        if data is None:
            return InvocationAck()
        return validate_value(raw, data, InvocationAck)
