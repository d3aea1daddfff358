"""Codec -- maps Python values to request bytes and response bytes to models.

This module bridges the transport layer and the resource operations:

* :func:`encode_json` turns a request value (model, dict, list, scalar)
  into JSON bytes, raising
  :class:`~tensorlake_cloud.exceptions.SerializationError` when that is
  impossible.
* :func:`decode_json` / :func:`decode_model` turn a 2xx body into a JSON
  value or a typed model, raising
  :class:`~tensorlake_cloud.exceptions.DeserializationError` on malformed
  or mis-shaped bodies.
* :func:`decode_error_payload` turns a non-2xx body into an
  :class:`~tensorlake_cloud.models.ApiErrorPayload`. It tries JSON first
  and falls back to the raw text; it never raises.
* :func:`raise_for_status` is the single place where a non-2xx response
  becomes an :class:`~tensorlake_cloud.exceptions.ApiResponseError`.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from tensorlake_cloud.client.transport import RawResponse
from tensorlake_cloud.exceptions import (
    ApiResponseError,
    DeserializationError,
    SerializationError,
)
from tensorlake_cloud.models import ApiErrorPayload
from tensorlake_cloud.output import get_output

T = TypeVar("T")


def encode_json(value: Any) -> bytes:
    """Serialise *value* to UTF-8 JSON bytes.

    Pydantic models are dumped in JSON mode first. ``NaN`` and infinities
    are rejected because they are not valid JSON.

    Raises:
        SerializationError: If the value cannot be represented as JSON.
    """
    try:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        return json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise SerializationError(f"Request body is not JSON serialisable: {exc}", cause=exc) from exc


def body_text(content: bytes) -> str:
    """Decode a response body as UTF-8, replacing undecodable bytes."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        get_output().warning("Response body is not valid UTF-8; decoding lossily")
        return content.decode("utf-8", errors="replace")


def decode_json(raw: RawResponse) -> Any:
    """Parse a successful response body as JSON.

    An empty body decodes to ``None``. Nesting too deep for the parser is
    reported like any other malformed body.

    Raises:
        DeserializationError: If the body is not valid JSON.
    """
    if not raw.content.strip():
        return None
    try:
        return json.loads(raw.content)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise DeserializationError(
            f"Invalid JSON in HTTP {raw.status_code} response: {exc}",
            cause=exc,
            status=raw.status_code,
            body=body_text(raw.content),
        ) from exc


def decode_model(raw: RawResponse, model: type[T]) -> T:
    """Parse a successful response body into *model*.

    Args:
        raw: The 2xx response.
        model: A pydantic model class or any type :class:`~pydantic.TypeAdapter`
            accepts.

    Raises:
        DeserializationError: If the body is not JSON or does not validate.
    """
    return validate_value(raw, decode_json(raw), model)


def validate_value(raw: RawResponse, data: Any, model: type[T]) -> T:
    """Validate already-parsed JSON *data* from *raw* against *model*.

    Raises:
        DeserializationError: If *data* does not match the expected shape.
    """
    try:
        return TypeAdapter(model).validate_python(data)
    except ValidationError as exc:
        name = getattr(model, "__name__", str(model))
        raise DeserializationError(
            f"HTTP {raw.status_code} response does not match {name}: "
            f"{exc.error_count()} validation error(s)",
            cause=exc,
            status=raw.status_code,
            body=body_text(raw.content),
        ) from exc


def decode_error_payload(raw: RawResponse) -> ApiErrorPayload:
    """Build the error payload of a non-2xx response. Never raises.

    The body is parsed as JSON when possible; otherwise the raw text (decoded
    lossily if it is not UTF-8) is used as the body.
    """
    text = body_text(raw.content)
    body: Any = text
    if text.strip():
        try:
            body = json.loads(text)
        except (ValueError, RecursionError):
            body = text
    return ApiErrorPayload(status=raw.status_code, body=body, text=text)


def raise_for_status(raw: RawResponse) -> None:
    """Raise :class:`ApiResponseError` unless *raw* has a 2xx status."""
    if raw.is_success:
        return
    raise ApiResponseError(raw.status_code, decode_error_payload(raw))
