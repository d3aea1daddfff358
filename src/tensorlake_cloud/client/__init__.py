"""HTTP plumbing for tensorlake_cloud.

:class:`Transport` executes one authenticated request against the API and
returns a :class:`RawResponse`; the codec helpers in
:mod:`tensorlake_cloud.client.response` turn request values into bytes and
responses into typed models or classified errors.

Resource operations compose the two::

    raw = await transport.send("GET", path, params=params)
    raise_for_status(raw)
    page = decode_model(raw, RequestPage)
"""

from tensorlake_cloud.client.response import (
    decode_error_payload,
    decode_json,
    decode_model,
    encode_json,
    raise_for_status,
)
from tensorlake_cloud.client.transport import RawResponse, Transport

__all__ = [
    "RawResponse",
    "Transport",
    "decode_error_payload",
    "decode_json",
    "decode_model",
    "encode_json",
    "raise_for_status",
]
