from __future__ import annotations

import json
from typing import Any, Union

from .constants import ENCODING
from .errors import ErrorCode, ProtocolError, StatusCode


def encode_payload(payload: Any) -> str:
    """Text payloads pass through verbatim; everything else becomes JSON text."""
    if isinstance(payload, str):
        return payload
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ProtocolError(StatusCode.BAD_REQUEST, ErrorCode.ENCODE_FAILED, f"Encode failed: {exc}") from exc


def decode_payload(data: Union[str, bytes]) -> Any:
    """Parse a frame as JSON. Raises ValueError when it is not valid JSON."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode(ENCODING)
    return json.loads(data)


__all__ = ["encode_payload", "decode_payload"]
