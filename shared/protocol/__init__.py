"""
Shared protocol package that centralizes constants, errors, payload framing,
inbound message models, content-type classification and validation helpers.
"""

from .constants import ENCODING, INDEX_FILE, UPGRADE_PATH
from .content_types import classify
from .errors import ApiError, AssetCacheError, ConfigError, ErrorCode, ProtocolError, StatusCode
from .framing import decode_payload, encode_payload
from .messages import InboundMessage, MessageKind, RawMessage, StructuredMessage, parse_inbound
from .validator import load_schema, validate_config

__all__ = [
    "ENCODING",
    "INDEX_FILE",
    "UPGRADE_PATH",
    "classify",
    "ApiError",
    "AssetCacheError",
    "ConfigError",
    "ErrorCode",
    "ProtocolError",
    "StatusCode",
    "decode_payload",
    "encode_payload",
    "InboundMessage",
    "MessageKind",
    "RawMessage",
    "StructuredMessage",
    "parse_inbound",
    "load_schema",
    "validate_config",
]
