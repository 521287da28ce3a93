from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .framing import decode_payload


class MessageKind(StrEnum):
    """How an inbound frame was interpreted."""

    STRUCTURED = "structured"
    RAW = "raw"


class BaseInbound(BaseModel):
    """Base envelope shared by both interpretations of an inbound frame."""

    model_config = ConfigDict(frozen=True)

    @property
    def is_structured(self) -> bool:
        return self.kind == MessageKind.STRUCTURED


class StructuredMessage(BaseInbound):
    kind: Literal[MessageKind.STRUCTURED] = MessageKind.STRUCTURED
    value: Any = Field(..., description="Parsed JSON value")
    raw: Union[str, bytes] = Field(..., description="Frame as received")


class RawMessage(BaseInbound):
    kind: Literal[MessageKind.RAW] = MessageKind.RAW
    value: Union[str, bytes] = Field(..., description="Frame as received, unchanged")

    @property
    def raw(self) -> Union[str, bytes]:
        return self.value


InboundMessage = Annotated[Union[StructuredMessage, RawMessage], Field(discriminator="kind")]


def parse_inbound(data: Union[str, bytes]) -> InboundMessage:
    """Tag a frame as structured when it parses as JSON, raw otherwise."""
    try:
        value = decode_payload(data)
    except (ValueError, RecursionError):
        return RawMessage(value=data)
    return StructuredMessage(value=value, raw=data)


__all__ = [
    "MessageKind",
    "BaseInbound",
    "StructuredMessage",
    "RawMessage",
    "InboundMessage",
    "parse_inbound",
]
