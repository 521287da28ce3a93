"""
Log sink used by the server core.

``log_msg`` is the single call-out for reporting: it picks a level, optionally
logs the traceback and optionally mirrors the line to a peer connection.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Union

from .common import local_timestamp

logger = logging.getLogger("minor_server")

RESET = "\x1b[0m"
LEVEL_COLORS = {
    logging.CRITICAL: "\x1b[31m",
    logging.ERROR: "\x1b[31m",
    logging.WARNING: "\x1b[33m",
    logging.INFO: "\x1b[36m",
}

# Background sends scheduled by log_msg; held so they are not collected early
_pending: "set[asyncio.Task]" = set()


class ColorFormatter(logging.Formatter):
    """Prefix records with a local timestamp and colour the message by level."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno, "")
        message = record.getMessage()
        line = f"[{local_timestamp()}] {color}{message}{RESET if color else ''}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: Union[str, int] = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter())
    logging.basicConfig(level=level.upper() if isinstance(level, str) else level, handlers=[handler], force=True)


def _resolve_level(err_or_msg: Any, level: Optional[Union[str, int]]) -> int:
    if level is None:
        return logging.INFO if isinstance(err_or_msg, str) else logging.ERROR
    if isinstance(level, int):
        return level
    # "log" and unknown names fall back to INFO
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def log_msg(
    err_or_msg: Any,
    level: Optional[Union[str, int]] = None,
    log_stack: bool = False,
    connection: Any = None,
) -> None:
    """
    Report a message or an exception.

    Strings default to INFO and anything else (exceptions) to ERROR. With
    ``log_stack`` the traceback of an exception is logged too. When a
    ``connection`` is given the line is also sent to that peer; the send is
    scheduled on the running loop and never awaited here.
    """
    levelno = _resolve_level(err_or_msg, level)
    text = "" if err_or_msg is None else str(err_or_msg)
    exc_info = None
    if log_stack and isinstance(err_or_msg, BaseException):
        exc_info = (type(err_or_msg), err_or_msg, err_or_msg.__traceback__)
    logger.log(levelno, text, exc_info=exc_info)
    if connection is not None:
        _mirror(connection, f"[{local_timestamp()}] {text}")


def _mirror(connection: Any, line: str) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running loop; log line not mirrored to %r", connection)
        return
    task = loop.create_task(connection.send(line))
    _pending.add(task)
    task.add_done_callback(_pending.discard)


__all__ = ["ColorFormatter", "configure_logging", "log_msg"]
