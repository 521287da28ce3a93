import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from shared.utils import log_msg
from shared.utils.logsink import ColorFormatter


def test_strings_default_to_info_and_errors_to_error(caplog):
    with caplog.at_level(logging.DEBUG, logger="minor_server"):
        log_msg("started")
        log_msg(ValueError("bad value"))
        log_msg("careful", "warn")
        log_msg("plain", "log")
    levels = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert levels == [
        (logging.INFO, "started"),
        (logging.ERROR, "bad value"),
        (logging.WARNING, "careful"),
        (logging.INFO, "plain"),
    ]


def test_log_stack_attaches_traceback(caplog):
    try:
        raise KeyError("missing")
    except KeyError as exc:
        error = exc
    with caplog.at_level(logging.ERROR, logger="minor_server"):
        log_msg(error, log_stack=True)
        log_msg(error)
    with_stack, without_stack = caplog.records
    assert with_stack.exc_info is not None
    assert without_stack.exc_info is None


def test_formatter_colours_by_level():
    record = logging.LogRecord("minor_server", logging.ERROR, __file__, 1, "boom", None, None)
    line = ColorFormatter().format(record)
    assert "\x1b[31mboom\x1b[0m" in line
    assert line.startswith("[")


@pytest.mark.asyncio
async def test_message_is_mirrored_to_connection():
    connection = MagicMock()
    connection.send = AsyncMock()
    log_msg("hello peer", connection=connection)
    await asyncio.sleep(0)
    connection.send.assert_awaited_once()
    (line,) = connection.send.await_args.args
    assert line.endswith("] hello peer")


def test_mirroring_without_loop_is_skipped():
    connection = MagicMock()
    log_msg("no loop here", connection=connection)
    connection.send.assert_not_called()
