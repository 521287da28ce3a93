from __future__ import annotations

import asyncio
from typing import List, Optional
from unittest.mock import MagicMock

import pytest
from websockets.protocol import State

from server.config import ENV_VARS, ServerConfig


class FakeWebSocket:
    """Stand-in for a websockets ServerConnection."""

    def __init__(
        self,
        messages: Optional[List] = None,
        ping_error: Optional[BaseException] = None,
        auto_pong: bool = False,
        hang_ping: bool = False,
    ) -> None:
        self.state = State.OPEN
        self.transport = MagicMock()
        self.remote_address = ("127.0.0.1", 50000)
        self.messages = list(messages or [])
        self.ping_error = ping_error
        self.auto_pong = auto_pong
        self.hang_ping = hang_ping
        self.ping_times: List[float] = []
        self.pings: List[asyncio.Future] = []
        self.sent: List[str] = []
        self.send_error: Optional[BaseException] = None

    async def ping(self) -> asyncio.Future:
        if self.ping_error is not None:
            raise self.ping_error
        loop = asyncio.get_running_loop()
        self.ping_times.append(loop.time())
        if self.hang_ping:
            # a peer that stopped reading leaves the write waiting on drain
            await loop.create_future()
        waiter = loop.create_future()
        if self.auto_pong:
            waiter.set_result(0.0)
        self.pings.append(waiter)
        return waiter

    async def send(self, message: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message


@pytest.fixture
def make_ws():
    return FakeWebSocket


@pytest.fixture
def fake_ws() -> FakeWebSocket:
    return FakeWebSocket()


@pytest.fixture
def static_dir(tmp_path):
    root = tmp_path / "static"
    root.mkdir()
    (root / "index.html").write_bytes(b"<html>home</html>")
    (root / "app.js").write_bytes(b"console.log('hi');")
    (root / "logo.PNG").write_bytes(b"\x89PNG\r\n\x1a\n")
    return root


@pytest.fixture
def server_config(static_dir) -> ServerConfig:
    return ServerConfig(server_address="127.0.0.1", ping_secs=10, static_dir=static_dir)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS.values():
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
