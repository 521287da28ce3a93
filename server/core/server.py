from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional, Union

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosedError

from server.config import ServerConfig
from server.storage import AssetCache
from shared.protocol import InboundMessage, parse_inbound
from shared.utils import log_msg

from .connection import Connection
from .connection_manager import ConnectionRegistry
from .router import StaticRequestHandler
from .transport import select_listener

logger = logging.getLogger(__name__)

MessageHandler = Callable[[InboundMessage, Connection], Union[Awaitable[None], None]]


class AppServer:
    """
    Static file server and WebSocket endpoint on one port.

    The asset cache and the listener strategy are settled in the constructor,
    so a bad static directory or certificate fails before anything is bound.
    """

    def __init__(self, config: ServerConfig, on_message: Optional[MessageHandler] = None) -> None:
        self.config = config
        self.on_message = on_message
        self.assets = AssetCache(config.static_dir)
        self.listener = select_listener(config)
        self.requests = StaticRequestHandler(self.assets)
        self.registry = ConnectionRegistry(config.ping_interval)
        self._server: Optional[Server] = None

    async def __aenter__(self) -> "AppServer":
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()

    @property
    def url(self) -> str:
        return f"{self.listener.scheme}://{self.config.server_address}:{self.config.server_port}"

    async def start(self) -> None:
        self._server = await serve(
            self._handle_connection,
            host=self.config.server_address,
            port=self.config.server_port,
            process_request=self.requests.process_request,
            # liveness is driven by the per-connection HeartbeatMonitor
            ping_interval=None,
            **self.listener.serve_options(),
        )
        log_msg(f"Server {self.config.server_name} is listening on port {self.config.server_port} ({self.url})")

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        await self._server.serve_forever()

    async def stop(self) -> None:
        self.registry.close_all()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        connection = self.registry.open(websocket, peername=str(websocket.remote_address))
        error: Optional[BaseException] = None
        try:
            async for payload in websocket:
                connection.track(asyncio.create_task(self.dispatch(connection, payload)))
            # frames read before a clean close are still handled
            if connection.dispatches:
                await asyncio.gather(*connection.dispatches, return_exceptions=True)
        except ConnectionClosedError as exc:
            error = exc
        except Exception:
            logger.exception("Unhandled error on connection %s", connection.id)
        finally:
            self.registry.close(connection, error)

    async def dispatch(self, connection: Connection, payload: Union[str, bytes]) -> None:
        """Tag ``payload`` and hand it to the message handler; handler failures are logged only."""
        if not connection.is_alive or self.on_message is None:
            return
        message = parse_inbound(payload)
        try:
            result = self.on_message(message, connection)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            log_msg(exc, "error", log_stack=True)


__all__ = ["AppServer", "MessageHandler"]
