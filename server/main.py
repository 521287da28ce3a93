from __future__ import annotations

import asyncio
import sys
from typing import Any, Mapping, Optional

from server.config import load_server_config
from server.core import AppServer, Connection, MessageHandler
from shared.protocol import AssetCacheError, ConfigError, InboundMessage
from shared.utils import configure_logging, log_msg


async def echo_handler(message: InboundMessage, connection: Connection) -> None:
    """Default handler: echo every message back to its sender."""
    await connection.send(f"Server received the following message: {message.raw}")


async def start_server(
    config: Optional[Mapping[str, Any]] = None,
    on_message: Optional[MessageHandler] = None,
) -> AppServer:
    """Resolve configuration, build the server and bind it. Returns the running server."""
    server_config = load_server_config(config)
    configure_logging(server_config.log_level)
    server = AppServer(server_config, on_message)
    await server.start()
    return server


async def run_server(config: Optional[Mapping[str, Any]] = None, on_message: Optional[MessageHandler] = None) -> None:
    server = await start_server(config, on_message or echo_handler)
    try:
        await server.serve_forever()
    finally:
        await server.stop()


def main() -> int:
    configure_logging()
    log_msg("Starting server")
    try:
        asyncio.run(run_server())
    except (ConfigError, AssetCacheError, OSError) as exc:
        log_msg(exc, "error", log_stack=True)
        return 1
    except KeyboardInterrupt:
        log_msg("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
