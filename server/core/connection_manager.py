from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from server.workers.heartbeat import HeartbeatMonitor

from .connection import Connection

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Tracks open connections and arms a heartbeat for each one."""

    def __init__(self, ping_interval: float) -> None:
        self.ping_interval = ping_interval
        self._by_id: Dict[str, Connection] = {}

    def open(self, websocket: Any, peername: str = "") -> Connection:
        connection = Connection(websocket=websocket, peername=peername)
        self._by_id[connection.id] = connection
        connection.arm(HeartbeatMonitor(connection, self.ping_interval))
        logger.info("Connection %s opened from %s (%s open)", connection.id, peername, len(self._by_id))
        return connection

    def close(self, connection: Connection, error: Optional[BaseException] = None) -> None:
        connection.terminate(error)
        if self._by_id.pop(connection.id, None) is not None:
            logger.info("Connection %s closed (%s open)", connection.id, len(self._by_id))

    def close_all(self) -> None:
        for connection in list(self._by_id.values()):
            self.close(connection)

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._by_id.get(connection_id)

    def all(self) -> List[Connection]:
        return list(self._by_id.values())

    def __contains__(self, connection: object) -> bool:
        return isinstance(connection, Connection) and self._by_id.get(connection.id) is connection

    def __len__(self) -> int:
        return len(self._by_id)
