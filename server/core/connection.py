from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Set

from websockets.exceptions import ConnectionClosed
from websockets.protocol import State

from shared.protocol import ProtocolError, encode_payload
from shared.utils import generate_connection_id, log_msg

if TYPE_CHECKING:
    from server.workers.heartbeat import HeartbeatMonitor

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    ALIVE = "alive"
    TERMINATED = "terminated"


class SendResult(Enum):
    SENT = "sent"
    NOT_READY = "not_ready"
    FAILED = "failed"


def is_closed_signal(error: BaseException) -> bool:
    """True for errors that only say the channel is already closed."""
    return isinstance(error, ConnectionClosed) or "closed" in str(error).lower()


@dataclass(eq=False)
class Connection:
    """
    One upgraded WebSocket channel and its liveness state.

    The connection owns its websocket and its heartbeat monitor. ``alive`` is
    cleared by each heartbeat ping and set again only by the peer's pong.
    Termination is one-way and releases the timer and the transport together.
    """

    websocket: Any
    peername: str = ""
    id: str = field(default_factory=lambda: generate_connection_id("ws"))
    alive: bool = True
    state: ConnectionState = ConnectionState.ALIVE
    heartbeat: Optional["HeartbeatMonitor"] = None
    opened_at: float = field(default_factory=time.time)
    last_pong: Optional[float] = None
    dispatches: Set[asyncio.Task] = field(default_factory=set, repr=False)

    @property
    def is_alive(self) -> bool:
        return self.state is ConnectionState.ALIVE

    def is_ready(self) -> bool:
        return self.is_alive and self.websocket.state is State.OPEN

    def arm(self, heartbeat: "HeartbeatMonitor") -> None:
        """Attach and start the heartbeat timer owned by this connection."""
        self.heartbeat = heartbeat
        heartbeat.start()

    def track(self, task: asyncio.Task) -> None:
        """Hold an in-flight dispatch until it finishes or the connection terminates."""
        self.dispatches.add(task)
        task.add_done_callback(self.dispatches.discard)

    def arm_ping(self) -> bool:
        """
        Start a heartbeat round.

        Returns False when the previous ping was never acknowledged; the
        caller must then terminate instead of probing again.
        """
        if not self.alive:
            return False
        self.alive = False
        return True

    def mark_alive(self) -> None:
        if not self.is_alive:
            return
        self.alive = True
        self.last_pong = time.time()

    def terminate(self, error: Optional[BaseException] = None) -> bool:
        """
        Move to TERMINATED, cancel the heartbeat timer and pending dispatches,
        and abort the transport.

        Returns False when the connection was already terminated, in which case
        nothing happens.
        """
        if self.state is ConnectionState.TERMINATED:
            return False
        self.state = ConnectionState.TERMINATED
        self.alive = False
        if error is not None and not is_closed_signal(error):
            log_msg(error, "error")
        if self.heartbeat is not None:
            self.heartbeat.cancel()
        if self.dispatches:
            current = asyncio.current_task()
            for task in list(self.dispatches):
                if task is not current:
                    task.cancel()
        self.websocket.transport.abort()
        logger.debug("Connection %s (%s) terminated", self.id, self.peername)
        return True

    async def send(self, payload: Any) -> SendResult:
        return await send(self, payload)


async def send(connection: Connection, payload: Any) -> SendResult:
    """
    Send ``payload`` on ``connection``.

    Strings go out verbatim, anything else as JSON text. Nothing is queued or
    retried and no error escapes; the outcome is returned instead.
    """
    if connection is None or not connection.is_ready():
        log_msg(f'Websocket not ready for message "{payload}"', "error")
        return SendResult.NOT_READY
    try:
        await connection.websocket.send(encode_payload(payload))
    except ProtocolError as exc:
        log_msg(exc, "error")
        return SendResult.FAILED
    except (ConnectionClosed, OSError) as exc:
        connection.terminate(exc)
        return SendResult.FAILED
    return SendResult.SENT


__all__ = ["Connection", "ConnectionState", "SendResult", "is_closed_signal", "send"]
