from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from server.core.connection import Connection

logger = logging.getLogger(__name__)


class HeartbeatMonitor:
    """Pings one connection every ``interval`` seconds and reaps it when a pong is missed."""

    def __init__(self, connection: "Connection", interval: float) -> None:
        self.connection = connection
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None and self.connection.is_alive:
            self._task = asyncio.create_task(self._run(), name=f"heartbeat-{self.connection.id}")

    def cancel(self) -> None:
        """Stop the timer. Safe to call repeatedly and from within the timer itself."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        while self.connection.is_alive:
            await asyncio.sleep(self.interval)
            await self.tick()

    async def tick(self) -> None:
        connection = self.connection
        if not connection.is_alive:
            return
        if not connection.arm_ping():
            logger.info("Connection %s missed a heartbeat; terminating", connection.id)
            connection.terminate()
            return
        try:
            # a peer that stops reading stalls the write; that counts as a failed ping
            async with asyncio.timeout(self.interval):
                pong_waiter = await connection.websocket.ping()
        except TimeoutError:
            connection.terminate(TimeoutError(f"Heartbeat ping to {connection.id} not sent within {self.interval}s"))
            return
        except Exception as exc:
            connection.terminate(exc)
            return
        pong_waiter.add_done_callback(self._on_pong)

    def _on_pong(self, pong_waiter: asyncio.Future) -> None:
        # exception() also marks a close-time failure as retrieved
        if pong_waiter.cancelled() or pong_waiter.exception() is not None:
            return
        self.connection.mark_alive()


__all__ = ["HeartbeatMonitor"]
