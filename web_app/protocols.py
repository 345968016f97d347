"""HTTP protocol with a deadline on receiving request headers."""

import asyncio
from typing import Optional

import h11
from uvicorn.protocols.http.h11_impl import H11Protocol

from yaus.common.logging_config import get_logger

logger = get_logger("web")


class ReadTimeoutH11Protocol(H11Protocol):
    """h11 protocol closing connections whose request headers stall.

    The deadline starts when the connection opens, or when the first bytes
    of a later request arrive on a kept-alive connection, and ends once the
    request headers are parsed. The body is bounded by TimeoutMiddleware.
    """

    def __init__(self, *args, read_timeout: float, **kwargs):
        super().__init__(*args, **kwargs)
        self.read_timeout = read_timeout
        self.read_timeout_task: Optional[asyncio.TimerHandle] = None

    def connection_made(self, transport: asyncio.Transport) -> None:
        super().connection_made(transport)
        self._arm_read_timeout()

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self._disarm_read_timeout()
        super().connection_lost(exc)

    def data_received(self, data: bytes) -> None:
        if self.read_timeout_task is None and self.conn.their_state is h11.IDLE:
            self._arm_read_timeout()

        super().data_received(data)

        if self.conn.their_state is not h11.IDLE:
            self._disarm_read_timeout()

    def _arm_read_timeout(self) -> None:
        self._disarm_read_timeout()
        self.read_timeout_task = self.loop.call_later(
            self.read_timeout, self.read_timeout_handler
        )

    def _disarm_read_timeout(self) -> None:
        if self.read_timeout_task is not None:
            self.read_timeout_task.cancel()
            self.read_timeout_task = None

    def read_timeout_handler(self) -> None:
        self.read_timeout_task = None
        if self.transport.is_closing():
            return

        client = "%s:%d" % self.client if self.client else "unknown"
        logger.warning(f"Read timeout after {self.read_timeout}s waiting for request headers from {client}")

        self.conn.send(h11.ConnectionClosed())
        self.transport.close()
