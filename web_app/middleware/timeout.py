"""Read and write timeouts for every request."""

import asyncio
import logging
from typing import List, Optional

from fastapi import status
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from yaus.common.logging_config import get_logger


class TimeoutMiddleware:
    """ASGI middleware bounding request reads and request handling.

    The request body is read in full within ``read_timeout`` before the
    application runs; a client that stalls gets a 408. ``write_timeout``
    bounds the application as a whole, response included; if it elapses
    before the response started the client gets a 503, otherwise the
    connection is aborted.
    """

    def __init__(
        self,
        app: ASGIApp,
        read_timeout: float,
        write_timeout: float,
        logger: Optional[logging.Logger] = None,
    ):
        self.app = app
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.logger = logger or get_logger("web")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_line = f"{scope['method']} {scope['path']}"

        try:
            buffered = await asyncio.wait_for(
                self._read_body(receive),
                timeout=self.read_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.warning(f"Read timeout after {self.read_timeout}s: {request_line}")
            await self._send_error(
                scope, receive, send,
                status.HTTP_408_REQUEST_TIMEOUT,
                "Timed out reading request",
            )
            return

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, replay, send_tracking),
                timeout=self.write_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.error(f"Write timeout after {self.write_timeout}s: {request_line}")
            if response_started:
                raise
            await self._send_error(
                scope, receive, send,
                status.HTTP_503_SERVICE_UNAVAILABLE,
                "Timed out handling request",
            )

    @staticmethod
    async def _read_body(receive: Receive) -> List[Message]:
        messages = []
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request" or not message.get("more_body", False):
                return messages

    @staticmethod
    async def _send_error(
        scope: Scope,
        receive: Receive,
        send: Send,
        status_code: int,
        detail: str,
    ) -> None:
        response = JSONResponse(
            {"error": "Request timed out", "detail": detail},
            status_code=status_code,
            headers={"Connection": "close"},
        )
        await response(scope, receive, send)
