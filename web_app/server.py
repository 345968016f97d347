"""HTTP server lifecycle: start, signal handling and graceful shutdown.

The server moves through ``CREATED -> RUNNING -> DRAINING -> STOPPED``.
``start()`` binds the listening socket and hands back a one-shot future
that carries any fatal serving error. ``shutdown()`` stops accepting
connections and lets in-flight requests finish within the cooldown, after
which they are cancelled.

Usage:
    server = Server(app, ServerConfig(address=":8080"))
    await server.serve_until_signalled()
"""

import asyncio
import contextlib
import functools
import logging
import signal
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import uvicorn

from yaus.common.logging_config import get_logger

from .middleware.timeout import TimeoutMiddleware
from .protocols import ReadTimeoutH11Protocol

DEFAULT_ADDRESS = ":8080"
DEFAULT_WRITE_TIMEOUT = 15.0
DEFAULT_READ_TIMEOUT = 15.0
DEFAULT_IDLE_TIMEOUT = 60.0
DEFAULT_COOLDOWN = 5.0

# Seconds between checks while waiting for uvicorn to finish its startup
STARTUP_POLL_INTERVAL = 0.01
# Seconds granted to cancelled requests to unwind after the cooldown
FORCE_CLOSE_TIMEOUT = 1.0

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ServerError(Exception):
    """Generic base class for server lifecycle exceptions."""

    pass


class ServerStateError(ServerError):
    """Exception raised when an operation does not fit the current state."""

    pass


class ShutdownTimeoutError(ServerError):
    """Exception raised when requests were still running after the cooldown."""

    pass


class ServerState(str, Enum):
    """Lifecycle states of the server."""

    CREATED = "created"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


def split_address(address: str) -> Tuple[str, int]:
    """Split a host:port listen address.

    An empty host means all interfaces. IPv6 hosts are written in
    brackets, e.g. ``[::1]:8080``.

    Args:
        address: Address to split

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If address is malformed
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"Address {address!r} must be in host:port form")

    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in address {address!r}") from None

    if not 0 <= port_number <= 65535:
        raise ValueError(f"Port out of range in address {address!r}")

    host = host.strip("[]") or "0.0.0.0"
    return host, port_number


@dataclass(frozen=True)
class ServerConfig:
    """Immutable server configuration. Durations are in seconds."""

    address: str = DEFAULT_ADDRESS
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT
    cooldown: float = DEFAULT_COOLDOWN

    def __post_init__(self):
        split_address(self.address)
        for name in ("write_timeout", "read_timeout", "idle_timeout", "cooldown"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @property
    def host(self) -> str:
        return split_address(self.address)[0]

    @property
    def port(self) -> int:
        return split_address(self.address)[1]


class _UvicornServer(uvicorn.Server):
    """uvicorn server leaving signal handling to its owner."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class Server:
    """HTTP server supporting graceful shutdown."""

    def __init__(
        self,
        app,
        config: Optional[ServerConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize server.

        Args:
            app: ASGI application to serve
            config: Server configuration (defaults if not specified)
            logger: Optional logger instance
        """
        self.app = app
        self.config = config or ServerConfig()
        self.logger = logger or get_logger("server")

        self._state = ServerState.CREATED
        self._server: Optional[_UvicornServer] = None
        self._socket: Optional[socket.socket] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._errors: Optional[asyncio.Future] = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def port(self) -> Optional[int]:
        """Port the server is bound to, once started."""
        if self._socket is None or self._socket.fileno() == -1:
            return None
        return self._socket.getsockname()[1]

    async def start(self) -> asyncio.Future:
        """Bind the listen address and start serving.

        Returns:
            Future resolved with None when the server stops cleanly, or
            with the exception that stopped it

        Raises:
            ServerStateError: If the server was already started
            OSError: If the address cannot be bound
            ServerError: If the server fails during startup
        """
        if self._state is not ServerState.CREATED or self._serve_task is not None:
            raise ServerStateError(f"Cannot start server in state {self._state.value}")

        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        self._socket = socket.create_server((host, port), family=family)

        uvicorn_config = uvicorn.Config(
            TimeoutMiddleware(
                self.app,
                read_timeout=self.config.read_timeout,
                write_timeout=self.config.write_timeout,
                logger=self.logger,
            ),
            http=functools.partial(
                ReadTimeoutH11Protocol,
                read_timeout=self.config.read_timeout,
            ),
            timeout_keep_alive=self.config.idle_timeout,
            # Draining is bounded by shutdown() itself
            timeout_graceful_shutdown=None,
            lifespan="off",
            # Requests are logged by LoggingMiddleware, handlers by setup_logging
            access_log=False,
            log_config=None,
        )
        self._server = _UvicornServer(uvicorn_config)

        loop = asyncio.get_running_loop()
        self._errors = loop.create_future()
        self._serve_task = loop.create_task(self._serve())

        while not self._server.started and not self._serve_task.done():
            await asyncio.sleep(STARTUP_POLL_INTERVAL)

        if not self._server.started:
            cause = self._errors.exception() if self._errors.done() else None
            raise ServerError("Server failed to start") from cause

        self._state = ServerState.RUNNING
        self.logger.info(f"Server listening on {host}:{self.port}")
        return self._errors

    async def _serve(self) -> None:
        error: Optional[BaseException] = None
        try:
            await self._server.serve(sockets=[self._socket])
            if self._state is not ServerState.DRAINING:
                error = ServerError("Server stopped unexpectedly")
        except SystemExit as e:
            # uvicorn exits on fatal startup errors
            error = ServerError(f"Server exited with status {e.code}")
        except Exception as e:
            error = e
        finally:
            self._socket.close()
            self._state = ServerState.STOPPED

            if error is not None:
                self.logger.error(f"Server error: {error}")

            if not self._errors.done():
                if error is None:
                    self._errors.set_result(None)
                else:
                    self._errors.set_exception(error)

            self.logger.info("Server stopped")

    async def shutdown(self) -> None:
        """Stop accepting connections and drain in-flight requests.

        Requests still running once the cooldown elapses are cancelled.
        Calling shutdown again after the server stopped is a no-op.

        Raises:
            ShutdownTimeoutError: If requests had to be cancelled
        """
        if self._serve_task is None:
            self._state = ServerState.STOPPED
            return

        if self._serve_task.done():
            return

        if self._state is not ServerState.DRAINING:
            self.logger.info("Server is stopping...")
            self._state = ServerState.DRAINING
        self._server.should_exit = True

        try:
            await asyncio.wait_for(
                asyncio.shield(self._serve_task),
                timeout=self.config.cooldown,
            )
            return
        except asyncio.TimeoutError:
            pass

        pending = list(self._server.server_state.tasks)
        self.logger.error(
            f"Cooldown of {self.config.cooldown}s exceeded, "
            f"cancelling {len(pending)} in-flight request(s)"
        )

        self._server.force_exit = True
        for task in pending:
            task.cancel()

        done, _ = await asyncio.wait({self._serve_task}, timeout=FORCE_CLOSE_TIMEOUT)
        if not done:
            self._serve_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._serve_task

        raise ShutdownTimeoutError(
            f"{len(pending)} request(s) still running after "
            f"{self.config.cooldown}s cooldown"
        )

    async def serve_until_signalled(
        self,
        signals: Iterable[signal.Signals] = SHUTDOWN_SIGNALS,
    ) -> None:
        """Serve until a shutdown signal or a fatal server error, then drain.

        Args:
            signals: Signals that trigger a graceful shutdown

        Raises:
            ShutdownTimeoutError: If draining exceeded the cooldown
            Exception: The fatal error that stopped the server, if any
        """
        errors = await self.start()

        loop = asyncio.get_running_loop()
        stop = asyncio.Event()
        installed = self._install_signal_handlers(loop, signals, stop)
        stop_waiter = loop.create_task(stop.wait())

        try:
            # block until a signal or an error from the server is received
            await asyncio.wait({errors, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_waiter.cancel()
            self._remove_signal_handlers(loop, installed)

        error = errors.exception() if errors.done() else None

        await self.shutdown()

        if error is not None:
            raise error

    def _install_signal_handlers(
        self,
        loop: asyncio.AbstractEventLoop,
        signals: Iterable[signal.Signals],
        stop: asyncio.Event,
    ) -> List[signal.Signals]:
        def handle_signal(signum: int) -> None:
            name = signal.Signals(signum).name
            self.logger.info(f"Received signal {name}, initiating graceful shutdown...")
            stop.set()

        installed = []
        for sig in signals:
            try:
                loop.add_signal_handler(sig, handle_signal, sig)
            except NotImplementedError:
                # Event loops without add_signal_handler (Windows)
                signal.signal(
                    sig,
                    lambda signum, frame: loop.call_soon_threadsafe(handle_signal, signum),
                )
            installed.append(sig)
        return installed

    def _remove_signal_handlers(
        self,
        loop: asyncio.AbstractEventLoop,
        signals: Iterable[signal.Signals],
    ) -> None:
        for sig in signals:
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                signal.signal(sig, signal.SIG_DFL)
