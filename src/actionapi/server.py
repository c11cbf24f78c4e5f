import asyncio
import contextlib
import functools
import signal
import socket
from collections.abc import Iterator
from enum import Enum

import structlog
import uvicorn
from starlette.types import ASGIApp

from actionapi.config import LISTEN_HOST, LISTEN_PORT, Settings
from actionapi.middleware.deadlines import DeadlineMiddleware
from actionapi.protocols import HeaderDeadlineProtocol

log = structlog.get_logger()


class HarnessState(str, Enum):
    STARTING = "starting"
    SERVING = "serving"
    DRAINING = "draining"
    STOPPED = "stopped"


class _Server(uvicorn.Server):
    """uvicorn server that leaves process signal handling to the harness."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class Harness:
    """Runs the app until SIGINT, then drains in-flight requests for at most `grace` seconds.

    Only SIGINT is handled. SIGTERM and SIGQUIT keep their default disposition
    and end the process without draining.
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Settings,
        grace: float,
        host: str = LISTEN_HOST,
        port: int = LISTEN_PORT,
    ) -> None:
        self.host = host
        self.port = port
        self.grace = grace
        self.state = HarnessState.STARTING
        self._interrupted = asyncio.Event()
        self._serve_task: asyncio.Task[None] | None = None

        config = uvicorn.Config(
            DeadlineMiddleware(
                app,
                read_timeout=settings.read_timeout_seconds,
                write_timeout=settings.write_timeout_seconds,
            ),
            host=host,
            port=port,
            http=functools.partial(
                HeaderDeadlineProtocol, read_timeout=settings.read_timeout_seconds
            ),
            timeout_keep_alive=int(settings.idle_timeout_seconds),
            access_log=False,
            log_config=None,
        )
        self._server = _Server(config)

    def interrupt(self) -> None:
        log.info("interrupt_received")
        self._interrupted.set()

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGINT, self.interrupt)
        try:
            try:
                sock = self._bind()
            except OSError as e:
                log.error("serve_failed", error=str(e))
            else:
                self._serve_task = asyncio.create_task(self._serve(sock))
            self.state = HarnessState.SERVING

            await self._interrupted.wait()
            await self.shutdown()
        finally:
            loop.remove_signal_handler(signal.SIGINT)
        log.info("shutting down")

    async def wait_until_serving(self) -> None:
        while not self._server.started:
            if self.state is not HarnessState.STARTING and (
                self._serve_task is None or self._serve_task.done()
            ):
                return
            await asyncio.sleep(0.01)

    async def shutdown(self) -> None:
        self.state = HarnessState.DRAINING
        self._server.should_exit = True
        if self._serve_task is not None:
            try:
                await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=self.grace)
            except asyncio.TimeoutError:
                # Deadline passed with requests still running; drop them.
                log.debug("drain_timeout", grace=self.grace)
                self._force_close()
                await self._serve_task
        self.state = HarnessState.STOPPED

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        self.port = sock.getsockname()[1]
        return sock

    async def _serve(self, sock: socket.socket) -> None:
        log.info("listening", host=self.host, port=self.port)
        try:
            await self._server.serve(sockets=[sock])
        except Exception as e:
            log.error("serve_failed", error=str(e))

    def _force_close(self) -> None:
        self._server.force_exit = True
        state = self._server.server_state
        for task in list(state.tasks):
            task.cancel()
        for connection in list(state.connections):
            transport = getattr(connection, "transport", None)
            if transport is not None:
                transport.close()
