"""Per-request read and write deadlines.

Both deadlines start once the request headers have been read (the header
phase is bounded by `actionapi.protocols.HeaderDeadlineProtocol`). The read
deadline caps how long the application waits on the request body, the write
deadline caps when the response may still be sent.
"""

import asyncio

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from actionapi.errors import WriteTimeoutError

log = structlog.get_logger()


class DeadlineMiddleware:
    def __init__(self, app: ASGIApp, read_timeout: float, write_timeout: float) -> None:
        self.app = app
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        loop = asyncio.get_running_loop()
        started = loop.time()
        read_deadline = started + self.read_timeout
        write_deadline = started + self.write_timeout
        path = scope.get("path", "")

        async def receive_with_deadline() -> Message:
            remaining = read_deadline - loop.time()
            try:
                return await asyncio.wait_for(receive(), timeout=max(remaining, 0))
            except asyncio.TimeoutError:
                log.warning("read_timeout", path=path, timeout=self.read_timeout)
                return {"type": "http.disconnect"}

        async def send_with_deadline(message: Message) -> None:
            remaining = write_deadline - loop.time()
            if remaining <= 0:
                raise WriteTimeoutError(path, self.write_timeout)
            try:
                await asyncio.wait_for(send(message), timeout=remaining)
            except asyncio.TimeoutError:
                raise WriteTimeoutError(path, self.write_timeout)

        await self.app(scope, receive_with_deadline, send_with_deadline)
