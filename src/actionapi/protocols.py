import asyncio

import structlog
from uvicorn.protocols.http.h11_impl import H11Protocol

log = structlog.get_logger()


class HeaderDeadlineProtocol(H11Protocol):
    """h11 protocol that closes connections whose request headers arrive too slowly.

    The header timer starts when the connection opens, and again on the first
    byte of each keep-alive request. It is cancelled once the request line and
    headers have been parsed; from there `DeadlineMiddleware` bounds the body.
    """

    def __init__(self, *args, read_timeout: float, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.read_timeout = read_timeout
        self._header_timer: asyncio.TimerHandle | None = None
        self._between_requests = False

    def connection_made(self, transport: asyncio.Transport) -> None:
        super().connection_made(transport)
        self._arm_header_timer()

    def connection_lost(self, exc: Exception | None) -> None:
        self._cancel_header_timer()
        super().connection_lost(exc)

    def data_received(self, data: bytes) -> None:
        if self._between_requests:
            self._between_requests = False
            # Pipelined requests may already be running from buffered data.
            if self.cycle is None or self.cycle.response_complete:
                self._arm_header_timer()

        previous_cycle = self.cycle
        super().data_received(data)
        if self.cycle is not previous_cycle:
            self._cancel_header_timer()

    def on_response_complete(self) -> None:
        super().on_response_complete()
        self._between_requests = True

    def _arm_header_timer(self) -> None:
        self._cancel_header_timer()
        self._header_timer = self.loop.call_later(self.read_timeout, self._header_timeout)

    def _cancel_header_timer(self) -> None:
        if self._header_timer is not None:
            self._header_timer.cancel()
            self._header_timer = None

    def _header_timeout(self) -> None:
        self._header_timer = None
        if not self.transport.is_closing():
            log.warning("read_timeout", stage="headers", timeout=self.read_timeout)
            self.transport.close()
