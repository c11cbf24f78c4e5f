from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request, Response

log = structlog.get_logger()


def _remote_addr(request: Request) -> str:
    if request.client is None:
        return ""
    return f"{request.client.host}:{request.client.port}"


def register_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_request(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        log.info("request", remote_addr=_remote_addr(request), method=request.method, url=url)
        return await call_next(request)
