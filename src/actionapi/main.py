import logging
import sys

import structlog
from fastapi import FastAPI

from actionapi.config import settings
from actionapi.middleware.request_log import register_request_logging
from actionapi.routes.actions import router as actions_router

shared_processors = [
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]

structlog.configure(
    processors=[*shared_processors, structlog.processors.JSONRenderer()],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
    logger_factory=structlog.PrintLoggerFactory(),
)


def json_log_handler() -> logging.Handler:
    """stdout handler rendering stdlib records (uvicorn's) as structlog JSON."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                *shared_processors,
                structlog.stdlib.add_logger_name,
                structlog.processors.format_exc_info,
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    return handler


root_logger = logging.getLogger()
root_logger.addHandler(json_log_handler())
root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))


def create_app() -> FastAPI:
    app = FastAPI(title="Action API", version="0.1.0")
    register_request_logging(app)
    app.include_router(actions_router)
    return app


app = create_app()
