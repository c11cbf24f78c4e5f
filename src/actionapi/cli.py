import argparse
import asyncio
import re

import structlog

from actionapi.config import settings
from actionapi.errors import InvalidDurationError
from actionapi.main import app
from actionapi.server import Harness

log = structlog.get_logger()

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_COMPONENT = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse a duration such as "15s", "1m30s" or "250ms" into seconds."""
    body = text
    sign = 1.0
    if body[:1] in ("-", "+"):
        if body[0] == "-":
            sign = -1.0
        body = body[1:]
    if body == "0":
        return 0.0
    if not body:
        raise InvalidDurationError(text)

    total = 0.0
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None:
            raise InvalidDurationError(text)
        total += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    return sign * total


def _duration_arg(text: str) -> float:
    try:
        return parse_duration(text)
    except InvalidDurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="actionapi", description="Action request API server")
    parser.add_argument(
        "-graceful-timeout",
        "--graceful-timeout",
        dest="graceful_timeout",
        type=_duration_arg,
        default=settings.graceful_timeout_seconds,
        metavar="DURATION",
        help=(
            "the duration for which the server gracefully waits for existing "
            "connections to finish - e.g. 15s or 1m"
        ),
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    harness = Harness(app, settings, grace=args.graceful_timeout)
    log.info("starting", env=settings.app_env, graceful_timeout=args.graceful_timeout)
    asyncio.run(harness.run())
    return 0
