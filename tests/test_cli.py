import pytest

from actionapi import cli
from actionapi.errors import InvalidDurationError


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("15s", 15.0),
        ("1m", 60.0),
        ("1m30s", 90.0),
        ("1.5h", 5400.0),
        ("250ms", 0.25),
        ("10us", 0.00001),
        ("0", 0.0),
        ("-2s", -2.0),
        ("+3s", 3.0),
    ],
)
def test_parse_duration(text: str, seconds: float):
    assert cli.parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "15", "s", "1x", "1m 30s", "-", "1.2.3s"])
def test_parse_duration_rejects(text: str):
    with pytest.raises(InvalidDurationError):
        cli.parse_duration(text)


def test_default_graceful_timeout():
    args = cli.build_parser().parse_args([])
    assert args.graceful_timeout == 15


def test_single_dash_flag():
    args = cli.build_parser().parse_args(["-graceful-timeout", "1m"])
    assert args.graceful_timeout == 60


def test_flag_with_equals():
    args = cli.build_parser().parse_args(["-graceful-timeout=250ms"])
    assert args.graceful_timeout == pytest.approx(0.25)


def test_invalid_flag_value_exits_with_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        cli.build_parser().parse_args(["-graceful-timeout", "soon"])
    assert exc_info.value.code == 2


def test_main_runs_harness_and_exits_zero(monkeypatch: pytest.MonkeyPatch):
    from actionapi.server import Harness

    seen = {}

    async def fake_run(self: Harness) -> None:
        seen["grace"] = self.grace
        seen["address"] = (self.host, self.port)

    monkeypatch.setattr(Harness, "run", fake_run)

    assert cli.main(["-graceful-timeout", "2s"]) == 0
    assert seen == {"grace": 2.0, "address": ("0.0.0.0", 8000)}
