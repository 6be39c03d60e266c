from __future__ import annotations

import argparse
from typing import Any

import httpx
import pytest
from rich.console import Console

from megaverse.cli import build_parser, main
from megaverse.cli import app as app_module
from megaverse.cli import commands as commands_module
from megaverse.cli.commands import format_reconcile_summary, run_command
from megaverse.contracts.config import MegaverseConfig
from megaverse.contracts.exceptions import (
    ConfigError,
    EmptyGridError,
    InvalidGeometryError,
    OutOfBoundsError,
    TerminalRemoteError,
    UnknownTypeError,
)
from megaverse.contracts.results import Failure, ReconcileResult
from megaverse.sdk import Megaverse
from tests.fakes.api import FakeMegaverseApi


def _args(command: str, **kwargs: Any) -> argparse.Namespace:
    return argparse.Namespace(command=command, config="megaverse.json", verbose=True, **kwargs)


@pytest.fixture
def wired(api: FakeMegaverseApi, monkeypatch: pytest.MonkeyPatch) -> FakeMegaverseApi:
    """Route every ``Megaverse`` built by the CLI through the fake API."""

    def factory(config: MegaverseConfig, *, progress: Any = None) -> Megaverse:
        return Megaverse(config, progress=progress, http_client=api.http_client())

    monkeypatch.setattr(commands_module, "Megaverse", factory)
    return api


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def test_build_parser_requires_subcommand() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args([])

    assert exc.value.code == 2


def test_build_parser_defaults() -> None:
    args = build_parser().parse_args(["clear"])

    assert args.command == "clear"
    assert args.config == "./megaverse.json"
    assert args.verbose is False


def test_build_parser_create_cometh_lowercases_direction() -> None:
    args = build_parser().parse_args(["--config", "m.json", "-v", "create", "cometh", "1", "2", "UP"])

    assert (args.command, args.kind, args.row, args.column, args.direction) == ("create", "cometh", 1, 2, "up")
    assert args.config == "m.json"
    assert args.verbose is True


def test_build_parser_create_soloon_rejects_unknown_color() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["create", "soloon", "1", "2", "green"])

    assert exc.value.code == 2


def test_build_parser_delete_requires_integers() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["delete", "one", "2"])


@pytest.mark.parametrize(("argv", "start"), [(["xshape"], 0), (["xshape", "2"], 2)])
def test_build_parser_xshape_start(argv: list[str], start: int) -> None:
    assert build_parser().parse_args(argv).start == start


def test_build_parser_version_prints_and_exits(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])

    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("megaverse ")


# ---------------------------------------------------------------------------
# Summary formatting
# ---------------------------------------------------------------------------


def test_format_summary_for_clean_clear() -> None:
    summary = format_reconcile_summary("clear", ReconcileResult(deleted=1))

    assert "megaverse - clear complete" in summary
    assert "Deleted:   1 object\n" in summary
    assert "Created" not in summary


def test_format_summary_lists_failures_in_position_order() -> None:
    result = ReconcileResult(
        deleted=2,
        created=3,
        failures=[Failure(row=4, column=0, error="late"), Failure(row=1, column=2, error="early")],
    )

    summary = format_reconcile_summary("replicate", result)

    assert "replicate completed with failures" in summary
    assert "Created:   3 objects" in summary
    assert "Failed:    2" in summary
    assert summary.index("(1, 2)  early") < summary.index("(4, 0)  late")


def test_format_summary_reports_scan_error() -> None:
    summary = format_reconcile_summary("clear", ReconcileResult(scan_error="boom"))

    assert "Scan:      failed (boom)" in summary


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_run_command_create_cometh(wired: FakeMegaverseApi, config: MegaverseConfig) -> None:
    args = _args("create", kind="cometh", row=0, column=0, direction="down")

    assert await run_command(args, config, Console(quiet=True))

    [request] = wired.calls("POST", "/comeths")
    assert request.body is not None and request.body["direction"] == "down"


@pytest.mark.asyncio
async def test_run_command_create_out_of_bounds_returns_false(
    wired: FakeMegaverseApi, config: MegaverseConfig
) -> None:
    args = _args("create", kind="soloon", row=9, column=0, color="red")

    assert not await run_command(args, config, Console(quiet=True))
    assert wired.calls("POST") == []


@pytest.mark.asyncio
async def test_run_command_replicate_prints_summary(
    wired: FakeMegaverseApi, config: MegaverseConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    assert await run_command(_args("replicate"), config, Console(quiet=True))

    out = capsys.readouterr().out
    assert "megaverse - replicate complete" in out
    assert "Created:   4 objects" in out


@pytest.mark.asyncio
async def test_run_command_clear_with_progress_display(
    wired: FakeMegaverseApi, config: MegaverseConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    args = _args("clear")
    args.verbose = False

    assert await run_command(args, config, Console(quiet=True))
    assert len(wired.calls("DELETE")) == 4


@pytest.mark.asyncio
async def test_run_command_clear_partial_failure_returns_false(
    wired: FakeMegaverseApi, config: MegaverseConfig
) -> None:
    wired.script("DELETE", "/polyanets", 400)

    assert not await run_command(_args("clear"), config, Console(quiet=True))


@pytest.mark.asyncio
async def test_run_command_xshape(
    wired: FakeMegaverseApi, config: MegaverseConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    assert await run_command(_args("xshape", start=0), config, Console(quiet=True))

    assert "Created:   5 polyanets" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# main exit codes
# ---------------------------------------------------------------------------


@pytest.fixture
def stub_config(monkeypatch: pytest.MonkeyPatch, config: MegaverseConfig) -> None:
    monkeypatch.setattr(app_module, "load_config", lambda path: config)


def _stub_run(monkeypatch: pytest.MonkeyPatch, *, outcome: bool | BaseException) -> None:
    async def fake_run_command(args: argparse.Namespace, config: MegaverseConfig, console: Console) -> bool:
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    monkeypatch.setattr(app_module, "run_command", fake_run_command)


@pytest.mark.usefixtures("stub_config")
@pytest.mark.parametrize(
    ("outcome", "code"),
    [
        (True, 0),
        (False, 5),
        (EmptyGridError("Invalid goal response: Empty grid received"), 3),
        (UnknownTypeError("Unknown astral object: X"), 3),
        (TerminalRemoteError("Client error: HTTP 400", status_code=400), 4),
        (OutOfBoundsError(9, 9, rows=3, cols=3), 5),
        (InvalidGeometryError("not square"), 5),
        (RuntimeError("unexpected"), 1),
    ],
)
def test_main_maps_outcomes_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    outcome: bool | BaseException,
    code: int,
) -> None:
    _stub_run(monkeypatch, outcome=outcome)

    assert main(["clear"]) == code
    if isinstance(outcome, BaseException):
        assert f"error: {outcome}" in capsys.readouterr().err


def test_main_config_error_exits_3(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def failing_load(path: str) -> MegaverseConfig:
        raise ConfigError(f"failed reading config file: {path}")

    monkeypatch.setattr(app_module, "load_config", failing_load)

    assert main(["--config", "nope.json", "replicate"]) == 3
    assert "failed reading config file: nope.json" in capsys.readouterr().err


@pytest.mark.usefixtures("stub_config")
def test_main_passes_parsed_args(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, argparse.Namespace] = {}

    async def fake_run_command(args: argparse.Namespace, config: MegaverseConfig, console: Console) -> bool:
        seen["args"] = args
        return True

    monkeypatch.setattr(app_module, "run_command", fake_run_command)

    assert main(["delete", "2", "1"]) == 0
    assert (seen["args"].command, seen["args"].row, seen["args"].column) == ("delete", 2, 1)


@pytest.mark.usefixtures("stub_config")
def test_main_non_string_goal_cell_exits_3(wired: FakeMegaverseApi) -> None:
    wired.goal = {"goal": [["SPACE", None]]}

    assert main(["-v", "clear"]) == 3


@pytest.mark.usefixtures("stub_config")
def test_main_request_error_on_create_exits_4(wired: FakeMegaverseApi) -> None:
    wired.script("POST", "/polyanets", httpx.TooManyRedirects("redirect loop"))

    assert main(["-v", "create", "polyanet", "0", "0"]) == 4
