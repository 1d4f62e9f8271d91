# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point invoked by the editing tool's hook runner."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .config import HookConfig, load_config
from .exceptions import ConfigError, PayloadError
from .logging import configure_logging
from .models import HookResponse, Mode
from .orchestrator import Orchestrator
from .protocol import encode_error, parse_hook_input

LOGGER = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="Lint files touched by an agent and report problems as a hook response.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hooklint {__version__}")
        raise typer.Exit(code=0)


def _emit(response: HookResponse) -> None:
    typer.echo(response.to_json())


def _load_config(project_root: Path) -> HookConfig:
    try:
        return load_config(project_root)
    except ConfigError as exc:
        LOGGER.warning("%s; using defaults", exc)
        return HookConfig()


@app.command()
def run(
    lenient: Annotated[
        bool,
        typer.Option("--lenient", help="Suppress unused variable/import/parameter diagnostics."),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Always attach a status message to the response."),
    ] = False,
    collect: Annotated[
        bool,
        typer.Option("--collect", help="Only record the touched files for a later turn-end run."),
    ] = False,
    lint_collected: Annotated[
        bool,
        typer.Option("--lint-collected", help="Drain the recorded files and lint them now."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Read a hook payload on stdin and write the JSON response on stdout.

    The process exits with status 0 in every case; lint failures are
    reported through the response message only.
    """

    del version
    configure_logging(debug)
    cli_mode = Mode(lenient=lenient, debug=debug)
    try:
        event = parse_hook_input(sys.stdin.buffer.read(), collect=collect, lint_collected=lint_collected)
    except PayloadError as exc:
        LOGGER.warning("%s", exc)
        _emit(encode_error(str(exc), cli_mode))
        raise typer.Exit(code=0) from exc

    config = _load_config(event.cwd)
    mode = Mode(lenient=lenient or config.lenient, debug=debug or config.debug)
    if mode.debug and not debug:
        configure_logging(True)
    try:
        response = Orchestrator(config=config).handle(event, mode)
    except Exception as exc:  # noqa: BLE001 - the hook must always answer
        LOGGER.exception("hook invocation failed")
        response = encode_error(f"hook failed: {exc}", mode)
    _emit(response)
    raise typer.Exit(code=0)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main", "run"]
