"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
import yaml

from core.policy_runtime import configure_logging, load_effective_config
from executor.command_runner import CommandRunner
from executor.errors import CommandPanic, RunCmdError

logger = logging.getLogger("runcmd.cli")

SPAWN_FAILURE_EXIT = 127


def _config(config_path: Path | None) -> dict[str, Any]:
    try:
        config = load_effective_config(config_path)
        configure_logging(config)
    except (ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    return config


def _exit_status(exitcode: int) -> int:
    """Map a child exit code to a shell-style status (signals become 128+N)."""
    if exitcode < 0:
        return 128 - exitcode
    return exitcode


def _echo_streams(stdout: str, stderr: str) -> None:
    if stdout:
        typer.echo(stdout)
    if stderr:
        typer.echo(stderr, err=True)


def run(
    command: str,
    verbose: bool = False,
    shell: bool = False,
    check: bool = False,
    as_json: bool = False,
    config_path: Path | None = None,
) -> None:
    """Run one command and exit with its exit status."""
    if check and as_json:
        typer.echo("--json cannot be combined with --check", err=True)
        raise typer.Exit(code=2)

    config = _config(config_path)
    try:
        runner = CommandRunner.from_config(command, config)
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    if verbose:
        runner = runner.with_verbose()
    if shell:
        runner = runner.with_shell()
    logger.debug("Prepared %r", runner)
    # The verbose trace already shows both streams.
    traced = runner.options.verbose

    if check:
        try:
            runner.run_or_panic()
        except CommandPanic as exc:
            if not traced:
                _echo_streams(exc.stdout, exc.stderr)
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        return

    try:
        result = runner.run()
    except RunCmdError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=SPAWN_FAILURE_EXIT) from exc

    if as_json:
        typer.echo(result.model_dump_json())
    elif not traced:
        _echo_streams(result.stdout, result.stderr)
    raise typer.Exit(code=_exit_status(result.exitcode))


def config_show(config_path: Path | None = None) -> None:
    """Show effective runtime config."""
    typer.echo(json.dumps(_config(config_path), indent=2))
