"""CLI entrypoint for runcmd."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Run a command and report its exit code and output")
config_app = typer.Typer(help="Configuration commands")

CONFIG_OPTION_HELP = "YAML config file (defaults to $RUNCMD_CONFIG)"


@app.command("run")
def run_cmd(
    command: str = typer.Argument(..., help="Command text, quoted as one argument"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace the command and its outcome"),
    shell: bool = typer.Option(False, "--shell", "-s", help="Run through the system shell"),
    check: bool = typer.Option(False, "--check", help="Fail unless the command exits with 0"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """Run COMMAND once."""
    commands.run(
        command=command,
        verbose=verbose,
        shell=shell,
        check=check,
        as_json=as_json,
        config_path=config,
    )


@config_app.command("show")
def config_show_cmd(
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """Show effective configuration."""
    commands.config_show(config_path=config)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
