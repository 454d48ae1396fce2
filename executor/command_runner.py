"""Synchronous command execution with captured output."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, ConfigDict

from executor.errors import CaptureError, CommandPanic, RunCmdError, SpawnError

logger = logging.getLogger("runcmd.runner")


class RunResult(BaseModel):
    """Captured outcome of a single command execution."""

    model_config = ConfigDict(frozen=True)

    cmd: str
    stdout: str
    stderr: str
    exitcode: int

    @property
    def succeeded(self) -> bool:
        return self.exitcode == 0


@dataclass(frozen=True)
class ExecutionOptions:
    """Per-runner execution flags."""

    verbose: bool = False
    shell: bool = False
    shell_executable: str | None = None


def split_command(text: str) -> list[str]:
    """Split command text on whitespace. Quotes and escapes are not understood."""
    return text.split()


def _flag(section: dict[str, Any], key: str) -> bool:
    value = section.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"runner.{key} must be true or false, got {value!r}")
    return value


def _decode(cmd: str, raw: bytes, stream: str) -> str:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CaptureError(cmd, f"{stream} is not valid UTF-8") from exc
    return text.rstrip()


class CommandRunner:
    """
    Runs one command text, directly or through the shell.

    Direct mode splits the text with ``split_command`` and executes the first
    token with the rest as arguments. Shell mode hands the text verbatim to
    the platform shell. Configuration methods return new runners and never
    touch the process table.
    """

    def __init__(self, cmd: str, options: ExecutionOptions | None = None) -> None:
        self._cmd = cmd
        self._options = options or ExecutionOptions()

    @classmethod
    def from_config(cls, cmd: str, config: dict[str, Any]) -> CommandRunner:
        """Build a runner from the ``runner`` section of an effective config."""
        runner_cfg = config.get("runner", {}) or {}
        shell_executable = runner_cfg.get("shell_executable")
        if shell_executable is not None and not isinstance(shell_executable, str):
            raise ValueError(f"runner.shell_executable must be a string, got {shell_executable!r}")
        options = ExecutionOptions(
            verbose=_flag(runner_cfg, "verbose"),
            shell=_flag(runner_cfg, "shell"),
            shell_executable=shell_executable,
        )
        return cls(cmd, options)

    @property
    def cmd(self) -> str:
        return self._cmd

    @property
    def options(self) -> ExecutionOptions:
        return self._options

    def with_verbose(self) -> CommandRunner:
        """Return a runner that traces the command and its outcome to stdout."""
        return CommandRunner(self._cmd, replace(self._options, verbose=True))

    def with_shell(self) -> CommandRunner:
        """Return a runner that executes through the shell."""
        return CommandRunner(self._cmd, replace(self._options, shell=True))

    def run(self) -> RunResult:
        """
        Execute the command once and wait for it to exit.

        A non-zero exit code is reported in the result, not raised.

        Raises:
            SpawnError: The program or shell could not be started
            CaptureError: Output could not be collected or decoded
        """
        options = self._options
        if options.verbose:
            print(f"cmd: {self._cmd}", flush=True)

        proc = self._spawn(options)
        try:
            raw_out, raw_err = proc.communicate()
        except OSError as exc:
            proc.kill()
            proc.wait()
            raise CaptureError(self._cmd, f"failed to collect output ({exc})") from exc

        result = RunResult(
            cmd=self._cmd,
            stdout=_decode(self._cmd, raw_out, "stdout"),
            stderr=_decode(self._cmd, raw_err, "stderr"),
            exitcode=proc.returncode,
        )
        if result.exitcode < 0:
            logger.warning("Command %r terminated by signal %d", self._cmd, -result.exitcode)
        logger.debug("Command %r exited with %d", self._cmd, result.exitcode)

        if options.verbose:
            self._trace(result)
        return result

    def run_or_panic(self) -> None:
        """Run the command and raise CommandPanic unless it exits with 0."""
        try:
            result = self.run()
        except RunCmdError as exc:
            raise CommandPanic(self._cmd, None, str(exc)) from exc
        if not result.succeeded:
            raise CommandPanic(
                self._cmd,
                result.exitcode,
                f"exit code {result.exitcode}",
                stdout=result.stdout,
                stderr=result.stderr,
            )

    def _spawn(self, options: ExecutionOptions) -> subprocess.Popen[bytes]:
        args: str | list[str]
        if options.shell:
            args = self._cmd
        else:
            args = split_command(self._cmd)
            if not args:
                raise SpawnError(self._cmd, "empty command")
        logger.debug("Spawning (%s): %s", "shell" if options.shell else "direct", args)
        try:
            return subprocess.Popen(
                args,
                shell=options.shell,
                executable=options.shell_executable if options.shell else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            raise SpawnError(self._cmd, f"cannot start ({exc})") from exc

    @staticmethod
    def _trace(result: RunResult) -> None:
        print(f"stdout: {result.stdout}")
        print(f"stderr: {result.stderr}")
        print(f"exitcode: {result.exitcode}", flush=True)

    def __repr__(self) -> str:
        return f"CommandRunner({self._cmd!r}, {self._options!r})"
