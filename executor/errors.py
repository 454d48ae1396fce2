"""Error types raised by the command runner."""

from __future__ import annotations


class RunCmdError(Exception):
    """Base class for recoverable command execution failures."""

    def __init__(self, cmd: str, message: str) -> None:
        self.cmd = cmd
        super().__init__(f"{message}: {cmd!r}")


class SpawnError(RunCmdError):
    """The program, or the shell, could not be started."""


class CaptureError(RunCmdError):
    """Waiting for the child or collecting its output failed."""


class CommandPanic(RuntimeError):
    """
    Raised by ``run_or_panic`` when a command errored or exited non-zero.

    Not a ``RunCmdError``: callers handling recoverable failures do not
    catch it by accident.

    Attributes:
        cmd: The command text
        exitcode: Child exit code, or None when the run itself failed
        stdout: Captured standard output of the failed child (empty if none)
        stderr: Captured standard error of the failed child (empty if none)
    """

    def __init__(
        self,
        cmd: str,
        exitcode: int | None,
        reason: str,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.cmd = cmd
        self.exitcode = exitcode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command {cmd!r} failed: {reason}")
