"""Subprocess execution with Result-based error handling.

Every external tool the release flow touches (``npm run build``,
``npm view``, ``npm publish``) goes through a :class:`CommandRunner`, so the
orchestrator can be exercised in tests with a recording fake instead of real
processes.

Usage:
    runner = SubprocessRunner()
    match runner.capture(["npm", "view", "pkg", "version"], cwd=root):
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from whotfix.core.result import Err, Ok, Result

__all__ = ["CommandRunner", "ProcessError", "SubprocessRunner", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it could not start).
        stdout: Standard output (empty when not captured).
        stderr: Standard error (empty when not captured).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        """Format error for display."""
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout or a ProcessError.

    Output is captured; use :func:`run_silent` for commands whose output
    should reach the terminal.
    """
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: Sequence[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with stdout/stderr inherited from this process.

    Nothing is captured: on failure only the exit code is reported, the
    tool's own diagnostics have already been shown to the user.
    """
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=env,
            check=False,
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout="",
                stderr="",
            )
        )

    return Ok(None)


class CommandRunner(Protocol):
    """Executes external commands on behalf of the release flow."""

    def capture(self, cmd: Sequence[str], *, cwd: Path) -> Result[str, ProcessError]:
        """Run ``cmd`` and return its captured stdout."""
        ...

    def stream(self, cmd: Sequence[str], *, cwd: Path) -> Result[None, ProcessError]:
        """Run ``cmd`` with output passed through to the terminal."""
        ...


class SubprocessRunner:
    """CommandRunner backed by real subprocesses."""

    def __init__(self, *, env: dict[str, str] | None = None) -> None:
        self._env = env

    def capture(self, cmd: Sequence[str], *, cwd: Path) -> Result[str, ProcessError]:
        return run(cmd, cwd=cwd, env=self._env)

    def stream(self, cmd: Sequence[str], *, cwd: Path) -> Result[None, ProcessError]:
        return run_silent(cmd, cwd=cwd, env=self._env)
