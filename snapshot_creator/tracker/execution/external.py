"""Collaborators that run outside the process.

Two interfaces are consumed by the tracker:

- ``Publisher``: run the project's publish action in a directory and return
  its captured output.
- ``RevisionProvider``: return the source-control revision of a directory.

Both raise ``ExternalActionError`` on failure, carrying whatever output the
subprocess produced.  No timeout is imposed: a running publish blocks the
caller until it exits or the process is killed.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger


class ExternalActionError(RuntimeError):
    """A publish action or revision lookup failed."""

    def __init__(
        self,
        message: str,
        *,
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


@runtime_checkable
class Publisher(Protocol):
    def publish(self, project_dir: str | Path) -> str:
        """Publish the project in ``project_dir``; return captured output."""
        ...


@runtime_checkable
class RevisionProvider(Protocol):
    def current_revision(self, project_dir: str | Path) -> str:
        """Return the full revision identifier of ``project_dir``."""
        ...


def _run(args: Sequence[str], cwd: str | Path) -> subprocess.CompletedProcess[str]:
    logger.debug("Running {} in {}", shlex.join(args), cwd)
    try:
        result = subprocess.run(
            list(args),
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise ExternalActionError(f"Cannot run {args[0]!r}: {exc}") from exc
    if result.returncode != 0:
        raise ExternalActionError(
            f"{shlex.join(args)} exited with status {result.returncode}",
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )
    return result


class CommandPublisher:
    """Publish by running a command (``npm publish`` by default)."""

    def __init__(self, command: str | Sequence[str] = "npm publish") -> None:
        self.args = shlex.split(command) if isinstance(command, str) else list(command)
        if not self.args:
            raise ValueError("Publish command must not be empty")

    def publish(self, project_dir: str | Path) -> str:
        return _run(self.args, project_dir).stdout


class GitRevisionProvider:
    """Read the current commit with ``git rev-parse HEAD``."""

    def current_revision(self, project_dir: str | Path) -> str:
        try:
            result = _run(["git", "rev-parse", "HEAD"], project_dir)
        except ExternalActionError as exc:
            raise ExternalActionError(
                f"Cannot read the git revision of {project_dir}; is it a git repository?",
                stdout=exc.stdout,
                stderr=exc.stderr,
                returncode=exc.returncode,
            ) from exc
        revision = result.stdout.strip()
        if not revision:
            raise ExternalActionError(f"git rev-parse HEAD returned nothing in {project_dir}")
        return revision
