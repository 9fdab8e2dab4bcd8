"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ytnorm.core.models import PipelineEvent


class CommandRunner(Protocol):
    """Contract for running one external command to completion.

    Implementations block until the process exits and let it inherit
    the caller's stdout/stderr so the tool's own progress stays visible.
    """

    def run(self, argv: Sequence[str]) -> None:
        """Run *argv* and return normally on a zero exit status.

        Raises
        ------
        LaunchError
            When the process could not be started (tool missing or not
            executable).
        ExecutionError
            When the process ran and exited with a non-zero status.
        """
        ...  # pragma: no cover


class FileSystem(Protocol):
    """The filesystem operations the pipeline relies on."""

    def exists(self, path: Path) -> bool:
        """Return ``True`` when *path* is an existing regular file."""
        ...  # pragma: no cover

    def make_dirs(self, path: Path) -> None:
        """Create *path* and its parents; succeed if it already exists.

        Raises
        ------
        ConfigurationError
            When the directory cannot be created.
        """
        ...  # pragma: no cover

    def remove(self, path: Path) -> None:
        """Delete the file at *path*.

        Implementations let :class:`FileNotFoundError` and other
        :class:`OSError` subclasses propagate; the lifecycle manager maps
        them.
        """
        ...  # pragma: no cover


class PipelineObserver(Protocol):
    """Receives stage-transition events from a running pipeline."""

    def notify(self, event: PipelineEvent) -> None:
        ...  # pragma: no cover


class NullObserver:
    """Observer that ignores every event."""

    def notify(self, event: PipelineEvent) -> None:
        return None
