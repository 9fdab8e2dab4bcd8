"""Custom exception hierarchy for ytnorm.

All exceptions that cross layer boundaries must inherit from
:class:`YtnormError`.  Raw OS and ``subprocess`` exceptions must NEVER
propagate beyond the infrastructure layer — they must be caught and
re-raised as a typed subclass defined here.

Hierarchy
---------
YtnormError
├── ConfigurationError
├── StageError
│   ├── LaunchError
│   └── ExecutionError
├── MissingArtifactError
├── CleanupError
├── ArtifactRoleError
├── PipelineStateError
├── PipelineAbortedError
└── EnvironmentError
    └── ToolNotFoundError
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ytnorm.core.models import FailureKind, Stage


class YtnormError(Exception):
    """Base exception for all ytnorm errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Request shape ---------------------------------------------------------

class ConfigurationError(YtnormError):
    """Raised when a request is malformed (empty URL, unsafe base name)."""


# --- External tool invocation ---------------------------------------------

class StageError(YtnormError):
    """Common base for failures of a single external tool invocation."""

    def __init__(
        self,
        message: str,
        *,
        tool: str,
        exit_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.tool: str = tool
        self.exit_code: int | None = exit_code


class LaunchError(StageError):
    """Raised when the external process could not be started at all."""


class ExecutionError(StageError):
    """Raised when the external process ran and exited non-zero."""


# --- Artifacts -------------------------------------------------------------

class MissingArtifactError(YtnormError):
    """Raised when a stage reported success but its output file is absent."""

    def __init__(self, path: Path, *, hint: str | None = None) -> None:
        super().__init__(f"Expected file was not produced: {path}", hint=hint)
        self.path: Path = path


class CleanupError(YtnormError):
    """Raised when an intermediate artifact could not be deleted."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to delete {path}: {reason}")
        self.path: Path = path


class ArtifactRoleError(YtnormError):
    """Raised on an attempt to delete a final or unplanned artifact.

    Valid pipeline transitions never trigger this; seeing it means an
    internal invariant was broken.
    """


# --- Pipeline --------------------------------------------------------------

class PipelineStateError(YtnormError):
    """Raised on an illegal state-machine transition (internal invariant)."""


class PipelineAbortedError(YtnormError):
    """Raised when a pipeline run stops at its first failure.

    Carries the stage that failed and the failure kind so the CLI
    layer can render a precise message and pick an exit code.
    """

    def __init__(
        self,
        stage: Stage,
        kind: FailureKind,
        detail: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"Pipeline aborted during {stage.value} ({kind.value}): {detail}",
            hint=hint,
        )
        self.stage: Stage = stage
        self.kind: FailureKind = kind
        self.detail: str = detail


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(YtnormError):
    """Raised when a required runtime dependency is not available."""


class ToolNotFoundError(EnvironmentError):
    """Raised when an external tool cannot be located on the system PATH."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
