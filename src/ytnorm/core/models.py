"""Domain models for ytnorm.

Value objects are **frozen** dataclasses and plain enums — immutable,
free of I/O and of external packages.  The single mutable object here
is :class:`PipelineState`, the forward-only cursor owned by one
pipeline run.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ytnorm.exceptions import ConfigurationError, PipelineStateError


DEFAULT_BASE_NAME: str = "video"
DEFAULT_OUTPUT_DIRECTORY: str = "Processed"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class OutputKind(Enum):
    """Which deliverables a run produces."""

    VIDEO = "video"
    AUDIO = "audio"
    VIDEO_WITH_AUDIO = "both"

    @classmethod
    def from_cli(cls, value: str) -> OutputKind:
        """Parse a CLI spelling (``video``/``mp4``, ``audio``/``mp3``, ``both``)."""
        normalized = value.strip().lower()
        aliases = {"mp4": cls.VIDEO, "mp3": cls.AUDIO}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ConfigurationError(
                f"Unknown output format: {value}",
                hint="Choose one of: video (mp4), audio (mp3), both.",
            ) from None

    @property
    def needs_video(self) -> bool:
        return self is not OutputKind.AUDIO


class ArtifactRole(Enum):
    """Whether an artifact survives a successful run."""

    INTERMEDIATE = "intermediate"
    FINAL = "final"


class ArtifactKind(Enum):
    """What an artifact contains."""

    RAW_VIDEO = "raw_video"
    NORMALIZED_VIDEO = "normalized_video"
    AUDIO = "audio"


class Operation(Enum):
    """The four external operations a stage may invoke."""

    DOWNLOAD_VIDEO = "download_video"
    DOWNLOAD_AUDIO = "download_audio"
    NORMALIZE_VIDEO = "normalize_video"
    EXTRACT_AUDIO = "extract_audio"


class FailureKind(Enum):
    """Error taxonomy carried by failed outcomes and aborted runs."""

    CONFIGURATION = "configuration"
    LAUNCH = "launch"
    EXECUTION = "execution"
    MISSING_ARTIFACT = "missing_artifact"
    CLEANUP = "cleanup"


class Stage(Enum):
    """Non-terminal pipeline states, in the order they may be visited."""

    PLANNING = "planning"
    DOWNLOADING = "downloading"
    TRANSCODING = "transcoding"
    EXTRACTING = "extracting"
    CLEANUP = "cleanup"


class PipelineStatus(Enum):
    """Every state a :class:`PipelineState` can report."""

    PLANNING = "planning"
    DOWNLOADING = "downloading"
    TRANSCODING = "transcoding"
    EXTRACTING = "extracting"
    CLEANUP = "cleanup"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @classmethod
    def for_stage(cls, stage: Stage) -> PipelineStatus:
        return cls(stage.value)

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStatus.COMPLETED, PipelineStatus.ABORTED)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Request:
    """One immutable download-and-normalize request."""

    source_url: str
    """URL of the online video."""

    base_name: str = DEFAULT_BASE_NAME
    """File stem shared by every artifact of the run."""

    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    """Directory that receives every artifact of the run."""

    output_kind: OutputKind = OutputKind.VIDEO
    """Which deliverables to produce."""

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the request is unusable."""
        if not self.source_url.strip():
            raise ConfigurationError("Source URL must not be empty.")
        validate_base_name(self.base_name)


def validate_base_name(base_name: str) -> None:
    """Reject base names that are empty or could escape the output directory."""
    if not base_name.strip():
        raise ConfigurationError("Output name must not be empty.")
    if base_name in (".", ".."):
        raise ConfigurationError(f"Invalid output name: {base_name!r}")
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in base_name for sep in separators):
        raise ConfigurationError(
            f"Output name must not contain path separators: {base_name!r}",
            hint="Use --output-dir to choose the directory.",
        )


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ArtifactPath:
    """A planned file together with its content kind and lifecycle role."""

    path: Path
    kind: ArtifactKind
    role: ArtifactRole

    @property
    def is_intermediate(self) -> bool:
        return self.role is ArtifactRole.INTERMEDIATE


@dataclass(frozen=True, slots=True)
class ArtifactPlan:
    """Ordered, immutable set of artifacts a run may produce or consume."""

    output_directory: Path
    artifacts: tuple[ArtifactPath, ...]

    def __len__(self) -> int:
        return len(self.artifacts)

    def __iter__(self) -> Iterator[ArtifactPath]:
        return iter(self.artifacts)

    def __contains__(self, item: object) -> bool:
        return item in self.artifacts

    def get(self, kind: ArtifactKind) -> ArtifactPath:
        """Return the artifact of *kind*.

        Raises
        ------
        KeyError
            If the plan holds no artifact of that kind.
        """
        for artifact in self.artifacts:
            if artifact.kind is kind:
                return artifact
        raise KeyError(kind)

    @property
    def intermediates(self) -> tuple[ArtifactPath, ...]:
        return tuple(a for a in self.artifacts if a.role is ArtifactRole.INTERMEDIATE)

    @property
    def finals(self) -> tuple[ArtifactPath, ...]:
        return tuple(a for a in self.artifacts if a.role is ArtifactRole.FINAL)


# ---------------------------------------------------------------------------
# Stage outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StageOutcome:
    """Tagged result of one stage: success, or failure with kind and detail."""

    failure_kind: FailureKind | None = None
    detail: str = ""
    cause: Exception | None = field(default=None, compare=False)
    """Typed error behind a failure, kept for exception chaining."""

    @classmethod
    def success(cls) -> StageOutcome:
        return cls()

    @classmethod
    def failure(
        cls,
        kind: FailureKind,
        detail: str,
        *,
        cause: Exception | None = None,
    ) -> StageOutcome:
        return cls(failure_kind=kind, detail=detail, cause=cause)

    @property
    def ok(self) -> bool:
        return self.failure_kind is None


# ---------------------------------------------------------------------------
# Pipeline state
# ---------------------------------------------------------------------------

class PipelineState:
    """Forward-only cursor over the stages planned for one run.

    The cursor starts on the first stage, moves with :meth:`advance`,
    and ends in exactly one terminal status.  Nothing is ever revisited.
    """

    def __init__(self, stages: tuple[Stage, ...]) -> None:
        if not stages:
            raise PipelineStateError("A pipeline needs at least one stage.")
        self._stages: tuple[Stage, ...] = stages
        self._index: int = 0
        self._status: PipelineStatus = PipelineStatus.for_stage(stages[0])
        self.failed_stage: Stage | None = None
        self.failure_kind: FailureKind | None = None
        self.reason: str = ""

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def current(self) -> Stage:
        return self._stages[self._index]

    @property
    def has_next(self) -> bool:
        return self._index + 1 < len(self._stages)

    def advance(self) -> Stage:
        """Move to the next planned stage and return it."""
        self._ensure_active()
        if not self.has_next:
            raise PipelineStateError(
                f"No stage follows {self.current.value}.",
            )
        self._index += 1
        self._status = PipelineStatus.for_stage(self.current)
        return self.current

    def complete(self) -> None:
        """Enter COMPLETED; legal only on the last planned stage."""
        self._ensure_active()
        if self.has_next:
            raise PipelineStateError(
                f"Cannot complete while {self._stages[self._index + 1].value} is pending.",
            )
        self._status = PipelineStatus.COMPLETED

    def abort(self, kind: FailureKind, reason: str) -> None:
        """Enter ABORTED, recording the current stage as the failed one."""
        self._ensure_active()
        self.failed_stage = self.current
        self.failure_kind = kind
        self.reason = reason
        self._status = PipelineStatus.ABORTED

    def _ensure_active(self) -> None:
        if self._status.is_terminal:
            raise PipelineStateError(
                f"Pipeline already {self._status.value}.",
            )


# ---------------------------------------------------------------------------
# Events and results
# ---------------------------------------------------------------------------

class EventType(Enum):
    """Kinds of progress events a pipeline reports to its observer."""

    STAGE_STARTED = "stage_started"
    STAGE_SUCCEEDED = "stage_succeeded"
    STAGE_FAILED = "stage_failed"
    ARTIFACT_REMOVED = "artifact_removed"
    PIPELINE_COMPLETED = "pipeline_completed"
    PIPELINE_ABORTED = "pipeline_aborted"


@dataclass(frozen=True, slots=True)
class PipelineEvent:
    """A single stage transition, as seen by an observer."""

    type: EventType
    stage: Stage | None = None
    path: Path | None = None
    detail: str = ""


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Summary of a COMPLETED run."""

    request: Request
    plan: ArtifactPlan
    status: PipelineStatus
    artifacts: tuple[Path, ...] = field(default_factory=tuple)
    """Final files produced by the run, in plan order."""
