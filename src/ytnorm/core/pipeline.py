"""Core pipeline — the download → transcode → extract → cleanup state machine.

One transition table, keyed by :class:`~ytnorm.core.models.OutputKind`,
decides which stages a run visits.  The pipeline:

* validates the request and plans every artifact path up front,
* creates the output directory before any tool is launched,
* runs stages strictly in order through a :class:`StageExecutor`,
* checks that each produced file exists before anything consumes it,
* deletes intermediates only after every producing stage succeeded.

The first failure aborts the run with
:class:`~ytnorm.exceptions.PipelineAbortedError`.  Files already on disk
are left in place for inspection.

Guarantees
----------
* No subprocess, no ``print()``; filesystem access goes through the
  injected :class:`~ytnorm.core.protocols.FileSystem`.
* Holds no state between runs, so one instance may serve many requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from ytnorm.core import path_planner
from ytnorm.core.lifecycle import ArtifactLifecycleManager
from ytnorm.core.models import (
    ArtifactKind,
    ArtifactPlan,
    EventType,
    FailureKind,
    Operation,
    OutputKind,
    PipelineEvent,
    PipelineResult,
    PipelineState,
    Request,
    Stage,
)
from ytnorm.core.protocols import FileSystem, NullObserver, PipelineObserver
from ytnorm.core.stage_executor import StageExecutor
from ytnorm.exceptions import (
    CleanupError,
    ConfigurationError,
    MissingArtifactError,
    PipelineAbortedError,
    YtnormError,
    append_ytdlp_upgrade_suggestion,
)

logger = logging.getLogger(__name__)


TRANSITIONS: dict[OutputKind, tuple[Stage, ...]] = {
    OutputKind.VIDEO: (
        Stage.PLANNING,
        Stage.DOWNLOADING,
        Stage.TRANSCODING,
        Stage.CLEANUP,
    ),
    OutputKind.AUDIO: (
        Stage.PLANNING,
        Stage.DOWNLOADING,
        Stage.CLEANUP,
    ),
    OutputKind.VIDEO_WITH_AUDIO: (
        Stage.PLANNING,
        Stage.DOWNLOADING,
        Stage.TRANSCODING,
        Stage.EXTRACTING,
        Stage.CLEANUP,
    ),
}


@dataclass(frozen=True, slots=True)
class _Step:
    operation: Operation
    output: ArtifactKind
    input: ArtifactKind | None = None


def _step_for(stage: Stage, output_kind: OutputKind) -> _Step:
    if stage is Stage.DOWNLOADING:
        if output_kind.needs_video:
            return _Step(Operation.DOWNLOAD_VIDEO, ArtifactKind.RAW_VIDEO)
        return _Step(Operation.DOWNLOAD_AUDIO, ArtifactKind.AUDIO)
    if stage is Stage.TRANSCODING:
        return _Step(
            Operation.NORMALIZE_VIDEO,
            ArtifactKind.NORMALIZED_VIDEO,
            ArtifactKind.RAW_VIDEO,
        )
    if stage is Stage.EXTRACTING:
        return _Step(
            Operation.EXTRACT_AUDIO,
            ArtifactKind.AUDIO,
            ArtifactKind.NORMALIZED_VIDEO,
        )
    raise ValueError(f"{stage.value} does not run an external operation")


class Pipeline:
    """Drives one request through its planned stages.

    Parameters
    ----------
    executor:
        Runs each external operation.
    filesystem:
        Used for directory creation, existence checks and deletion.
    observer:
        Receives a :class:`PipelineEvent` for every transition.
    """

    def __init__(
        self,
        executor: StageExecutor,
        filesystem: FileSystem,
        observer: PipelineObserver | None = None,
    ) -> None:
        self._executor: StageExecutor = executor
        self._fs: FileSystem = filesystem
        self._observer: PipelineObserver = observer or NullObserver()

    @staticmethod
    def stages_for(output_kind: OutputKind) -> tuple[Stage, ...]:
        return TRANSITIONS[output_kind]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, request: Request) -> PipelineResult:
        """Execute *request* to completion.

        Raises
        ------
        PipelineAbortedError
            At the first failing stage, carrying the stage, the
            :class:`FailureKind` and the underlying cause.
        """
        state = PipelineState(self.stages_for(request.output_kind))
        plan = self._plan(state, request)

        lifecycle = ArtifactLifecycleManager(plan, self._fs)
        while state.has_next:
            stage = state.advance()
            self._emit(EventType.STAGE_STARTED, stage)
            if stage is Stage.CLEANUP:
                self._cleanup(state, lifecycle)
            else:
                self._run_step(state, request, plan, stage)
            self._emit(EventType.STAGE_SUCCEEDED, stage)

        state.complete()
        artifacts = tuple(a.path for a in plan.finals)
        logger.debug("Pipeline completed: %s", [str(p) for p in artifacts])
        self._emit(EventType.PIPELINE_COMPLETED, detail=", ".join(map(str, artifacts)))
        return PipelineResult(
            request=request,
            plan=plan,
            status=state.status,
            artifacts=artifacts,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _plan(self, state: PipelineState, request: Request) -> ArtifactPlan:
        self._emit(EventType.STAGE_STARTED, Stage.PLANNING)
        try:
            request.validate()
            plan = path_planner.plan(
                request.base_name,
                request.output_directory,
                request.output_kind,
            )
            self._fs.make_dirs(plan.output_directory)
        except ConfigurationError as exc:
            self._abort(state, FailureKind.CONFIGURATION, str(exc), cause=exc)
        self._emit(EventType.STAGE_SUCCEEDED, Stage.PLANNING, plan.output_directory)
        return plan

    def _run_step(
        self,
        state: PipelineState,
        request: Request,
        plan: ArtifactPlan,
        stage: Stage,
    ) -> None:
        step = _step_for(stage, request.output_kind)
        output = plan.get(step.output).path
        input_path = plan.get(step.input).path if step.input is not None else None

        outcome = self._executor.run(
            step.operation,
            output,
            input_path=input_path,
            url=request.source_url if input_path is None else None,
        )
        if outcome.failure_kind is not None:
            self._abort(state, outcome.failure_kind, outcome.detail, cause=outcome.cause)

        # A zero exit status is not proof that the file was written.
        if not self._fs.exists(output):
            hint = "The tool exited successfully but did not write the expected file."
            if stage is Stage.DOWNLOADING:
                hint = append_ytdlp_upgrade_suggestion(hint)
            missing = MissingArtifactError(output, hint=hint)
            self._abort(state, FailureKind.MISSING_ARTIFACT, str(missing), cause=missing)

    def _cleanup(self, state: PipelineState, lifecycle: ArtifactLifecycleManager) -> None:
        for artifact in lifecycle.pending:
            try:
                removed = lifecycle.mark_consumed(artifact)
            except CleanupError as exc:
                self._abort(state, FailureKind.CLEANUP, str(exc), cause=exc)
            if removed:
                self._emit(EventType.ARTIFACT_REMOVED, Stage.CLEANUP, artifact.path)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _abort(
        self,
        state: PipelineState,
        kind: FailureKind,
        detail: str,
        *,
        cause: Exception | None = None,
    ) -> NoReturn:
        stage = state.current
        state.abort(kind, detail)
        logger.debug("Stage %s failed (%s): %s", stage.value, kind.value, detail)
        self._emit(EventType.STAGE_FAILED, stage, detail=detail)
        self._emit(EventType.PIPELINE_ABORTED, stage, detail=kind.value)
        hint = cause.hint if isinstance(cause, YtnormError) else None
        raise PipelineAbortedError(stage, kind, detail, hint=hint) from cause

    def _emit(
        self,
        event_type: EventType,
        stage: Stage | None = None,
        path: Path | None = None,
        *,
        detail: str = "",
    ) -> None:
        self._observer.notify(
            PipelineEvent(type=event_type, stage=stage, path=path, detail=detail),
        )
