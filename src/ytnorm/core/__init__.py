"""Core / service layer — pipeline orchestration and pure planning.

Rules
-----
* No ``print()`` calls.
* No subprocesses; filesystem access only through injected protocols.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed.
"""

from ytnorm.core.lifecycle import ArtifactLifecycleManager
from ytnorm.core.models import (
    ArtifactKind,
    ArtifactPath,
    ArtifactPlan,
    ArtifactRole,
    FailureKind,
    Operation,
    OutputKind,
    PipelineResult,
    Request,
    Stage,
    StageOutcome,
)
from ytnorm.core.path_planner import plan
from ytnorm.core.pipeline import Pipeline
from ytnorm.core.protocols import CommandRunner, FileSystem, PipelineObserver
from ytnorm.core.stage_executor import StageExecutor

__all__: list[str] = [
    "ArtifactKind",
    "ArtifactLifecycleManager",
    "ArtifactPath",
    "ArtifactPlan",
    "ArtifactRole",
    "CommandRunner",
    "FailureKind",
    "FileSystem",
    "Operation",
    "OutputKind",
    "Pipeline",
    "PipelineObserver",
    "PipelineResult",
    "Request",
    "Stage",
    "StageExecutor",
    "StageOutcome",
    "plan",
]
