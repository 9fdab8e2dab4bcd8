"""Shared pytest fixtures and configuration for the ytnorm test suite.

Guidelines
----------
* No internet access in any test.
* No real subprocess — the :class:`StubRunner` stands in for yt-dlp and
  ffmpeg and writes (or deliberately does not write) output files.
* Filesystem scenarios run inside ``tmp_path``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from ytnorm.core.models import Operation, PipelineEvent
from ytnorm.core.pipeline import Pipeline
from ytnorm.core.stage_executor import StageExecutor
from ytnorm.infra.local_filesystem import LocalFileSystem


CREATE = "create"
"""Stub behaviour: exit 0 and write the output file."""

SKIP = "skip"
"""Stub behaviour: exit 0 without writing anything."""


def operation_of(argv: Sequence[str]) -> Operation:
    """Infer which operation an argv built by :class:`StageExecutor` runs."""
    if argv[0] == "yt-dlp":
        if "--extract-audio" in argv:
            return Operation.DOWNLOAD_AUDIO
        return Operation.DOWNLOAD_VIDEO
    if "-vn" in argv:
        return Operation.EXTRACT_AUDIO
    return Operation.NORMALIZE_VIDEO


def output_of(argv: Sequence[str]) -> Path:
    """Return the file a yt-dlp (``-o`` template) or ffmpeg (last arg) argv writes."""
    if argv[0] == "yt-dlp":
        return Path(argv[argv.index("-o") + 1].replace("%%", "%"))
    return Path(argv[-1])


class StubRunner:
    """Records every argv and simulates the tool per operation.

    ``behaviours`` maps an :class:`Operation` to :data:`CREATE`,
    :data:`SKIP`, or an exception instance to raise.  Unlisted
    operations default to :data:`CREATE`.
    """

    def __init__(self, behaviours: dict[Operation, object] | None = None) -> None:
        self.behaviours: dict[Operation, object] = dict(behaviours or {})
        self.calls: list[list[str]] = []

    @property
    def operations(self) -> list[Operation]:
        return [operation_of(argv) for argv in self.calls]

    def run(self, argv: Sequence[str]) -> None:
        argv = list(argv)
        self.calls.append(argv)
        operation = operation_of(argv)
        behaviour = self.behaviours.get(operation, CREATE)
        if isinstance(behaviour, BaseException):
            raise behaviour
        if behaviour == CREATE:
            if "-i" in argv:
                source = Path(argv[argv.index("-i") + 1])
                assert source.is_file(), f"stub ffmpeg input missing: {source}"
            output_of(argv).write_bytes(f"stub {operation.value}".encode())


class RecordingObserver:
    """Collects pipeline events for assertions."""

    def __init__(self) -> None:
        self.events: list[PipelineEvent] = []

    def notify(self, event: PipelineEvent) -> None:
        self.events.append(event)


@pytest.fixture()
def runner() -> StubRunner:
    return StubRunner()


@pytest.fixture()
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def pipeline(runner: StubRunner, observer: RecordingObserver) -> Pipeline:
    return Pipeline(StageExecutor(runner), LocalFileSystem(), observer)


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    """Output directory for a run; not created up front."""
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def _reset_ytnorm_logger() -> Iterator[None]:
    """Undo handler setup done by ``configure_logging`` in CLI tests."""
    yield
    logger = logging.getLogger("ytnorm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
