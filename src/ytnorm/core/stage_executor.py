"""Core stage executor — one external operation per call.

The executor turns an :class:`~ytnorm.core.models.Operation` plus
concrete paths into a fixed argv and delegates execution to a
:class:`~ytnorm.core.protocols.CommandRunner` injected at construction
time.  It knows nothing about stage ordering.

Guarantees
----------
* Argument templates are constants — format selectors, codecs and
  quality settings are not configurable at runtime.
* Never raises for tool failures: every typed runner error becomes a
  failed :class:`~ytnorm.core.models.StageOutcome`.
* No retries.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ytnorm.core.models import FailureKind, Operation, StageOutcome
from ytnorm.core.protocols import CommandRunner
from ytnorm.exceptions import ExecutionError, LaunchError

logger = logging.getLogger(__name__)


VIDEO_FORMAT_SELECTOR: str = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]/best"
AUDIO_FORMAT: str = "mp3"
AUDIO_BITRATE: str = "192K"
EXTRACT_AUDIO_QUALITY: str = "2"

_URL_OPERATIONS = frozenset({Operation.DOWNLOAD_VIDEO, Operation.DOWNLOAD_AUDIO})
_INPUT_OPERATIONS = frozenset({Operation.NORMALIZE_VIDEO, Operation.EXTRACT_AUDIO})


def ytdlp_literal_template(path: Path) -> str:
    """Return *path* as a yt-dlp ``-o`` template that expands to itself.

    yt-dlp reads ``-o`` as a ``%``-style output template, so every ``%``
    is doubled.
    """
    return str(path).replace("%", "%%")


class StageExecutor:
    """Runs a single download or transcode operation.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    ytdlp_command:
        argv prefix that launches yt-dlp (e.g. ``("yt-dlp",)`` or
        ``(sys.executable, "-m", "yt_dlp")``).
    ffmpeg_command:
        argv prefix that launches ffmpeg.
    """

    def __init__(
        self,
        runner: CommandRunner,
        *,
        ytdlp_command: Sequence[str] = ("yt-dlp",),
        ffmpeg_command: Sequence[str] = ("ffmpeg",),
    ) -> None:
        self._runner: CommandRunner = runner
        self._ytdlp: tuple[str, ...] = tuple(ytdlp_command)
        self._ffmpeg: tuple[str, ...] = tuple(ffmpeg_command)

    # ------------------------------------------------------------------
    # Command construction (pure)
    # ------------------------------------------------------------------

    def build_command(
        self,
        operation: Operation,
        output_path: Path,
        *,
        input_path: Path | None = None,
        url: str | None = None,
    ) -> list[str]:
        """Return the argv for *operation*.

        Raises
        ------
        ValueError
            If *url* or *input_path* is missing for an operation that
            needs it.
        """
        if operation in _URL_OPERATIONS and not url:
            raise ValueError(f"{operation.value} requires a source URL")
        if operation in _INPUT_OPERATIONS and input_path is None:
            raise ValueError(f"{operation.value} requires an input path")

        out = str(output_path)
        if operation is Operation.DOWNLOAD_VIDEO:
            return [
                *self._ytdlp,
                "-f", VIDEO_FORMAT_SELECTOR,
                "--merge-output-format", "mp4",
                "--force-overwrites",
                "-o", ytdlp_literal_template(output_path),
                "--", str(url),
            ]
        if operation is Operation.DOWNLOAD_AUDIO:
            return [
                *self._ytdlp,
                "-f", "bestaudio",
                "--extract-audio",
                "--audio-format", AUDIO_FORMAT,
                "--audio-quality", AUDIO_BITRATE,
                "--force-overwrites",
                "-o", ytdlp_literal_template(output_path),
                "--", str(url),
            ]
        if operation is Operation.NORMALIZE_VIDEO:
            return [
                *self._ffmpeg,
                "-y",
                "-i", str(input_path),
                "-c:v", "libx264",
                "-c:a", "aac",
                "-movflags", "+faststart",
                out,
            ]
        # Operation.EXTRACT_AUDIO
        return [
            *self._ffmpeg,
            "-y",
            "-i", str(input_path),
            "-vn",
            "-c:a", "libmp3lame",
            "-q:a", EXTRACT_AUDIO_QUALITY,
            out,
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        operation: Operation,
        output_path: Path,
        *,
        input_path: Path | None = None,
        url: str | None = None,
    ) -> StageOutcome:
        """Execute *operation* and report how it went."""
        try:
            argv = self.build_command(
                operation, output_path, input_path=input_path, url=url,
            )
        except ValueError as exc:
            return StageOutcome.failure(FailureKind.CONFIGURATION, str(exc))

        logger.debug("Running %s: %s", operation.value, argv)
        try:
            self._runner.run(argv)
        except LaunchError as exc:
            return StageOutcome.failure(FailureKind.LAUNCH, str(exc), cause=exc)
        except ExecutionError as exc:
            return StageOutcome.failure(FailureKind.EXECUTION, str(exc), cause=exc)
        return StageOutcome.success()
