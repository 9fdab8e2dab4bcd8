"""Tests for the stage executor (core/stage_executor.py).

The :class:`CommandRunner` is mocked — no process is ever spawned.

Coverage:
* Fixed argv templates for all four operations.
* Custom tool prefixes (``python -m yt_dlp``).
* Runner error → outcome mapping.
* Missing URL / input path.
* Overwrite, URL separator and output-template escaping for yt-dlp.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ytnorm.core.models import FailureKind, Operation
from ytnorm.core.stage_executor import (
    VIDEO_FORMAT_SELECTOR,
    StageExecutor,
    ytdlp_literal_template,
)
from ytnorm.exceptions import ExecutionError, LaunchError


URL = "https://example/video"
RAW = Path("out/clip.mp4")
FINAL = Path("out/clip_complete.mp4")
AUDIO = Path("out/clip.mp3")


# ---------------------------------------------------------------------------
# Command templates
# ---------------------------------------------------------------------------

class TestBuildCommand:
    def test_download_video(self) -> None:
        argv = StageExecutor(MagicMock()).build_command(
            Operation.DOWNLOAD_VIDEO, RAW, url=URL,
        )
        assert argv == [
            "yt-dlp",
            "-f", "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]/best",
            "--merge-output-format", "mp4",
            "--force-overwrites",
            "-o", str(RAW),
            "--", URL,
        ]

    def test_download_audio(self) -> None:
        argv = StageExecutor(MagicMock()).build_command(
            Operation.DOWNLOAD_AUDIO, AUDIO, url=URL,
        )
        assert argv == [
            "yt-dlp",
            "-f", "bestaudio",
            "--extract-audio",
            "--audio-format", "mp3",
            "--audio-quality", "192K",
            "--force-overwrites",
            "-o", str(AUDIO),
            "--", URL,
        ]

    def test_normalize_video(self) -> None:
        argv = StageExecutor(MagicMock()).build_command(
            Operation.NORMALIZE_VIDEO, FINAL, input_path=RAW,
        )
        assert argv == [
            "ffmpeg",
            "-y",
            "-i", str(RAW),
            "-c:v", "libx264",
            "-c:a", "aac",
            "-movflags", "+faststart",
            str(FINAL),
        ]

    def test_extract_audio(self) -> None:
        argv = StageExecutor(MagicMock()).build_command(
            Operation.EXTRACT_AUDIO, AUDIO, input_path=FINAL,
        )
        assert argv == [
            "ffmpeg",
            "-y",
            "-i", str(FINAL),
            "-vn",
            "-c:a", "libmp3lame",
            "-q:a", "2",
            str(AUDIO),
        ]

    def test_custom_tool_prefixes(self) -> None:
        executor = StageExecutor(
            MagicMock(),
            ytdlp_command=("/usr/bin/python3", "-m", "yt_dlp"),
            ffmpeg_command=("/opt/ffmpeg/bin/ffmpeg",),
        )
        download = executor.build_command(Operation.DOWNLOAD_VIDEO, RAW, url=URL)
        normalize = executor.build_command(Operation.NORMALIZE_VIDEO, FINAL, input_path=RAW)
        assert download[:3] == ["/usr/bin/python3", "-m", "yt_dlp"]
        assert normalize[0] == "/opt/ffmpeg/bin/ffmpeg"

    @pytest.mark.parametrize(
        "operation", [Operation.DOWNLOAD_VIDEO, Operation.DOWNLOAD_AUDIO],
    )
    def test_downloads_force_overwrite(self, operation: Operation) -> None:
        argv = StageExecutor(MagicMock()).build_command(operation, AUDIO, url=URL)
        assert "--force-overwrites" in argv

    @pytest.mark.parametrize(
        "operation", [Operation.DOWNLOAD_VIDEO, Operation.DOWNLOAD_AUDIO],
    )
    def test_dash_leading_url_stays_positional(self, operation: Operation) -> None:
        argv = StageExecutor(MagicMock()).build_command(
            operation, RAW, url="--exec=echo hi",
        )
        assert argv[-2:] == ["--", "--exec=echo hi"]
        assert "--exec=echo hi" not in argv[:-1]

    def test_percent_in_download_path_is_escaped(self) -> None:
        target = Path("out 100%/50%(id)s.mp4")
        argv = StageExecutor(MagicMock()).build_command(
            Operation.DOWNLOAD_VIDEO, target, url=URL,
        )
        assert argv[argv.index("-o") + 1] == str(Path("out 100%%/50%%(id)s.mp4"))

    def test_percent_in_ffmpeg_paths_is_literal(self) -> None:
        source = Path("out/50%(id)s.mp4")
        target = Path("out/50%(id)s_complete.mp4")
        argv = StageExecutor(MagicMock()).build_command(
            Operation.NORMALIZE_VIDEO, target, input_path=source,
        )
        assert argv[argv.index("-i") + 1] == str(source)
        assert argv[-1] == str(target)

    def test_literal_template_helper(self) -> None:
        assert ytdlp_literal_template(Path("a%b")) == "a%%b"
        assert ytdlp_literal_template(Path("plain.mp3")) == "plain.mp3"

    def test_format_selector_constant(self) -> None:
        assert VIDEO_FORMAT_SELECTOR.startswith("bestvideo[ext=mp4]")

    @pytest.mark.parametrize(
        "operation", [Operation.DOWNLOAD_VIDEO, Operation.DOWNLOAD_AUDIO],
    )
    def test_download_requires_url(self, operation: Operation) -> None:
        with pytest.raises(ValueError, match="requires a source URL"):
            StageExecutor(MagicMock()).build_command(operation, RAW)

    @pytest.mark.parametrize(
        "operation", [Operation.NORMALIZE_VIDEO, Operation.EXTRACT_AUDIO],
    )
    def test_transcode_requires_input(self, operation: Operation) -> None:
        with pytest.raises(ValueError, match="requires an input path"):
            StageExecutor(MagicMock()).build_command(operation, FINAL)


# ---------------------------------------------------------------------------
# Outcome mapping
# ---------------------------------------------------------------------------

class TestRun:
    def test_success_delegates_to_runner(self) -> None:
        runner = MagicMock()
        executor = StageExecutor(runner)

        outcome = executor.run(Operation.DOWNLOAD_VIDEO, RAW, url=URL)

        assert outcome.ok
        runner.run.assert_called_once_with(
            executor.build_command(Operation.DOWNLOAD_VIDEO, RAW, url=URL),
        )

    def test_launch_error(self) -> None:
        runner = MagicMock()
        error = LaunchError("ffmpeg was not found.", tool="ffmpeg")
        runner.run.side_effect = error

        outcome = StageExecutor(runner).run(
            Operation.NORMALIZE_VIDEO, FINAL, input_path=RAW,
        )

        assert outcome.failure_kind is FailureKind.LAUNCH
        assert outcome.detail == "ffmpeg was not found."
        assert outcome.cause is error

    def test_execution_error(self) -> None:
        runner = MagicMock()
        runner.run.side_effect = ExecutionError(
            "yt-dlp exited with status 1.", tool="yt-dlp", exit_code=1,
        )

        outcome = StageExecutor(runner).run(Operation.DOWNLOAD_AUDIO, AUDIO, url=URL)

        assert outcome.failure_kind is FailureKind.EXECUTION
        assert "status 1" in outcome.detail

    def test_missing_input_is_configuration_failure(self) -> None:
        runner = MagicMock()
        outcome = StageExecutor(runner).run(Operation.EXTRACT_AUDIO, AUDIO)

        assert outcome.failure_kind is FailureKind.CONFIGURATION
        runner.run.assert_not_called()

    def test_unexpected_errors_propagate(self) -> None:
        runner = MagicMock()
        runner.run.side_effect = RuntimeError("bug")
        with pytest.raises(RuntimeError):
            StageExecutor(runner).run(Operation.DOWNLOAD_VIDEO, RAW, url=URL)

    def test_never_retries(self) -> None:
        runner = MagicMock()
        runner.run.side_effect = ExecutionError("x", tool="yt-dlp", exit_code=2)
        StageExecutor(runner).run(Operation.DOWNLOAD_VIDEO, RAW, url=URL)
        assert runner.run.call_count == 1
