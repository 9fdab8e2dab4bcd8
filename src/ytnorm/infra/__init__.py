"""Infrastructure layer — external system integration.

This layer wraps all interaction with the operating system: spawning
yt-dlp and ffmpeg, touching the local disk, and locating tools.  Every
raw OS exception must be caught here and re-raised as a
:class:`~ytnorm.exceptions.YtnormError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ytnorm.infra.local_filesystem import LocalFileSystem
from ytnorm.infra.subprocess_runner import SubprocessRunner
from ytnorm.infra.tool_detector import (
    ToolStatus,
    detect_ffmpeg,
    detect_tool,
    require_ffmpeg,
    resolve_ffmpeg_command,
    resolve_ytdlp_command,
)

__all__: list[str] = [
    "LocalFileSystem",
    "SubprocessRunner",
    "ToolStatus",
    "detect_ffmpeg",
    "detect_tool",
    "require_ffmpeg",
    "resolve_ffmpeg_command",
    "resolve_ytdlp_command",
]
