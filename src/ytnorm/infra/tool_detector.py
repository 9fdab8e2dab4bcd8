"""Infrastructure: external tool discovery and platform guidance.

Locates yt-dlp and ffmpeg and builds the argv prefixes the stage
executor uses to launch them.  When tools are missing it supplies
platform-specific installation guidance.

Rules
-----
* Detection via :func:`shutil.which` and :func:`importlib.util.find_spec`
  only — no subprocess.
* No permanent PATH modification.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import importlib.util
import platform
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

from ytnorm.exceptions import ToolNotFoundError


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a tool detection probe.

    Attributes
    ----------
    name : str
        Executable name that was searched for.
    found : bool
        Whether the tool was located on PATH.
    path : Path | None
        Absolute path to the binary, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested shell commands for installing the tool on the current
        platform.  Empty when the tool is already present.
    """

    name: str
    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_tool(name: str) -> ToolStatus:
    """Probe PATH for the executable *name*.

    Returns a :class:`ToolStatus` regardless of whether the tool is
    present — the caller decides whether to abort or merely warn.
    """
    result = shutil.which(name)

    if result is not None:
        resolved = Path(result).resolve()
        return ToolStatus(
            name=name,
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return ToolStatus(
        name=name,
        found=False,
        path=None,
        version_hint="not found",
        install_commands=_platform_install_commands(name),
    )


def detect_ffmpeg() -> ToolStatus:
    """Probe the system for an ffmpeg binary."""
    return detect_tool("ffmpeg")


def require_ffmpeg() -> Path:
    """Locate ffmpeg or raise :class:`ToolNotFoundError`."""
    status = detect_ffmpeg()
    if not status.found or status.path is None:
        hint_lines: list[str] = []
        if status.install_commands:
            hint_lines.append("Install ffmpeg using one of:")
            hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise ToolNotFoundError(
            "ffmpeg is not installed or not on PATH.",
            hint="\n".join(hint_lines) if hint_lines else None,
        )
    return status.path


def ytdlp_module_available() -> bool:
    """Return ``True`` when the ``yt_dlp`` package is importable."""
    try:
        return importlib.util.find_spec("yt_dlp") is not None
    except (ImportError, ValueError):
        return False


# ---------------------------------------------------------------------------
# Command prefixes
# ---------------------------------------------------------------------------

def resolve_ytdlp_command(override: str | None = None) -> tuple[str, ...]:
    """Return the argv prefix used to launch yt-dlp.

    Order: explicit *override*, ``yt-dlp`` on PATH, then the installed
    package through the current interpreter (``python -m yt_dlp``).
    Falls back to a bare ``yt-dlp`` so a missing tool surfaces as a
    launch failure at the download stage.
    """
    if override:
        return (override,)
    status = detect_tool("yt-dlp")
    if status.found and status.path is not None:
        return (str(status.path),)
    if ytdlp_module_available():
        return (sys.executable, "-m", "yt_dlp")
    return ("yt-dlp",)


def resolve_ffmpeg_command(override: str | None = None) -> tuple[str, ...]:
    """Return the argv prefix used to launch ffmpeg."""
    if override:
        return (override,)
    status = detect_ffmpeg()
    if status.found and status.path is not None:
        return (str(status.path),)
    return ("ffmpeg",)


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands(name: str = "ffmpeg") -> tuple[str, ...]:
    """Return install commands for *name* appropriate for the current OS."""
    if name == "yt-dlp":
        return ("pip install yt-dlp",)

    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Gyan.FFmpeg",
            "choco install ffmpeg",
        )
    if system == "linux":
        return (
            "sudo apt install ffmpeg",
            "sudo dnf install ffmpeg",
            "sudo pacman -S ffmpeg",
        )
    if system == "darwin":
        return ("brew install ffmpeg",)
    # Fallback: generic guidance.
    return ("Please install ffmpeg from https://ffmpeg.org/download.html",)
