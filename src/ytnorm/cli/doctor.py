"""``ytnorm doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can run the download and normalize
pipeline.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from ytnorm.cli import exit_codes
from ytnorm.cli.console import console
from ytnorm.infra.tool_detector import detect_ffmpeg, detect_tool
from ytnorm.version import __version__


Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _ytdlp_version_check() -> Check:
    """Return (label, value, status) for the yt-dlp row.

    The Python package is preferred; a standalone ``yt-dlp`` binary on
    PATH is accepted as well.
    """
    try:
        from yt_dlp.version import __version__ as ydl_ver

        return "yt-dlp", ydl_ver, "[green]OK[/green]"
    except ImportError:
        pass

    binary = detect_tool("yt-dlp")
    if binary.found:
        return "yt-dlp", str(binary.path), "[green]OK[/green]"
    return "yt-dlp", "NOT INSTALLED", "[red]FAIL[/red]"


def _ffmpeg_check() -> Check:
    """Return (label, value, status) for the ffmpeg row."""
    status_obj = detect_ffmpeg()
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return "ffmpeg", path_str, "[green]OK[/green]"
    return "ffmpeg", "not found", "[yellow]WARN[/yellow]"


def _os_check() -> Check:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _ytnorm_version_check() -> Check:
    return "ytnorm", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\nytnorm doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<32} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _render_table(checks: list[Check]) -> bool:
    """Render *checks* with Rich; return ``False`` when Rich is missing."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return False

    table = Table(
        title="ytnorm doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()
    return True


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
        A missing ffmpeg is only a warning: nothing fails until a stage
        actually needs it.
    """
    checks = [
        _ytnorm_version_check(),
        _python_version_check(),
        _ytdlp_version_check(),
        _ffmpeg_check(),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = _render_table(checks)
    if not rich_available:
        _print_plain_doctor_table(checks)

    ffmpeg_status = detect_ffmpeg()
    if not ffmpeg_status.found and ffmpeg_status.install_commands:
        if rich_available:
            console.print("[yellow]ffmpeg is not installed.[/yellow]")
            console.print("Re-encoding and MP3 conversion need it. Install with one of:\n")
            for cmd in ffmpeg_status.install_commands:
                console.print(f"  [bold]{cmd}[/bold]")
            console.print()
        else:
            print("ffmpeg is not installed.", file=sys.stderr)
            print("Re-encoding and MP3 conversion need it. Install with one of:\n", file=sys.stderr)
            for cmd in ffmpeg_status.install_commands:
                print(f"  {cmd}", file=sys.stderr)
            print(file=sys.stderr)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
