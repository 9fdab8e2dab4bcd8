"""CLI application entry point and command routing for ytnorm.

This module is the **sole error boundary** for the entire application.
It catches :class:`~ytnorm.exceptions.YtnormError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  pipeline and the infrastructure adapters.
* ``print()`` is forbidden outside the CLI layer; the Rich console proxy
  is used exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys

from ytnorm.cli import exit_codes
from ytnorm.cli.console import configure_logging, console
from ytnorm.core.models import DEFAULT_BASE_NAME, DEFAULT_OUTPUT_DIRECTORY, OutputKind
from ytnorm.exceptions import PipelineAbortedError, YtnormError
from ytnorm.version import __version__


FORMAT_CHOICES: tuple[str, ...] = ("video", "audio", "both", "mp4", "mp3")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands are not used; the CLI supports:
    * ``ytnorm <url> [options]`` — download and normalize one video
    * ``ytnorm doctor``          — environment diagnostics
    * ``ytnorm --version``
    """
    parser = argparse.ArgumentParser(
        prog="ytnorm",
        description="Download an online video and convert it to a widely compatible MP4 or MP3.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Video URL to process, or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "-n",
        "--name",
        default=DEFAULT_BASE_NAME,
        help="Base name for output files, without extension (default: %(default)s).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=DEFAULT_OUTPUT_DIRECTORY,
        help="Directory that receives the output files (default: %(default)s).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=FORMAT_CHOICES,
        default=None,
        help="Output to produce: video/mp4, audio/mp3, or both (default: video).",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Choose the output format from an interactive menu.",
    )
    parser.add_argument(
        "--yt-dlp",
        dest="ytdlp",
        default=None,
        metavar="PATH",
        help="yt-dlp executable to use instead of auto-detection.",
    )
    parser.add_argument(
        "--ffmpeg",
        default=None,
        metavar="PATH",
        help="ffmpeg executable to use instead of auto-detection.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every stage transition and external command.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _resolve_output_kind(args: argparse.Namespace) -> OutputKind:
    """Pick the output kind from ``--format`` or the interactive prompt."""
    if args.format is not None:
        return OutputKind.from_cli(args.format)
    if args.interactive:
        from ytnorm.cli.kind_prompt import prompt_output_kind

        return prompt_output_kind()
    return OutputKind.VIDEO


def _handle_process(url: str, args: argparse.Namespace) -> int:
    """Run the download-and-normalize pipeline for *url*.

    Flow:
    1. Resolve the output kind and build the request.
    2. Require ffmpeg on PATH unless ``--ffmpeg`` was given.
    3. Wire infra adapters into the core pipeline.
    4. Run it, letting the observer report each stage.
    """
    from ytnorm.cli.observer import ConsoleObserver
    from ytnorm.core.models import Request
    from ytnorm.core.pipeline import Pipeline
    from ytnorm.core.stage_executor import StageExecutor
    from ytnorm.infra.local_filesystem import LocalFileSystem
    from ytnorm.infra.subprocess_runner import SubprocessRunner
    from ytnorm.infra.tool_detector import (
        require_ffmpeg,
        resolve_ffmpeg_command,
        resolve_ytdlp_command,
    )

    request = Request(
        source_url=url,
        base_name=args.name,
        output_directory=args.output_dir,
        output_kind=_resolve_output_kind(args),
    )

    if args.ffmpeg is None:
        require_ffmpeg()

    executor = StageExecutor(
        SubprocessRunner(),
        ytdlp_command=resolve_ytdlp_command(args.ytdlp),
        ffmpeg_command=resolve_ffmpeg_command(args.ffmpeg),
    )
    pipeline = Pipeline(executor, LocalFileSystem(), ConsoleObserver())

    console.print(
        f"\n[bold]Processing[/bold] {url}  "
        f"[dim]({request.output_kind.value} → {request.output_directory})[/dim]"
    )
    pipeline.run(request)
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ytnorm.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ytnorm CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.target is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(verbose=args.verbose)
    target: str = args.target

    if target.lower() == "doctor":
        return _handle_doctor()

    return _handle_process(target, args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _print_error(exc: YtnormError) -> None:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {exc.hint}")


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except PipelineAbortedError as exc:
        _print_error(exc)
        console.print("[dim]Files produced so far were left in place for inspection.[/dim]")
        sys.exit(exit_codes.PIPELINE_ABORTED)
    except YtnormError as exc:
        _print_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
