"""``subprocess``-backed implementation of :class:`~ytnorm.core.protocols.CommandRunner`.

This module is the **only** place in the codebase that spawns external
processes.  OS-level launch failures are re-raised as
:class:`~ytnorm.exceptions.LaunchError` and non-zero exits as
:class:`~ytnorm.exceptions.ExecutionError` — nothing raw escapes.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ytnorm.exceptions import ExecutionError, LaunchError

logger = logging.getLogger(__name__)


def tool_label(argv: Sequence[str]) -> str:
    """Return a short display name for the tool *argv* launches.

    ``python -m yt_dlp`` is reported as ``yt_dlp`` rather than the
    interpreter path.
    """
    if not argv:
        return "<empty command>"
    if len(argv) >= 3 and argv[1] == "-m":
        return argv[2]
    return Path(argv[0]).name


class SubprocessRunner:
    """Concrete :class:`CommandRunner` built on :func:`subprocess.run`.

    The child inherits stdin/stdout/stderr so yt-dlp and ffmpeg render
    their own progress.  There is no timeout; the call blocks until the
    child exits.
    """

    def run(self, argv: Sequence[str]) -> None:
        """Run *argv* to completion.

        Raises
        ------
        LaunchError
            When the executable is missing or cannot be executed.
        ExecutionError
            When the process exits with a non-zero status.
        """
        tool = tool_label(argv)
        if not argv:
            raise LaunchError("Cannot run an empty command.", tool=tool)

        logger.debug("exec: %s", subprocess.list2cmdline(list(argv)))
        try:
            completed = subprocess.run(list(argv), check=False)
        except FileNotFoundError as exc:
            raise LaunchError(
                f"{tool} was not found.",
                tool=tool,
                hint=f"Install {tool} or pass its location explicitly.",
            ) from exc
        except PermissionError as exc:
            raise LaunchError(
                f"{tool} is not executable: {exc.strerror or exc}",
                tool=tool,
            ) from exc
        except OSError as exc:
            raise LaunchError(
                f"Failed to start {tool}: {exc}",
                tool=tool,
            ) from exc

        if completed.returncode != 0:
            raise ExecutionError(
                f"{tool} exited with status {completed.returncode}.",
                tool=tool,
                exit_code=completed.returncode,
            )
