"""Interactive output-kind selection for the CLI layer.

Used by ``ytnorm <url> --interactive``: asks with questionary arrow keys
whether to produce a video, an audio track, or both, and returns the
chosen :class:`~ytnorm.core.models.OutputKind`.
"""

from __future__ import annotations

from typing import Any

from ytnorm.core.models import OutputKind
from ytnorm.exceptions import ConfigurationError, EnvironmentError


_CHOICES: tuple[tuple[str, OutputKind], ...] = (
    ("Video  — compatible MP4 (H.264 + AAC)", OutputKind.VIDEO),
    ("Audio  — MP3 at 192 kbps", OutputKind.AUDIO),
    ("Both   — compatible MP4 plus extracted MP3", OutputKind.VIDEO_WITH_AUDIO),
)


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def prompt_output_kind(default: OutputKind = OutputKind.VIDEO) -> OutputKind:
    """Prompt the user for the output kind.

    Raises
    ------
    KeyboardInterrupt
        If the user presses Ctrl+C during selection.
    ConfigurationError
        If the user cancels the prompt (Esc / None return).
    EnvironmentError
        If questionary is not installed.
    """
    questionary = _import_questionary()

    choices = [
        questionary.Choice(title=title, value=kind.value)
        for title, kind in _CHOICES
    ]
    selected: str | None = questionary.select(
        "What should be produced?",
        choices=choices,
        default=default.value,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()  # Returns None on Ctrl+C / Esc

    if selected is None:
        raise ConfigurationError(
            "No output format selected.",
            hint="Use arrow keys to pick a format, then press Enter.",
        )

    return OutputKind(selected)
