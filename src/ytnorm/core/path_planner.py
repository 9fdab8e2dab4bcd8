"""Pure artifact-path planning.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.

Naming convention (relied upon by anything reading the output folder):

* raw download        → ``{dir}/{name}.mp4``           (intermediate)
* normalized video    → ``{dir}/{name}_complete.mp4``  (final)
* audio               → ``{dir}/{name}.mp3``           (final)
"""

from __future__ import annotations

from pathlib import Path

from ytnorm.core.models import (
    ArtifactKind,
    ArtifactPath,
    ArtifactPlan,
    ArtifactRole,
    OutputKind,
    validate_base_name,
)


# kind → (suffix, extension)
_NAMING: dict[ArtifactKind, tuple[str, str]] = {
    ArtifactKind.RAW_VIDEO: ("", "mp4"),
    ArtifactKind.NORMALIZED_VIDEO: ("_complete", "mp4"),
    ArtifactKind.AUDIO: ("", "mp3"),
}

_LAYOUT: dict[OutputKind, tuple[tuple[ArtifactKind, ArtifactRole], ...]] = {
    OutputKind.VIDEO: (
        (ArtifactKind.RAW_VIDEO, ArtifactRole.INTERMEDIATE),
        (ArtifactKind.NORMALIZED_VIDEO, ArtifactRole.FINAL),
    ),
    OutputKind.AUDIO: (
        (ArtifactKind.AUDIO, ArtifactRole.FINAL),
    ),
    OutputKind.VIDEO_WITH_AUDIO: (
        (ArtifactKind.RAW_VIDEO, ArtifactRole.INTERMEDIATE),
        (ArtifactKind.NORMALIZED_VIDEO, ArtifactRole.FINAL),
        (ArtifactKind.AUDIO, ArtifactRole.FINAL),
    ),
}


def artifact_filename(base_name: str, kind: ArtifactKind) -> str:
    """Return the bare file name for *kind* (e.g. ``clip_complete.mp4``)."""
    suffix, extension = _NAMING[kind]
    return f"{base_name}{suffix}.{extension}"


def plan(
    base_name: str,
    output_directory: str | Path,
    output_kind: OutputKind,
) -> ArtifactPlan:
    """Compute the artifacts a run of *output_kind* may produce or consume.

    Raises
    ------
    ConfigurationError
        If *base_name* is empty or contains a path separator.
    """
    validate_base_name(base_name)
    directory = Path(output_directory)
    artifacts = tuple(
        ArtifactPath(
            path=directory / artifact_filename(base_name, kind),
            kind=kind,
            role=role,
        )
        for kind, role in _LAYOUT[output_kind]
    )
    return ArtifactPlan(output_directory=directory, artifacts=artifacts)
