"""Local-disk implementation of :class:`~ytnorm.core.protocols.FileSystem`."""

from __future__ import annotations

from pathlib import Path

from ytnorm.exceptions import ConfigurationError


class LocalFileSystem:
    """Thin :mod:`pathlib` adapter used by the pipeline at runtime."""

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def make_dirs(self, path: Path) -> None:
        """Create *path* with parents.

        Raises
        ------
        ConfigurationError
            When the directory cannot be created (permissions, a file
            in the way, read-only medium).
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                f"Cannot create output directory {path}: {exc.strerror or exc}",
                hint="Choose a writable location with --output-dir.",
            ) from exc

    def remove(self, path: Path) -> None:
        path.unlink()
