"""ytnorm — download a video and normalize it for broad playback.

Drives yt-dlp and ffmpeg as external tools through a small, strictly
ordered pipeline with a deterministic artifact-naming convention.
"""

from ytnorm.version import __version__

__all__: list[str] = ["__version__"]
