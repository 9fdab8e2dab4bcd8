"""Artifact lifecycle tracking and intermediate cleanup.

Only INTERMEDIATE artifacts are ever deleted, and only once the stage
that consumes them has succeeded.  FINAL artifacts belong to the user.
"""

from __future__ import annotations

import logging

from ytnorm.core.models import ArtifactPath, ArtifactPlan
from ytnorm.core.protocols import FileSystem
from ytnorm.exceptions import ArtifactRoleError, CleanupError

logger = logging.getLogger(__name__)


class ArtifactLifecycleManager:
    """Deletes consumed intermediates of a single :class:`ArtifactPlan`.

    Parameters
    ----------
    plan:
        The plan whose artifacts this manager is responsible for.
    filesystem:
        Any object satisfying the :class:`FileSystem` protocol.
    """

    def __init__(self, plan: ArtifactPlan, filesystem: FileSystem) -> None:
        self._plan: ArtifactPlan = plan
        self._fs: FileSystem = filesystem
        self._consumed: list[ArtifactPath] = []

    @property
    def pending(self) -> tuple[ArtifactPath, ...]:
        """Intermediates that have not been consumed yet."""
        return tuple(a for a in self._plan.intermediates if a not in self._consumed)

    @property
    def consumed(self) -> tuple[ArtifactPath, ...]:
        return tuple(self._consumed)

    def mark_consumed(self, artifact: ArtifactPath) -> bool:
        """Delete *artifact* now that its consumer stage has succeeded.

        Returns ``True`` when a file was removed and ``False`` when it
        was already gone.

        Raises
        ------
        ArtifactRoleError
            If *artifact* is FINAL or not part of the plan.
        CleanupError
            If the file exists but cannot be deleted.
        """
        if artifact not in self._plan:
            raise ArtifactRoleError(f"Artifact is not part of this plan: {artifact.path}")
        if not artifact.is_intermediate:
            raise ArtifactRoleError(f"Refusing to delete final artifact: {artifact.path}")
        if artifact in self._consumed:
            return False

        try:
            self._fs.remove(artifact.path)
        except FileNotFoundError:
            logger.debug("Intermediate already absent: %s", artifact.path)
            removed = False
        except OSError as exc:
            raise CleanupError(artifact.path, exc.strerror or str(exc)) from exc
        else:
            logger.debug("Deleted intermediate %s", artifact.path)
            removed = True

        self._consumed.append(artifact)
        return removed
