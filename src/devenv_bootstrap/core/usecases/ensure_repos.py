from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..domain.exceptions import RepositoryAcquisitionError
from ..domain.models import EnsureResult, RepoDescriptor
from ..services import RepositoryAcquisitionManager


class EnsureReposUseCase:
    """Use case for making every configured repository present in the workspace."""

    def __init__(
        self,
        *,
        manager: RepositoryAcquisitionManager,
        repositories: Sequence[RepoDescriptor],
        workspace_root: Path,
    ) -> None:
        self._manager = manager
        self._repositories = tuple(repositories)
        self._workspace_root = workspace_root

    def execute(self, *, strict: bool = False) -> EnsureResult:
        """Clone missing repositories.

        Args:
            strict: Raise RepositoryAcquisitionError if any repository failed

        Returns:
            Aggregated clone result (always covers every repository)
        """
        result = self._manager.ensure_present(self._repositories, self._workspace_root)
        if strict and not result.ok:
            raise RepositoryAcquisitionError(result)
        return result
