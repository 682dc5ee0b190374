from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..domain.models import RegistryArtifact, VerificationResult
from ..services import RegistryRestorer


class RestoreRegistryUseCase:
    """Use case for restoring the local registry and verifying expected packages."""

    def __init__(
        self,
        *,
        restorer: RegistryRestorer,
        artifacts: Sequence[RegistryArtifact],
    ) -> None:
        self._restorer = restorer
        self._artifacts = tuple(artifacts)

    def execute(self, *, archive_path: Path) -> VerificationResult:
        """Restore from ``archive_path``, then verify every expected artifact.

        Raises:
            ArchiveNotFoundError: If the archive is missing
            RegistryUnavailableError: If the registry never comes back up
            ArtifactsMissingError: If any expected package never resolves
        """
        self._restorer.restore(archive_path)
        return self._restorer.verify(self._artifacts)
