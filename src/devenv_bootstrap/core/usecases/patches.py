from __future__ import annotations

from ..domain.models import PatchStatusEntry, PatchSummary
from ..services import PatchOrchestrator


class ApplyPatchesUseCase:
    def __init__(self, *, orchestrator: PatchOrchestrator) -> None:
        self._orchestrator = orchestrator

    def execute(self) -> PatchSummary:
        return self._orchestrator.apply_all()


class RevertPatchesUseCase:
    def __init__(self, *, orchestrator: PatchOrchestrator) -> None:
        self._orchestrator = orchestrator

    def execute(self) -> PatchSummary:
        return self._orchestrator.revert_all()


class PatchStatusUseCase:
    """Report each target's state as derived from current file content."""

    def __init__(self, *, orchestrator: PatchOrchestrator) -> None:
        self._orchestrator = orchestrator

    def execute(self) -> list[PatchStatusEntry]:
        return self._orchestrator.status()
