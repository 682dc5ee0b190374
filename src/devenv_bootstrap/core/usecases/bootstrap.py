from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..domain.exceptions import PatchApplyError
from ..domain.models import EnsureResult, PatchSummary, VerificationResult
from ..ports import ContainerRuntimePort, LoggerPort
from ..services import PatchOrchestrator
from .ensure_repos import EnsureReposUseCase
from .restore_registry import RestoreRegistryUseCase


@dataclass
class BootstrapReport:
    verification: Optional[VerificationResult] = None
    clone: Optional[EnsureResult] = None
    applied: Optional[PatchSummary] = None
    reverted: Optional[PatchSummary] = None
    built: bool = False
    started: bool = False


class BootstrapUseCase:
    """Full environment run.

    restore registry -> clone -> apply patches -> build -> revert patches -> start.
    Any failure aborts the run; patches are reverted best-effort before the
    error propagates so tracked files are not left modified.
    """

    def __init__(
        self,
        *,
        restore_uc: RestoreRegistryUseCase,
        ensure_uc: EnsureReposUseCase,
        orchestrator: PatchOrchestrator,
        runtime: ContainerRuntimePort,
        logger: LoggerPort,
        compose_dir: Path,
    ) -> None:
        self._restore_uc = restore_uc
        self._ensure_uc = ensure_uc
        self._orchestrator = orchestrator
        self._runtime = runtime
        self._logger = logger
        self._compose_dir = compose_dir

    def execute(
        self,
        *,
        archive_path: Optional[Path],
        build: bool = True,
        start: bool = True,
    ) -> BootstrapReport:
        """Run every phase in order.

        Args:
            archive_path: Registry backup; None skips the restore phase
            build: Build service images while patches are applied
            start: Start services after patches are reverted

        Returns:
            Report of every completed phase
        """
        report = BootstrapReport()
        self._logger.info(
            "bootstrap_started",
            restore=archive_path is not None,
            build=build,
            start=start,
        )
        try:
            if archive_path is not None:
                report.verification = self._restore_uc.execute(archive_path=archive_path)

            report.clone = self._ensure_uc.execute(strict=True)

            report.applied = self._orchestrator.apply_all()
            if not report.applied.ok:
                raise PatchApplyError(report.applied.failed)

            if build:
                self._runtime.build(self._compose_dir)
                report.built = True

            report.reverted = self._orchestrator.revert_all()

            if start:
                self._runtime.up(self._compose_dir)
                report.started = True
        except Exception:
            self._logger.exception("bootstrap_failed")
            self._revert_best_effort()
            raise

        self._logger.info("bootstrap_done", built=report.built, started=report.started)
        return report

    def _revert_best_effort(self) -> None:
        try:
            summary = self._orchestrator.revert_all()
        except Exception:
            self._logger.exception("bootstrap_revert_failed")
            return
        self._logger.info(
            "bootstrap_reverted",
            reverted=summary.applied_count,
            failed=list(summary.failed),
        )
