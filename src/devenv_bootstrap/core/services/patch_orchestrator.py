from __future__ import annotations

from typing import Callable, Sequence

from ..domain.models import (
    PatchOutcome,
    PatchStatusEntry,
    PatchSummary,
    PatchTarget,
)
from ..ports import LoggerPort
from .textual_patcher import TextualPatcher


class PatchOrchestrator:
    """Applies or reverts the whole patch set, in declared order.

    Targets are independent: one target's fault is logged and recorded, and the
    remaining targets still run. Status is always re-derived from file content.
    """

    def __init__(
        self,
        *,
        targets: Sequence[PatchTarget],
        patcher: TextualPatcher,
        logger: LoggerPort,
    ) -> None:
        self._targets = tuple(targets)
        self._patcher = patcher
        self._logger = logger

    @property
    def targets(self) -> tuple[PatchTarget, ...]:
        return self._targets

    def apply_all(self) -> PatchSummary:
        return self._run("apply", self._patcher.apply, PatchOutcome.APPLIED)

    def revert_all(self) -> PatchSummary:
        return self._run("revert", self._patcher.revert, PatchOutcome.REVERTED)

    def status(self) -> list[PatchStatusEntry]:
        return [
            PatchStatusEntry(target=target, state=self._patcher.inspect(target))
            for target in self._targets
        ]

    def _run(
        self,
        action: str,
        op: Callable[[PatchTarget], PatchOutcome],
        changed: PatchOutcome,
    ) -> PatchSummary:
        outcomes: list[tuple[str, PatchOutcome]] = []
        failed: list[str] = []
        for target in self._targets:
            path = str(target.path)
            try:
                outcome = op(target)
            except Exception:
                self._logger.exception(
                    f"patch_{action}_error", path=path, patch_kind=target.kind
                )
                outcome = PatchOutcome.FAILED
                failed.append(path)
            else:
                self._logger.debug(
                    f"patch_{action}", path=path, patch_kind=target.kind, outcome=outcome.value
                )
            outcomes.append((path, outcome))

        changed_count = sum(1 for _, o in outcomes if o is changed)
        skipped_count = sum(1 for _, o in outcomes if o is PatchOutcome.NOOP)
        self._logger.info(
            f"patch_{action}_done",
            changed=changed_count,
            skipped=skipped_count,
            failed=failed,
        )
        return PatchSummary(
            applied_count=changed_count,
            skipped_count=skipped_count,
            failed=tuple(failed),
            outcomes=tuple(outcomes),
        )
