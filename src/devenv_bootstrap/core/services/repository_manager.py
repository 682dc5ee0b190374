from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence

from ...shared.rmtree_force import rmtree_force
from ..domain.exceptions import CheckoutRepairError
from ..domain.models import (
    CloneFailure,
    EnsureResult,
    FailureKind,
    RepoDescriptor,
)
from ..ports import ClockPort, LoggerPort, VcsPort
from .checkout_repair import CheckoutRepair
from .failure_classifier import classify_clone_failure


METADATA_ENTRIES = frozenset({".git"})


class RepositoryAcquisitionManager:
    """Clones repositories into a workspace root with bounded retry.

    Per descriptor: populated clones are skipped, metadata-only clones are
    deleted and cloned again, transient failures are retried with a fixed
    delay, and a checkout that fails on host-illegal paths is repaired rather
    than treated as a failure. One repository's failure never stops the batch.
    """

    def __init__(
        self,
        *,
        vcs: VcsPort,
        repair: CheckoutRepair,
        clock: ClockPort,
        logger: LoggerPort,
        repair_rules: Optional[Mapping[str, str]] = None,
        attempts: int = 3,
        retry_delay: float = 5.0,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        self._vcs = vcs
        self._repair = repair
        self._clock = clock
        self._logger = logger
        self._repair_rules = dict(repair_rules or {})
        self._attempts = attempts
        self._retry_delay = retry_delay

    def ensure_present(
        self,
        descriptors: Sequence[RepoDescriptor],
        destination_root: Path,
    ) -> EnsureResult:
        result = EnsureResult()
        destination_root.mkdir(parents=True, exist_ok=True)

        for desc in descriptors:
            dest = destination_root / desc.name
            try:
                if self._is_populated(dest):
                    self._logger.info("clone_skipped", repo=desc.name, dest=str(dest))
                    result.skipped.append(desc.name)
                    continue

                if dest.exists():
                    self._logger.warning("clone_broken", repo=desc.name, dest=str(dest))
                    rmtree_force(dest)

                failure = self._clone(desc, dest)
            except Exception as e:
                self._logger.exception("clone_error", repo=desc.name)
                failure = CloneFailure(repo=desc.name, kind=FailureKind.UNKNOWN, message=str(e))

            if failure is None:
                result.cloned.append(desc.name)
            else:
                result.failed.append(desc.name)
                result.failures.append(failure)

        self._logger.info(
            "clone_phase_done",
            cloned=result.cloned,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    def _clone(self, desc: RepoDescriptor, dest: Path) -> Optional[CloneFailure]:
        kind = FailureKind.UNKNOWN
        output = ""
        for attempt in range(1, self._attempts + 1):
            if attempt > 1:
                self._logger.info(
                    "clone_retry",
                    repo=desc.name,
                    attempt=attempt,
                    delay_seconds=self._retry_delay,
                )
                self._clock.sleep(self._retry_delay)
                rmtree_force(dest)

            self._logger.info("clone_started", repo=desc.name, url=desc.url, attempt=attempt)
            outcome = self._vcs.clone(desc.url, dest)
            output = outcome.output
            kind = classify_clone_failure(outcome.exit_code, output)

            if kind is FailureKind.NONE:
                self._logger.info("clone_done", repo=desc.name, attempt=attempt)
                return None

            if kind is FailureKind.CHECKOUT_FAILED:
                return self._recover_checkout(desc, dest)

            self._logger.warning(
                "clone_failed",
                repo=desc.name,
                attempt=attempt,
                failure_kind=kind.value,
                output=output,
            )
            if not kind.retryable:
                break

        return CloneFailure(
            repo=desc.name,
            kind=kind,
            message=f"{kind.remediation}\n{output.strip()}".strip(),
        )

    def _recover_checkout(self, desc: RepoDescriptor, dest: Path) -> Optional[CloneFailure]:
        illegal_path = self._repair_rules.get(desc.name)
        try:
            if illegal_path is not None:
                self._logger.warning("checkout_partial", repo=desc.name, illegal_path=illegal_path)
                repaired = self._repair.repair(dest, illegal_path)
                self._logger.info(
                    "checkout_repaired",
                    repo=desc.name,
                    files_recovered=repaired.files_recovered,
                    references_rewritten=repaired.references_rewritten,
                )
            else:
                self._logger.warning("checkout_partial_forced", repo=desc.name)
                self._vcs.force_checkout(dest)
        except CheckoutRepairError as e:
            self._logger.error("checkout_repair_failed", repo=desc.name, error=str(e))
            return CloneFailure(repo=desc.name, kind=FailureKind.CHECKOUT_FAILED, message=str(e))
        return None

    @staticmethod
    def _is_populated(dest: Path) -> bool:
        if not dest.is_dir():
            return False
        return any(entry.name not in METADATA_ENTRIES for entry in dest.iterdir())
