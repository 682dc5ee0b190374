"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from ..core.domain.models import (
    EnsureResult,
    PatchOutcome,
    PatchState,
    PatchStatusEntry,
    PatchSummary,
    VerificationResult,
)
from ..core.usecases.bootstrap import BootstrapReport


_STATE_MARKS = {
    PatchState.APPLIED: "*",
    PatchState.ORIGINAL: " ",
    PatchState.NOT_FOUND: "-",
}


def format_ensure_result(result: EnsureResult) -> str:
    lines = [
        f"Cloned: {len(result.cloned)}, skipped: {len(result.skipped)}, failed: {len(result.failed)}",
    ]
    for name in result.cloned:
        lines.append(f"  ✓ {name} (cloned)")
    for name in result.skipped:
        lines.append(f"  ✓ {name} (already present)")
    for failure in result.failures:
        lines.append(f"  ✗ {failure.repo} [{failure.kind.value}]")
        for msg_line in failure.message.splitlines():
            lines.append(f"      {msg_line}")
    return "\n".join(lines)


def format_patch_summary(summary: PatchSummary, action: str) -> str:
    """Format an apply/revert summary.

    Args:
        summary: Result of apply_all / revert_all
        action: "applied" or "reverted", used in the heading

    Returns:
        Formatted string for display
    """
    lines = [f"{summary.applied_count} {action}, {summary.skipped_count} unchanged, {len(summary.failed)} failed"]
    for path, outcome in summary.outcomes:
        if outcome is PatchOutcome.NOOP:
            continue
        mark = "✗" if outcome is PatchOutcome.FAILED else "✓"
        lines.append(f"  {mark} {outcome.value:<8} {path}")
    return "\n".join(lines)


def format_patch_status(entries: list[PatchStatusEntry]) -> str:
    if not entries:
        return "No patch targets configured."
    width = max(len(e.state.value) for e in entries)
    lines = []
    for entry in entries:
        mark = _STATE_MARKS[entry.state]
        lines.append(f"{mark} {entry.state.value:<{width}}  {entry.target.kind:<21} {entry.target.path}")
    return "\n".join(lines)


def format_verification(result: VerificationResult) -> str:
    lines = [f"Registry verified: {len(result.found)} package(s) resolvable after {result.polls} poll(s)"]
    for name in result.found:
        lines.append(f"  ✓ {name}")
    return "\n".join(lines)


def format_bootstrap_report(report: BootstrapReport) -> str:
    sections = []
    if report.verification is not None:
        sections.append(format_verification(report.verification))
    if report.clone is not None:
        sections.append(format_ensure_result(report.clone))
    if report.applied is not None:
        sections.append("Patches: " + format_patch_summary(report.applied, "applied"))
    sections.append(f"Build: {'done' if report.built else 'skipped'}")
    if report.reverted is not None:
        sections.append("Patches: " + format_patch_summary(report.reverted, "reverted"))
    sections.append(f"Start: {'done' if report.started else 'skipped'}")
    return "\n\n".join(sections)
