from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from ..domain.models import (
    LockfileUrlRewrite,
    PatchOutcome,
    PatchState,
    PatchTarget,
    SourceLiteralPatch,
    TextReplace,
)
from ..ports import VcsPort


# package-lock.json: `"integrity": "sha512-..."`; yarn.lock: `integrity sha512-...`
_INTEGRITY_LINE = re.compile(r'^\s*"?integrity"?\s*[:\s]')
_CLOSING_LINE = re.compile(r"^\s*[}\]]")
_TRAILING_SEPARATOR = re.compile(r",([ \t]*(?:\r?\n)?)$")


def rewrite_lockfile_urls(
    content: str,
    original_prefix: str,
    patched_prefix: str,
    *,
    remove_integrity: bool,
) -> Optional[str]:
    """Redirect every registry URL in a lock file to ``patched_prefix``.

    Returns None when the original prefix does not occur, meaning there is
    nothing to do. A checksum line directly after a rewritten line is dropped;
    if a closing brace line follows the dropped line, the trailing comma of
    the rewritten line is stripped so the document stays well-formed.
    """
    if original_prefix not in content:
        return None

    lines = content.splitlines(keepends=True)
    out: list[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if original_prefix not in line:
            out.append(line)
            continue

        out.append(line.replace(original_prefix, patched_prefix))
        if remove_integrity and i < len(lines) and _INTEGRITY_LINE.match(lines[i]):
            i += 1
            if i < len(lines) and _CLOSING_LINE.match(lines[i]):
                out[-1] = _TRAILING_SEPARATOR.sub(r"\1", out[-1])
    return "".join(out)


def _present(content: str, snippet: str, other: str) -> bool:
    # A snippet embedded in the other snippet only counts outside of it.
    if snippet in other:
        return snippet in content.replace(other, "")
    return snippet in content


def swap_snippet(content: str, old: str, new: str) -> Optional[str]:
    """Replace ``old`` with ``new`` unless ``old`` is absent or ``new`` is already there."""
    if not _present(content, old, new) or _present(content, new, old):
        return None
    return content.replace(old, new)


class TextualPatcher:
    """Applies, reverts and inspects a single patch target.

    A missing file is never an error: not every environment checks out every
    repository, so all operations on it are no-ops.
    """

    def __init__(self, *, vcs: VcsPort) -> None:
        self._vcs = vcs

    def apply(self, target: PatchTarget) -> PatchOutcome:
        content = _read(target.path)
        if content is None:
            return PatchOutcome.NOOP

        if isinstance(target, TextReplace):
            new = None if content == target.patched_content else target.patched_content
        elif isinstance(target, LockfileUrlRewrite):
            new = rewrite_lockfile_urls(
                content,
                target.original_url_prefix,
                target.patched_url_prefix,
                remove_integrity=target.remove_adjacent_integrity_line,
            )
        elif isinstance(target, SourceLiteralPatch):
            new = swap_snippet(content, target.original_snippet, target.patched_snippet)
        else:
            raise TypeError(f"Unsupported patch target: {type(target).__name__}")

        if new is None:
            return PatchOutcome.NOOP
        _write(target.path, new)
        return PatchOutcome.APPLIED

    def revert(self, target: PatchTarget) -> PatchOutcome:
        content = _read(target.path)
        if content is None:
            return PatchOutcome.NOOP

        if isinstance(target, TextReplace):
            # Written unconditionally.
            _write(target.path, target.original_content)
            return PatchOutcome.NOOP if content == target.original_content else PatchOutcome.REVERTED

        if isinstance(target, LockfileUrlRewrite):
            # Dropped integrity lines come back from version control.
            if target.patched_url_prefix not in content:
                return PatchOutcome.NOOP
            self._vcs.restore_tracked_file(target.path)
            return PatchOutcome.REVERTED

        if isinstance(target, SourceLiteralPatch):
            new = swap_snippet(content, target.patched_snippet, target.original_snippet)
            if new is None:
                return PatchOutcome.NOOP
            _write(target.path, new)
            return PatchOutcome.REVERTED

        raise TypeError(f"Unsupported patch target: {type(target).__name__}")

    def inspect(self, target: PatchTarget) -> PatchState:
        content = _read(target.path)
        if content is None:
            return PatchState.NOT_FOUND

        if isinstance(target, TextReplace):
            applied = content == target.patched_content
        elif isinstance(target, LockfileUrlRewrite):
            applied = (
                target.patched_url_prefix in content
                and target.original_url_prefix not in content
            )
        elif isinstance(target, SourceLiteralPatch):
            applied = _present(content, target.patched_snippet, target.original_snippet)
        else:
            raise TypeError(f"Unsupported patch target: {type(target).__name__}")
        return PatchState.APPLIED if applied else PatchState.ORIGINAL


def _read(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    # newline="" keeps CRLF lock files byte-exact
    with path.open("r", encoding="utf-8", newline="") as fh:
        return fh.read()


def _write(path: Path, content: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)
