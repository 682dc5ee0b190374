from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from ..domain.exceptions import CheckoutRepairError
from ..domain.models import RepairResult
from ..ports import LoggerPort, VcsPort


REFERENCE_SUFFIXES = frozenset({
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".json",
    ".vue", ".css", ".scss", ".html",
})
SKIP_DIRS = frozenset({".git", "node_modules"})

_RESERVED_CHARS = re.compile(r'[<>:"|?*\x00-\x1f]')


def sanitize_component(name: str) -> str:
    """Make one path component representable on Windows filesystems."""
    cleaned = _RESERVED_CHARS.sub("", name).rstrip(" .")
    if not cleaned:
        raise CheckoutRepairError(f"Path component {name!r} has no legal characters")
    return cleaned


def sanitize_path(path: str) -> str:
    return "/".join(sanitize_component(part) for part in PurePosixPath(path).parts)


class CheckoutRepair:
    """Reconstructs files the host filesystem cannot check out.

    Files under ``illegal_path`` are read straight from the object store and
    written to a sanitized path; references in sources are rewritten and the
    index is updated so the workaround shows no pending working-tree changes.
    """

    def __init__(self, *, vcs: VcsPort, logger: LoggerPort, ref: str = "HEAD") -> None:
        self._vcs = vcs
        self._logger = logger
        self._ref = ref

    def repair(self, repo_dir: Path, illegal_path: str) -> RepairResult:
        illegal_path = illegal_path.strip("/")
        corrected_path = sanitize_path(illegal_path)
        if corrected_path == illegal_path:
            raise CheckoutRepairError(f"{illegal_path!r} contains no illegal characters")

        # 1) everything that can be materialized normally
        self._vcs.checkout(repo_dir, paths=(".",), ref=self._ref, exclude=(illegal_path,))

        # 2) tracked files under the illegal path, from the tree object
        tracked = self._vcs.ls_tree(repo_dir, ref=self._ref, path=illegal_path)
        if not tracked:
            raise CheckoutRepairError(
                f"No tracked files under {illegal_path!r} at {self._ref} in {repo_dir}"
            )

        # 3) blob bytes to the corrected location
        recovered: list[str] = []
        for rel in tracked:
            target_rel = corrected_path + rel[len(illegal_path):]
            try:
                data = self._vcs.show_blob(repo_dir, ref=self._ref, path=rel)
            except Exception as e:
                raise CheckoutRepairError(f"Cannot read blob {self._ref}:{rel}: {e}") from e
            target = repo_dir / target_rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            recovered.append(target_rel)
            self._logger.debug("repair_file_recovered", source=rel, target=target_rel)

        # 4) references to the old directory name
        old_fragment = PurePosixPath(illegal_path).name + "/"
        new_fragment = PurePosixPath(corrected_path).name + "/"
        rewritten = self._rewrite_references(repo_dir, old_fragment, new_fragment)

        # 5) index: drop the unrepresentable paths, stage their replacements
        self._vcs.index_remove(repo_dir, illegal_path)
        self._vcs.index_add(repo_dir, recovered + rewritten)

        self._logger.info(
            "repair_done",
            repo_dir=str(repo_dir),
            illegal_path=illegal_path,
            corrected_path=corrected_path,
            files_recovered=len(recovered),
            references_rewritten=len(rewritten),
        )
        return RepairResult(
            files_recovered=len(recovered),
            references_rewritten=len(rewritten),
            recovered_paths=tuple(recovered),
        )

    def _rewrite_references(self, repo_dir: Path, old: str, new: str) -> list[str]:
        changed: list[str] = []
        for path in sorted(_iter_source_files(repo_dir)):
            try:
                with path.open("r", encoding="utf-8", newline="") as fh:
                    text = fh.read()
            except UnicodeDecodeError:
                continue
            if old not in text:
                continue
            with path.open("w", encoding="utf-8", newline="") as fh:
                fh.write(text.replace(old, new))
            changed.append(path.relative_to(repo_dir).as_posix())
        return changed


def _iter_source_files(root: Path):
    for entry in root.iterdir():
        # links may point outside the checkout
        if entry.is_symlink():
            continue
        if entry.is_dir():
            if entry.name not in SKIP_DIRS:
                yield from _iter_source_files(entry)
        elif entry.suffix in REFERENCE_SUFFIXES:
            yield entry
