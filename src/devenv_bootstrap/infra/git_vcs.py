from __future__ import annotations

from pathlib import Path
from typing import Sequence

from git import Repo
from git.exc import GitCommandError

from ..core.domain.models import CloneOutcome


class GitVcs:
    """GitPython implementation of the version-control port."""

    def clone(self, url: str, dest: Path) -> CloneOutcome:
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            repo = Repo.clone_from(url, dest)
        except GitCommandError as e:
            output = "\n".join(part for part in (_text(e.stdout), _text(e.stderr)) if part)
            status = e.status if isinstance(e.status, int) else 1
            return CloneOutcome(exit_code=status or 1, output=output or str(e))
        repo.close()
        return CloneOutcome(exit_code=0)

    def checkout(
        self,
        repo_dir: Path,
        *,
        paths: Sequence[str] = (".",),
        ref: str = "HEAD",
        exclude: Sequence[str] = (),
    ) -> None:
        pathspecs = list(paths) + [f":(exclude,literal){p}" for p in exclude]
        with Repo(repo_dir) as repo:
            repo.git.checkout(ref, "--", *pathspecs)

    def force_checkout(self, repo_dir: Path, *, ref: str = "HEAD") -> None:
        with Repo(repo_dir) as repo:
            repo.git.checkout("-f", ref)

    def ls_tree(self, repo_dir: Path, *, ref: str, path: str) -> list[str]:
        """List blob paths at or below ``path``, read from the commit tree.

        Walks tree objects instead of parsing ``git ls-tree`` output so that
        names with trailing spaces survive unquoted.
        """
        path = path.strip("/")
        with Repo(repo_dir) as repo:
            tree = repo.commit(ref).tree
            return [
                item.path
                for item in tree.traverse()
                if item.type == "blob"
                and (item.path == path or item.path.startswith(path + "/"))
            ]

    def show_blob(self, repo_dir: Path, *, ref: str, path: str) -> bytes:
        with Repo(repo_dir) as repo:
            blob = repo.commit(ref).tree.join(path)
            return blob.data_stream.read()

    def restore_tracked_file(self, path: Path) -> None:
        with Repo(path.parent, search_parent_directories=True) as repo:
            rel = path.resolve().relative_to(Path(repo.working_tree_dir).resolve())
            repo.git.checkout("HEAD", "--", rel.as_posix())

    def index_remove(self, repo_dir: Path, path: str) -> None:
        with Repo(repo_dir) as repo:
            repo.git.rm("--cached", "-r", "--quiet", "--ignore-unmatch", "--", f":(literal){path}")

    def index_add(self, repo_dir: Path, paths: Sequence[str]) -> None:
        if not paths:
            return
        with Repo(repo_dir) as repo:
            repo.index.add(list(paths))


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).strip()
