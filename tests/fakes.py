"""Fakes for every core port."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

from devenv_bootstrap.core.domain.models import CloneOutcome


class FakeLogger:
    def __init__(self):
        self.events: list[tuple[str, str, dict]] = []

    def _log(self, level: str, message: str, kwargs: dict) -> None:
        self.events.append((level, message, kwargs))

    def debug(self, message: str, **kwargs) -> None:
        self._log("debug", message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log("info", message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log("warning", message, kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._log("error", message, kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self._log("exception", message, kwargs)

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lvl, m, _ in self.events if level is None or lvl == level]


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def monotonic(self) -> float:
        return self.now


class FakeVcs:
    """Scripted VCS.

    ``clone_script`` maps a URL to a list of outcomes, consumed one per attempt;
    the last outcome repeats. A successful outcome creates a working file.
    """

    def __init__(self, clone_script: dict[str, list[CloneOutcome]] | None = None):
        self.clone_script = clone_script or {}
        self.clone_calls: list[tuple[str, Path]] = []
        self.checkout_calls: list[dict] = []
        self.force_checkout_calls: list[Path] = []
        self.restored: list[Path] = []
        self.index_removed: list[tuple[Path, str]] = []
        self.index_added: list[tuple[Path, list[str]]] = []
        self.tree: dict[str, bytes] = {}
        self.restore_content: dict[Path, str] = {}

    def clone(self, url: str, dest: Path) -> CloneOutcome:
        self.clone_calls.append((url, dest))
        script = self.clone_script.get(url, [CloneOutcome(0)])
        attempt = sum(1 for u, _ in self.clone_calls if u == url) - 1
        outcome = script[min(attempt, len(script) - 1)]
        dest.mkdir(parents=True, exist_ok=True)
        (dest / ".git").mkdir(exist_ok=True)
        if outcome.exit_code == 0:
            (dest / "README.md").write_text("cloned", encoding="utf-8")
        return outcome

    def attempts_for(self, url: str) -> int:
        return sum(1 for u, _ in self.clone_calls if u == url)

    def checkout(self, repo_dir: Path, *, paths: Sequence[str] = (".",), ref: str = "HEAD", exclude: Sequence[str] = ()) -> None:
        self.checkout_calls.append({"repo_dir": repo_dir, "paths": list(paths), "ref": ref, "exclude": list(exclude)})

    def force_checkout(self, repo_dir: Path, *, ref: str = "HEAD") -> None:
        self.force_checkout_calls.append(repo_dir)

    def ls_tree(self, repo_dir: Path, *, ref: str, path: str) -> list[str]:
        path = path.strip("/")
        return [p for p in self.tree if p == path or p.startswith(path + "/")]

    def show_blob(self, repo_dir: Path, *, ref: str, path: str) -> bytes:
        return self.tree[path]

    def restore_tracked_file(self, path: Path) -> None:
        self.restored.append(path)
        if path in self.restore_content:
            path.write_text(self.restore_content[path], encoding="utf-8")

    def index_remove(self, repo_dir: Path, path: str) -> None:
        self.index_removed.append((repo_dir, path))

    def index_add(self, repo_dir: Path, paths: Sequence[str]) -> None:
        self.index_added.append((repo_dir, list(paths)))


class FakeRuntime:
    def __init__(self, *, on_restart: Optional[Callable[[], None]] = None, fail_on: str | None = None):
        self.calls: list[tuple] = []
        self._on_restart = on_restart
        self._fail_on = fail_on

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self._fail_on == call[0]:
            from devenv_bootstrap.core.domain.exceptions import ContainerRuntimeError
            raise ContainerRuntimeError(["docker", call[0]], 1, "boom")

    def start(self, container: str) -> None:
        self._record("start", container)

    def copy_into(self, container: str, source: str, dest: str) -> None:
        self._record("copy_into", container, source, dest)

    def exec(self, container: str, argv: Sequence[str], *, user: Optional[str] = None) -> str:
        self._record("exec", container, list(argv), user)
        return ""

    def restart(self, container: str) -> None:
        self._record("restart", container)
        if self._on_restart:
            self._on_restart()

    def build(self, project_dir: Path) -> None:
        self._record("build", project_dir)

    def up(self, project_dir: Path) -> None:
        self._record("up", project_dir)

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeHttp:
    """Returns statuses from ``responder(url, call_index)``."""

    def __init__(self, responder: Callable[[str, int], Optional[int]] | None = None):
        self.calls: list[str] = []
        self._responder = responder or (lambda url, n: 200)

    def get_status(self, url: str, *, timeout: float) -> Optional[int]:
        n = sum(1 for u in self.calls if u == url)
        self.calls.append(url)
        return self._responder(url, n)


class FakeArchive:
    """Writes a registry backup layout instead of reading a tarball."""

    def __init__(self, *, with_storage: bool = True, db_file: str = ".verdaccio-db.json"):
        self.extracted: list[tuple[Path, Path]] = []
        self._with_storage = with_storage
        self._db_file = db_file

    def extract(self, archive: Path, dest: Path) -> None:
        self.extracted.append((archive, dest))
        if self._with_storage:
            pkg = dest / "storage" / "@acme" / "ui-kit"
            pkg.mkdir(parents=True)
            (pkg / "package.json").write_text("{}", encoding="utf-8")
            (dest / self._db_file).write_text('{"list": []}', encoding="utf-8")
