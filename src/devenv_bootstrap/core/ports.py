from __future__ import annotations

import time
from pathlib import Path
from typing import Protocol, Optional, Sequence

from .domain.models import CloneOutcome


class VcsPort(Protocol):
    """Port for the narrow set of version-control operations the engine needs.

    Implementations must not raise for an ordinary failed clone; the failure is
    reported through ``CloneOutcome`` so the caller can classify its output.
    """

    def clone(self, url: str, dest: Path) -> CloneOutcome:
        """Clone ``url`` into ``dest`` and return exit code plus combined output."""
        ...

    def checkout(
        self,
        repo_dir: Path,
        *,
        paths: Sequence[str] = (".",),
        ref: str = "HEAD",
        exclude: Sequence[str] = (),
    ) -> None:
        """Materialize ``paths`` from ``ref`` into the working tree, skipping ``exclude``."""
        ...

    def force_checkout(self, repo_dir: Path, *, ref: str = "HEAD") -> None:
        """Forcefully re-checkout the whole working tree from ``ref``."""
        ...

    def ls_tree(self, repo_dir: Path, *, ref: str, path: str) -> list[str]:
        """List tracked file paths under ``path`` straight from the tree object."""
        ...

    def show_blob(self, repo_dir: Path, *, ref: str, path: str) -> bytes:
        """Read a blob's exact bytes from the object store."""
        ...

    def restore_tracked_file(self, path: Path) -> None:
        """Restore a tracked file to its committed content."""
        ...

    def index_remove(self, repo_dir: Path, path: str) -> None:
        """Remove ``path`` (recursively) from the index only."""
        ...

    def index_add(self, repo_dir: Path, paths: Sequence[str]) -> None:
        """Stage ``paths``."""
        ...


class ContainerRuntimePort(Protocol):
    """Port for the container runtime primitives."""

    def start(self, container: str) -> None:
        ...

    def copy_into(self, container: str, source: str, dest: str) -> None:
        """Copy a host path into a running container (docker cp semantics: a trailing
        ``/.`` on ``source`` copies a directory's contents)."""
        ...

    def exec(self, container: str, argv: Sequence[str], *, user: Optional[str] = None) -> str:
        """Execute a command inside a running container and return its output."""
        ...

    def restart(self, container: str) -> None:
        ...

    def build(self, project_dir: Path) -> None:
        """Build the service images of a compose project."""
        ...

    def up(self, project_dir: Path) -> None:
        """Start the services of a compose project in the background."""
        ...


class HttpProbePort(Protocol):
    """Port for status-code probes."""

    def get_status(self, url: str, *, timeout: float) -> Optional[int]:
        """Return the response status code, or None if no connection could be made."""
        ...


class ArchivePort(Protocol):
    """Port for unpacking backup archives."""

    def extract(self, archive: Path, dest: Path) -> None:
        """Extract a gzip-tar archive into ``dest``."""
        ...


class ClockPort(Protocol):
    def sleep(self, seconds: float) -> None:
        ...

    def monotonic(self) -> float:
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Event names are passed as the message; structured fields as keyword arguments.
    """

    def debug(self, message: str, **kwargs) -> None:
        ...

    def info(self, message: str, **kwargs) -> None:
        ...

    def warning(self, message: str, **kwargs) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        ...

    def exception(self, message: str, **kwargs) -> None:
        ...


class SystemClock:
    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def monotonic(self) -> float:
        return time.monotonic()
