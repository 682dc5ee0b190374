from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import quote

from ..domain.exceptions import (
    ArchiveNotFoundError,
    ArtifactsMissingError,
    BootstrapError,
    RegistryUnavailableError,
)
from ..domain.models import RegistryArtifact, RegistrySettings, VerificationResult
from ..ports import (
    ArchivePort,
    ClockPort,
    ContainerRuntimePort,
    HttpProbePort,
    LoggerPort,
)


class RegistryRestorer:
    """Repopulates the local package registry from a backup and verifies it.

    The registry container must already exist; the restorer starts it if it is
    stopped, copies the backup in, fixes ownership for the non-root registry
    process, restarts it and waits until it answers on its root URL.
    """

    def __init__(
        self,
        *,
        settings: RegistrySettings,
        runtime: ContainerRuntimePort,
        http: HttpProbePort,
        archive: ArchivePort,
        clock: ClockPort,
        logger: LoggerPort,
        scratch_root: Optional[Path] = None,
    ) -> None:
        self._settings = settings
        self._runtime = runtime
        self._http = http
        self._archive = archive
        self._clock = clock
        self._logger = logger
        self._scratch_root = scratch_root

    def restore(self, archive_path: Path) -> None:
        s = self._settings
        if not archive_path.is_file():
            raise ArchiveNotFoundError(archive_path)

        self._logger.info("registry_restore_started", archive=str(archive_path), container=s.container)
        if self._scratch_root is not None:
            self._scratch_root.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="registry-restore-", dir=self._scratch_root) as tmp:
            scratch = Path(tmp)
            self._archive.extract(archive_path, scratch)

            storage = scratch / s.archive_storage_dir
            if not storage.is_dir():
                raise BootstrapError(
                    f"Archive {archive_path} has no '{s.archive_storage_dir}/' directory"
                )
            db_file = scratch / s.db_file

            self._runtime.start(s.container)
            storage_path = s.storage_path.rstrip("/")
            # One bulk copy of the directory's contents ("/." on the source); per-package
            # copies can flatten scoped package directories.
            self._runtime.copy_into(s.container, f"{storage}/.", storage_path)
            if db_file.is_file():
                self._runtime.copy_into(s.container, str(db_file), f"{storage_path}/{s.db_file}")
            elif not (storage / s.db_file).is_file():
                self._logger.warning("registry_db_missing", db_file=s.db_file)

        # The registry runs as a non-root user and cannot read root-owned files.
        self._runtime.exec(s.container, ["chown", "-R", s.owner, s.storage_path], user="root")
        self._runtime.restart(s.container)
        self.wait_until_ready()
        self._logger.info("registry_restore_done", container=s.container)

    def wait_until_ready(self) -> None:
        s = self._settings
        deadline = self._clock.monotonic() + s.ready_timeout_seconds
        while True:
            status = self._http.get_status(s.url, timeout=s.request_timeout_seconds)
            if status is not None:
                self._logger.info("registry_ready", url=s.url, status=status)
                return
            if self._clock.monotonic() >= deadline:
                raise RegistryUnavailableError(s.url, s.ready_timeout_seconds)
            self._clock.sleep(s.ready_interval_seconds)

    def verify(self, artifacts: Sequence[RegistryArtifact]) -> VerificationResult:
        """Poll each artifact's metadata endpoint until all resolve or attempts run out.

        Each poll only probes artifacts still missing. Raises
        ``ArtifactsMissingError`` naming every artifact that never resolved.
        """
        s = self._settings
        pending = [a.package_name for a in artifacts]
        found: list[str] = []
        polls = 0

        while pending and polls < s.verify_attempts:
            if polls:
                self._clock.sleep(s.verify_interval_seconds)
            polls += 1
            still_missing = []
            for name in pending:
                status = self._http.get_status(self.artifact_url(name), timeout=s.request_timeout_seconds)
                if status == 200:
                    found.append(name)
                else:
                    still_missing.append(name)
            pending = still_missing
            self._logger.info("registry_verify_poll", poll=polls, missing=pending)

        result = VerificationResult(found=tuple(found), missing=tuple(pending), polls=polls)
        if not result.ok:
            self._logger.error("registry_verify_failed", missing=list(result.missing))
            raise ArtifactsMissingError(result.missing)
        return result

    def artifact_url(self, package_name: str) -> str:
        # Scoped names are addressed as @scope%2fname.
        return f"{self._settings.url.rstrip('/')}/{quote(package_name, safe='@')}"
