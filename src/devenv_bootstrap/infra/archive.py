from __future__ import annotations

import tarfile
from pathlib import Path


class TarArchive:
    def extract(self, archive: Path, dest: Path) -> None:
        """Extract a gzip-tar archive, refusing members that escape ``dest``."""
        dest.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive, mode="r:gz") as tar:
            tar.extractall(dest, filter="data")
