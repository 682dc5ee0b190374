from __future__ import annotations

import os
import stat
import shutil
from pathlib import Path
from typing import Callable


def _clear_readonly(func: Callable[[str], None], path: str, exc: BaseException) -> None:
    """Make a read-only entry writable and retry the failed removal.

    git marks pack and object files read-only, which makes plain rmtree fail
    on Windows.
    """
    os.chmod(path, stat.S_IWUSR | stat.S_IRUSR)
    func(path)


def rmtree_force(path: Path) -> None:
    """Remove a directory tree (e.g. a broken or partial clone) if it exists."""
    if not path.exists() and not path.is_symlink():
        return
    if path.is_symlink() or path.is_file():
        path.unlink()
        return
    shutil.rmtree(path, onexc=_clear_readonly)
