from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..core.domain.exceptions import ContainerRuntimeError


class DockerRuntime:
    """Container runtime port backed by the docker CLI."""

    def __init__(self, *, docker_bin: str = "docker", timeout_seconds: Optional[float] = None) -> None:
        self._docker = docker_bin
        self._timeout = timeout_seconds

    def start(self, container: str) -> None:
        self._run(["start", container])

    def copy_into(self, container: str, source: str, dest: str) -> None:
        self._run(["cp", source, f"{container}:{dest}"])

    def exec(self, container: str, argv: Sequence[str], *, user: Optional[str] = None) -> str:
        cmd = ["exec"]
        if user:
            cmd.extend(["--user", user])
        cmd.append(container)
        cmd.extend(argv)
        return self._run(cmd).stdout

    def restart(self, container: str) -> None:
        self._run(["restart", container])

    def build(self, project_dir: Path) -> None:
        self._run(["compose", "build"], cwd=project_dir)

    def up(self, project_dir: Path) -> None:
        self._run(["compose", "up", "-d"], cwd=project_dir)

    def _run(self, args: list[str], *, cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
        argv = [self._docker, *args]
        try:
            proc = subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise ContainerRuntimeError(
                argv, 127, "Docker CLI not found. Ensure `docker` is installed and on PATH."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ContainerRuntimeError(argv, -1, f"Timed out after {self._timeout}s") from e

        if proc.returncode != 0:
            raise ContainerRuntimeError(argv, proc.returncode, (proc.stderr or proc.stdout).strip())
        return proc
