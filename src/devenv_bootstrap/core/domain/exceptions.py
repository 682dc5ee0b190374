"""Domain exceptions for devenv_bootstrap."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import EnsureResult


class BootstrapError(Exception):
    """Base class for failures that abort a bootstrap phase."""


class ArchiveNotFoundError(BootstrapError):
    """Raised when the registry backup archive does not exist."""

    def __init__(self, archive_path: Path) -> None:
        self.archive_path = archive_path
        super().__init__(f"Registry backup archive not found: {archive_path}")


class RegistryUnavailableError(BootstrapError):
    """Raised when the registry never accepts connections within the polling window."""

    def __init__(self, url: str, timeout_seconds: float) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Registry at {url} not reachable after {timeout_seconds:g}s")


class ArtifactsMissingError(BootstrapError):
    """Raised when expected packages are still missing after every verification poll."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(
            f"{len(self.missing)} expected package(s) missing from registry: "
            + ", ".join(self.missing)
        )


class RepositoryAcquisitionError(BootstrapError):
    """Raised after the clone phase when one or more repositories could not be acquired."""

    def __init__(self, result: "EnsureResult") -> None:
        self.result = result
        super().__init__("Failed to acquire repositories: " + ", ".join(result.failed))


class CheckoutRepairError(BootstrapError):
    """Raised when a checkout cannot be reconstructed from the object store."""


class ContainerRuntimeError(BootstrapError):
    """Raised when a container runtime command fails."""

    def __init__(self, argv: Sequence[str], returncode: int, output: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        message = f"Command failed with exit code {returncode}: {' '.join(self.argv)}"
        if output:
            message += f"\n{output}"
        super().__init__(message)


class PatchApplyError(BootstrapError):
    """Raised when one or more patch targets failed to apply."""

    def __init__(self, failed: Sequence[str]) -> None:
        self.failed = tuple(failed)
        super().__init__("Failed to apply patches: " + ", ".join(self.failed))
