from __future__ import annotations

from pathlib import Path

from dependency_injector import providers

from .config import AppConfig
from .container import Container
from .manifest import registry_archive_path
from ..core.domain.models import (
    EnsureResult,
    PatchStatusEntry,
    PatchSummary,
    VerificationResult,
)
from ..core.usecases.bootstrap import BootstrapReport


def _create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    container = Container()

    if config is None:
        config = AppConfig()

    container.config.from_pydantic(config)
    container.app_config.override(providers.Object(config))
    container.init_resources()

    return container


def clone_repositories(*, strict: bool = False, config: AppConfig | None = None) -> EnsureResult:
    """Clone every configured repository that is not already present.

    Args:
        strict: Raise RepositoryAcquisitionError if any repository failed
        config: Optional config for testing. If None, loads from env vars.
    """
    container = _create_container(config)
    try:
        return container.ensure_repos_uc().execute(strict=strict)
    finally:
        container.shutdown_resources()


def apply_patches(config: AppConfig | None = None) -> PatchSummary:
    """Redirect manifests and lock files to the local registry."""
    container = _create_container(config)
    try:
        return container.apply_patches_uc().execute()
    finally:
        container.shutdown_resources()


def revert_patches(config: AppConfig | None = None) -> PatchSummary:
    """Restore every patched file to its committed state."""
    container = _create_container(config)
    try:
        return container.revert_patches_uc().execute()
    finally:
        container.shutdown_resources()


def patch_status(config: AppConfig | None = None) -> list[PatchStatusEntry]:
    """Derive each patch target's state from the files on disk."""
    container = _create_container(config)
    try:
        return container.patch_status_uc().execute()
    finally:
        container.shutdown_resources()


def restore_registry(
    archive_path: Path | None = None,
    config: AppConfig | None = None,
) -> VerificationResult:
    """Restore the local registry from a backup archive and verify expected packages.

    Args:
        archive_path: Archive override; defaults to the configured archive
        config: Optional config for testing. If None, loads from env vars.
    """
    container = _create_container(config)
    try:
        archive = archive_path or registry_archive_path(container.app_config())
        return container.restore_registry_uc().execute(archive_path=archive)
    finally:
        container.shutdown_resources()


def bootstrap(
    *,
    archive_path: Path | None = None,
    restore: bool = True,
    build: bool = True,
    start: bool = True,
    config: AppConfig | None = None,
) -> BootstrapReport:
    """Run the whole environment setup: restore, clone, patch, build, revert, start.

    Args:
        archive_path: Archive override; defaults to the configured archive
        restore: Restore the registry first
        build: Build service images while patches are applied
        start: Start services once patches are reverted
        config: Optional config for testing. If None, loads from env vars.
    """
    container = _create_container(config)
    try:
        archive = None
        if restore:
            archive = archive_path or registry_archive_path(container.app_config())
        return container.bootstrap_uc().execute(archive_path=archive, build=build, start=start)
    finally:
        container.shutdown_resources()
