from __future__ import annotations

from pathlib import Path

from dependency_injector import containers, providers

from .config import AppConfig
from .manifest import build_manifest
from ..core.domain.models import RegistrySettings
from ..core.ports import SystemClock
from ..core.services import (
    CheckoutRepair,
    PatchOrchestrator,
    RegistryRestorer,
    RepositoryAcquisitionManager,
    TextualPatcher,
)
from ..core.usecases.bootstrap import BootstrapUseCase
from ..core.usecases.ensure_repos import EnsureReposUseCase
from ..core.usecases.patches import ApplyPatchesUseCase, PatchStatusUseCase, RevertPatchesUseCase
from ..core.usecases.restore_registry import RestoreRegistryUseCase
from ..infra.archive import TarArchive
from ..infra.docker_runtime import DockerRuntime
from ..infra.git_vcs import GitVcs
from ..infra.http_probe import HttpProbe
from ..infra.logging import RunLogger


def _compose_dir(app_config: AppConfig) -> Path:
    return app_config.workspace.compose_dir or app_config.workspace.root


class Container(containers.DeclarativeContainer):
    """DI container with Pydantic BaseSettings support."""

    # Flat values for providers; the model itself for the manifest builders
    config = providers.Configuration()
    app_config = providers.Singleton(AppConfig)

    manifest = providers.Singleton(build_manifest, app_config)

    logger = providers.Resource(
        RunLogger,
        run_name=config.runtime.run_name,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Adapters
    vcs = providers.Singleton(GitVcs)
    runtime = providers.Singleton(DockerRuntime)
    http = providers.Singleton(HttpProbe)
    archive = providers.Singleton(TarArchive)
    clock = providers.Singleton(SystemClock)

    registry_settings = providers.Factory(
        RegistrySettings,
        url=config.registry.url,
        container=config.registry.container,
        storage_path=config.registry.storage_path,
        db_file=config.registry.db_file,
        owner=config.registry.owner,
        archive_storage_dir=config.registry.archive_storage_dir,
        ready_timeout_seconds=config.registry.ready_timeout_seconds,
        ready_interval_seconds=config.registry.ready_interval_seconds,
        verify_attempts=config.registry.verify_attempts,
        verify_interval_seconds=config.registry.verify_interval_seconds,
        request_timeout_seconds=config.registry.request_timeout_seconds,
    )

    # Domain services
    patcher = providers.Factory(TextualPatcher, vcs=vcs)

    patch_orchestrator = providers.Factory(
        PatchOrchestrator,
        targets=manifest.provided.patch_targets,
        patcher=patcher,
        logger=logger,
    )

    checkout_repair = providers.Factory(CheckoutRepair, vcs=vcs, logger=logger)

    repository_manager = providers.Factory(
        RepositoryAcquisitionManager,
        vcs=vcs,
        repair=checkout_repair,
        clock=clock,
        logger=logger,
        repair_rules=manifest.provided.repair_rules,
        attempts=config.clone.attempts,
        retry_delay=config.clone.retry_delay_seconds,
    )

    registry_restorer = providers.Factory(
        RegistryRestorer,
        settings=registry_settings,
        runtime=runtime,
        http=http,
        archive=archive,
        clock=clock,
        logger=logger,
        scratch_root=config.directories.scratch_dir,
    )

    # Use cases
    ensure_repos_uc = providers.Factory(
        EnsureReposUseCase,
        manager=repository_manager,
        repositories=manifest.provided.repositories,
        workspace_root=config.workspace.root,
    )

    apply_patches_uc = providers.Factory(ApplyPatchesUseCase, orchestrator=patch_orchestrator)
    revert_patches_uc = providers.Factory(RevertPatchesUseCase, orchestrator=patch_orchestrator)
    patch_status_uc = providers.Factory(PatchStatusUseCase, orchestrator=patch_orchestrator)

    restore_registry_uc = providers.Factory(
        RestoreRegistryUseCase,
        restorer=registry_restorer,
        artifacts=manifest.provided.artifacts,
    )

    bootstrap_uc = providers.Factory(
        BootstrapUseCase,
        restore_uc=restore_registry_uc,
        ensure_uc=ensure_repos_uc,
        orchestrator=patch_orchestrator,
        runtime=runtime,
        logger=logger,
        compose_dir=providers.Callable(_compose_dir, app_config),
    )
