"""Static environment manifest: repositories, patch set and expected registry packages.

The tables are built once from the application config and handed explicitly
to the services that need them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from ..core.domain.models import (
    LockfileUrlRewrite,
    PatchTarget,
    RegistryArtifact,
    RepoDescriptor,
    SourceLiteralPatch,
    TextReplace,
)
from .config import AppConfig


REPOSITORY_NAMES = ("platform-api", "web-app", "ui-kit")

# Directories committed with names Windows cannot materialize.
REPAIR_RULES = {
    "ui-kit": "src/icons ",
}

EXPECTED_PACKAGES = (
    "@acme/ui-kit",
    "@acme/design-tokens",
    "@acme/eslint-config",
    "@acme/tsconfig",
    "@acme/api-client",
    "@acme/logger",
    "@acme/feature-flags",
    "@acme/test-utils",
)

YARN_UPSTREAM_URL = "https://registry.yarnpkg.com"

UPSTREAM_NPMRC = (
    "@acme:registry=https://npm.pkg.github.com\n"
    "//npm.pkg.github.com/:_authToken=${NPM_TOKEN}\n"
)


@dataclass(frozen=True)
class Manifest:
    repositories: tuple[RepoDescriptor, ...]
    repair_rules: Mapping[str, str]
    patch_targets: tuple[PatchTarget, ...]
    artifacts: tuple[RegistryArtifact, ...]


def local_npmrc(registry_url: str) -> str:
    url = registry_url.rstrip("/")
    return f"registry={url}/\n@acme:registry={url}/\n"


def build_repositories(config: AppConfig) -> tuple[RepoDescriptor, ...]:
    base = config.workspace.git_base_url.rstrip("/")
    return tuple(RepoDescriptor(name=name, url=f"{base}/{name}.git") for name in REPOSITORY_NAMES)


def build_patch_targets(config: AppConfig) -> tuple[PatchTarget, ...]:
    root = config.workspace.root
    local = config.registry.url.rstrip("/") + "/"
    npm_upstream = config.registry.upstream_url.rstrip("/") + "/"
    npmrc = local_npmrc(config.registry.url)

    def auth(repo: str) -> TextReplace:
        return TextReplace(
            path=root / repo / ".npmrc",
            original_content=UPSTREAM_NPMRC,
            patched_content=npmrc,
        )

    return (
        auth("platform-api"),
        LockfileUrlRewrite(
            path=root / "platform-api" / "package-lock.json",
            original_url_prefix=npm_upstream,
            patched_url_prefix=local,
        ),
        SourceLiteralPatch(
            path=root / "platform-api" / "src" / "config" / "database.ts",
            original_snippet="ssl: { rejectUnauthorized: true }",
            patched_snippet="ssl: false",
        ),
        auth("web-app"),
        LockfileUrlRewrite(
            path=root / "web-app" / "package-lock.json",
            original_url_prefix=npm_upstream,
            patched_url_prefix=local,
        ),
        SourceLiteralPatch(
            path=root / "web-app" / "vite.config.ts",
            original_snippet="host: 'localhost',",
            patched_snippet="host: '0.0.0.0',",
        ),
        auth("ui-kit"),
        LockfileUrlRewrite(
            path=root / "ui-kit" / "yarn.lock",
            original_url_prefix=YARN_UPSTREAM_URL + "/",
            patched_url_prefix=local,
        ),
    )


def build_manifest(config: AppConfig) -> Manifest:
    return Manifest(
        repositories=build_repositories(config),
        repair_rules=MappingProxyType(dict(REPAIR_RULES)),
        patch_targets=build_patch_targets(config),
        artifacts=tuple(RegistryArtifact(package_name=name) for name in EXPECTED_PACKAGES),
    )


def registry_archive_path(config: AppConfig) -> Path:
    """Configured backup archive, defaulting to <workspace>/registry-backup.tar.gz."""
    if config.registry.archive_path is not None:
        return config.registry.archive_path
    return config.workspace.root / "registry-backup.tar.gz"
