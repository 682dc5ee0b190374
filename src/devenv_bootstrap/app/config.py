from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "devenv_bootstrap"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


class DirectoryConfig(BaseSettings):
    """Directory configuration with computed paths."""

    model_config = SettingsConfigDict(env_prefix="DEVENV_BOOTSTRAP_DIRECTORIES__")

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for devenv_bootstrap logs and scratch data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Directory for per-run JSONL logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @computed_field
    @property
    def scratch_dir(self) -> Path:
        """Directory for temporary archive extraction."""
        path = self.home / "scratch"
        path.mkdir(parents=True, exist_ok=True)
        return path


class WorkspaceConfig(BaseSettings):
    """Where repositories are cloned and services are composed."""

    model_config = SettingsConfigDict(env_prefix="DEVENV_BOOTSTRAP_WORKSPACE__")

    root: Path = Field(
        default_factory=Path.cwd,
        description="Workspace root; each repository is cloned into <root>/<name>",
    )

    compose_dir: Path | None = Field(
        default=None,
        description="Directory holding the compose file (defaults to the workspace root)",
    )

    git_base_url: str = Field(
        default="git@github.com:acme",
        description="Base URL repository names are appended to",
    )


class CloneConfig(BaseSettings):
    """Clone retry policy."""

    model_config = SettingsConfigDict(env_prefix="DEVENV_BOOTSTRAP_CLONE__")

    attempts: int = Field(default=3, ge=1, description="Maximum clone attempts per repository")
    retry_delay_seconds: float = Field(default=5.0, ge=0, description="Fixed delay between attempts")


class RegistryConfig(BaseSettings):
    """Local npm registry (Verdaccio) settings."""

    model_config = SettingsConfigDict(env_prefix="DEVENV_BOOTSTRAP_REGISTRY__")

    url: str = Field(default="http://localhost:4873", description="Registry root URL")
    upstream_url: str = Field(
        default="https://registry.npmjs.org",
        description="Registry URL prefix found in committed lock files",
    )
    container: str = Field(default="verdaccio", description="Registry container name")
    storage_path: str = Field(default="/verdaccio/storage", description="Storage path inside the container")
    db_file: str = Field(default=".verdaccio-db.json", description="Registry database index file name")
    owner: str = Field(default="10001:65533", description="uid:gid the registry process runs as")
    archive_path: Path | None = Field(default=None, description="Backup archive (.tar.gz) to restore")
    archive_storage_dir: str = Field(default="storage", description="Package data directory inside the archive")
    ready_timeout_seconds: float = Field(default=30.0, gt=0)
    ready_interval_seconds: float = Field(default=1.0, ge=0)
    verify_attempts: int = Field(default=5, ge=1)
    verify_interval_seconds: float = Field(default=3.0, ge=0)
    request_timeout_seconds: float = Field(default=5.0, gt=0)


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DEVENV_BOOTSTRAP_LOGGING__")

    level: str = Field(default="INFO", description="Logging level")
    console_output: bool = Field(default=False, description="Mirror log events to stderr")
    logger_name: str = Field(default=APP_NAME)


class RuntimeConfig(BaseSettings):
    """Per-invocation values set by the CLI."""

    model_config = SettingsConfigDict(env_prefix="DEVENV_BOOTSTRAP_RUNTIME__")

    run_name: str | None = Field(default=None, description="Stem of this run's JSONL log file")


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with DEVENV_BOOTSTRAP_ prefix.
    Use double underscore for nested config: DEVENV_BOOTSTRAP_REGISTRY__URL

    Example env vars:
        export DEVENV_BOOTSTRAP_WORKSPACE__ROOT=~/src/acme
        export DEVENV_BOOTSTRAP_REGISTRY__ARCHIVE_PATH=~/Downloads/registry-backup.tar.gz
        export DEVENV_BOOTSTRAP_REGISTRY__URL=http://localhost:4873
        export DEVENV_BOOTSTRAP_CLONE__ATTEMPTS=3
        export DEVENV_BOOTSTRAP_LOGGING__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="DEVENV_BOOTSTRAP_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    clone: CloneConfig = Field(default_factory=CloneConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
