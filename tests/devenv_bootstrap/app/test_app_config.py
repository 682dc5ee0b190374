"""Tests for Pydantic BaseSettings configuration."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from devenv_bootstrap.app.config import (
    AppConfig,
    CloneConfig,
    DirectoryConfig,
    RegistryConfig,
    WorkspaceConfig,
)


def test_directory_config_computed_paths(tmp_path):
    config = DirectoryConfig(home=tmp_path)

    assert config.logs_dir == tmp_path / "logs"
    assert config.scratch_dir == tmp_path / "scratch"
    assert config.logs_dir.is_dir()
    assert config.scratch_dir.is_dir()


def test_defaults():
    config = AppConfig()

    assert config.workspace.root == Path.cwd()
    assert config.workspace.compose_dir is None
    assert config.clone.attempts == 3
    assert config.clone.retry_delay_seconds == 5.0
    assert config.registry.url == "http://localhost:4873"
    assert config.registry.container == "verdaccio"
    assert config.registry.ready_timeout_seconds == 30.0
    assert config.registry.verify_attempts == 5
    assert config.registry.archive_path is None
    assert config.logging.level == "INFO"
    assert config.runtime.run_name is None


def test_home_comes_from_env(tmp_path):
    # conftest points DEVENV_BOOTSTRAP_DIRECTORIES__HOME at tmp_path/home
    assert AppConfig().directories.home == tmp_path / "home"


def test_nested_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DEVENV_BOOTSTRAP_WORKSPACE__ROOT", str(tmp_path / "ws"))
    monkeypatch.setenv("DEVENV_BOOTSTRAP_REGISTRY__URL", "http://registry.test:4873")
    monkeypatch.setenv("DEVENV_BOOTSTRAP_CLONE__ATTEMPTS", "5")
    monkeypatch.setenv("DEVENV_BOOTSTRAP_LOGGING__CONSOLE_OUTPUT", "true")

    config = AppConfig()

    assert config.workspace.root == tmp_path / "ws"
    assert config.registry.url == "http://registry.test:4873"
    assert config.clone.attempts == 5
    assert config.logging.console_output is True


def test_invalid_values_are_rejected(monkeypatch):
    with pytest.raises(ValidationError):
        CloneConfig(attempts=0)
    with pytest.raises(ValidationError):
        RegistryConfig(verify_attempts=0)

    monkeypatch.setenv("DEVENV_BOOTSTRAP_CLONE__ATTEMPTS", "0")
    with pytest.raises(ValidationError):
        AppConfig()


def test_config_is_frozen(tmp_path):
    config = AppConfig(workspace=WorkspaceConfig(root=tmp_path))
    with pytest.raises(ValidationError):
        config.workspace = WorkspaceConfig(root=tmp_path / "other")
