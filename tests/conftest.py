from pathlib import Path

import pytest
from helpers import mark_by_dir


TESTS = Path(__file__).parent


def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "devenv_bootstrap" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "devenv_bootstrap" / "shared", pytest.mark.unit)
    mark_by_dir(items, TESTS / "devenv_bootstrap" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "devenv_bootstrap" / "app", pytest.mark.e2e)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Keep developer DEVENV_BOOTSTRAP_* settings out of tests
    import os
    for key in list(os.environ):
        if key.startswith("DEVENV_BOOTSTRAP_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("DEVENV_BOOTSTRAP_DIRECTORIES__HOME", str(tmp_path / "home"))
