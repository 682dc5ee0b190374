import json
from pathlib import Path

from typer.testing import CliRunner

from devenv_bootstrap.app import main
from devenv_bootstrap.app.cli import app
from devenv_bootstrap.core.domain.exceptions import RegistryUnavailableError
from devenv_bootstrap.core.domain.models import (
    CloneFailure,
    EnsureResult,
    FailureKind,
    PatchOutcome,
    PatchState,
    PatchStatusEntry,
    PatchSummary,
    TextReplace,
    VerificationResult,
)
from devenv_bootstrap.core.usecases.bootstrap import BootstrapReport


runner = CliRunner()


def test_clone_reports_failures_and_exits_non_zero(monkeypatch):
    result_obj = EnsureResult(
        cloned=["web-app"],
        skipped=["platform-api"],
        failed=["ui-kit"],
        failures=[CloneFailure(repo="ui-kit", kind=FailureKind.AUTH, message=FailureKind.AUTH.remediation)],
    )
    monkeypatch.setattr(main, "clone_repositories", lambda **kwargs: result_obj)

    result = runner.invoke(app, ["clone"])

    assert result.exit_code == 1
    assert "ui-kit [auth]" in result.output
    assert "web-app (cloned)" in result.output


def test_clone_json_output(monkeypatch):
    monkeypatch.setattr(main, "clone_repositories", lambda **kwargs: EnsureResult(cloned=["web-app"]))

    result = runner.invoke(app, ["clone", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["cloned"] == ["web-app"]
    assert payload["ok"] is True


def test_patch_apply_summary(monkeypatch):
    summary = PatchSummary(
        applied_count=1,
        skipped_count=1,
        failed=(),
        outcomes=(("/ws/web-app/.npmrc", PatchOutcome.APPLIED), ("/ws/ui-kit/.npmrc", PatchOutcome.NOOP)),
    )
    monkeypatch.setattr(main, "apply_patches", lambda **kwargs: summary)

    result = runner.invoke(app, ["patch", "apply"])

    assert result.exit_code == 0
    assert "1 applied, 1 unchanged, 0 failed" in result.output
    assert "/ws/web-app/.npmrc" in result.output
    assert "/ws/ui-kit/.npmrc" not in result.output


def test_patch_revert_failure_exits_non_zero(monkeypatch):
    summary = PatchSummary(
        applied_count=0,
        skipped_count=0,
        failed=("/ws/web-app/package-lock.json",),
        outcomes=(("/ws/web-app/package-lock.json", PatchOutcome.FAILED),),
    )
    monkeypatch.setattr(main, "revert_patches", lambda **kwargs: summary)

    result = runner.invoke(app, ["patch", "revert"])

    assert result.exit_code == 1


def test_patch_status_json(monkeypatch):
    target = TextReplace(path=Path("/ws/web-app/.npmrc"), original_content="a", patched_content="b")
    monkeypatch.setattr(
        main, "patch_status", lambda **kwargs: [PatchStatusEntry(target=target, state=PatchState.APPLIED)]
    )

    result = runner.invoke(app, ["patch", "status", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"path": str(Path("/ws/web-app/.npmrc")), "kind": "text_replace", "state": "applied"}
    ]


def test_restore_passes_archive_and_prints_verification(monkeypatch, tmp_path):
    captured = {}

    def fake_restore(*, archive_path, config):
        captured["archive_path"] = archive_path
        captured["run_name"] = config.runtime.run_name
        return VerificationResult(found=("@acme/ui-kit",), missing=(), polls=1)

    monkeypatch.setattr(main, "restore_registry", fake_restore)

    result = runner.invoke(app, ["restore", "--archive", str(tmp_path / "b.tar.gz")])

    assert result.exit_code == 0
    assert captured["archive_path"] == tmp_path / "b.tar.gz"
    assert captured["run_name"].endswith("-restore")
    assert "1 package(s) resolvable after 1 poll(s)" in result.output


def test_up_skip_flags(monkeypatch):
    captured = {}

    def fake_bootstrap(**kwargs):
        captured.update(kwargs)
        return BootstrapReport(built=False, started=False)

    monkeypatch.setattr(main, "bootstrap", fake_bootstrap)

    result = runner.invoke(app, ["up", "--skip-restore", "--skip-build", "--skip-start"])

    assert result.exit_code == 0
    assert captured["restore"] is False
    assert captured["build"] is False
    assert captured["start"] is False
    assert "Build: skipped" in result.output


def test_up_failure_exits_with_error(monkeypatch):
    def failing(**kwargs):
        raise RegistryUnavailableError("http://localhost:4873", 30)

    monkeypatch.setattr(main, "bootstrap", failing)

    result = runner.invoke(app, ["up"])

    assert result.exit_code == 1
    assert "not reachable" in result.output


def test_invalid_configuration_exits_with_usage_error(monkeypatch):
    monkeypatch.setenv("DEVENV_BOOTSTRAP_CLONE__ATTEMPTS", "0")

    result = runner.invoke(app, ["clone"])

    assert result.exit_code == 2
    assert "invalid configuration" in result.output
