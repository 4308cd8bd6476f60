"""End-to-end tests for the `run` command with npm and the network faked."""
import json
import os
import subprocess
from pathlib import Path

from typer.testing import CliRunner

from npm_audit_reporter import __version__
from npm_audit_reporter.app.cli import app

from helpers import AUDIT, MANIFEST

runner = CliRunner()


def test_version_flag():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_run_without_token_exits_zero_before_any_work(npm_project, mocked_wiring):
    result = runner.invoke(app, ["run", "--root", str(npm_project)])

    assert result.exit_code == 0
    assert "INFO - System exit since no token provided." in result.output
    assert "Verifying npm" not in result.output
    assert mocked_wiring.created == 0
    assert mocked_wiring.calls.items == []


def test_run_with_output_path_writes_bundle_and_skips_delivery(npm_project, tmp_path, mocked_wiring):
    out = tmp_path / "report.json"

    result = runner.invoke(
        app, ["run", "--root", str(npm_project), "--token", "s3cr3t", "--output-path", str(out)]
    )

    assert result.exit_code == 0, result.output
    assert "INFO - Verifying npm." in result.output
    assert "Dependency report created." in result.output
    assert "Vulnerabilities: 1" in result.output
    assert str(out) in result.output
    assert mocked_wiring.delivery.delivered == []

    bundle = json.loads(out.read_text(encoding="utf-8"))
    meta = bundle["Project"]["Project Meta"]
    assert bundle["Project"]["Dependency Report"] == AUDIT
    assert bundle["Date"]["Start"] and bundle["Date"]["End"]
    assert bundle["Date"]["Start"] <= bundle["Date"]["End"]
    assert meta["Absolute Path"] == str(npm_project.resolve())
    assert meta["Exit Code"] == 0
    assert [d["name"] for d in meta["Dependencies"]] == ["lodash", "express", "jest"]
    assert meta["VCS Info"] == {"Git Url": None, "Git Hash": None, "blm_lists": []}
    assert meta["File Info"] == {"package.json": None}
    assert meta["Project Name"] is None


def test_run_delivers_when_no_output_path(npm_project, mocked_wiring):
    result = runner.invoke(
        app, ["run", "--root", str(npm_project), "-t", "s3cr3t", "-u", "collector.local", "-p", "8443"]
    )

    assert result.exit_code == 0, result.output
    assert "https://collector.local:8443/api/v1/reports (HTTP 201)" in result.output
    assert mocked_wiring.delivery.tokens == ["s3cr3t"]
    assert mocked_wiring.calls.items[-1] == "delivery.deliver"


def test_run_json_prints_bundle(npm_project, mocked_wiring):
    result = runner.invoke(app, ["run", "--root", str(npm_project), "-t", "s3cr3t", "--json"])

    assert result.exit_code == 0, result.output
    payload = result.output.split("INFO - Verifying npm.\n", 1)[1]
    bundle = json.loads(payload)
    assert bundle["Project"]["Dependency Report"] == AUDIT


def test_run_missing_manifest_is_skipped_with_exit_zero(tmp_path, mocked_wiring):
    empty = tmp_path / "empty"
    empty.mkdir()

    result = runner.invoke(app, ["run", "--root", str(empty), "-t", "s3cr3t"])

    assert result.exit_code == 0
    assert "INFO - System exit since" in result.output
    assert "audit.run_audit" not in mocked_wiring.calls.items


def test_run_failed_delivery_exits_one(npm_project, mocked_wiring):
    mocked_wiring.delivery._fail = True

    result = runner.invoke(app, ["run", "--root", str(npm_project), "-t", "s3cr3t"])

    assert result.exit_code == 1
    assert "ERROR - " in result.output


def test_run_log_file_never_contains_token(npm_project, mocked_wiring):
    result = runner.invoke(app, ["run", "--root", str(npm_project), "-t", "s3cr3t-value"])
    assert result.exit_code == 0, result.output

    log_file = Path(os.environ["NPM_AUDIT_REPORTER_DIRECTORIES__HOME"]) / "logs" / "webapp.jsonl"
    text = log_file.read_text(encoding="utf-8")
    events = [json.loads(line)["message"] for line in text.splitlines() if line.strip()]
    assert "run_started" in events
    assert "report_delivered" in events
    assert "s3cr3t-value" not in text


def test_run_announces_lockfile_creation(npm_project, tmp_path, monkeypatch, mocked_wiring):
    npm_calls = []

    def fake_subprocess_run(cmd, cwd=None, stdout=None, stderr=None, text=None):
        npm_calls.append(list(cmd[1:]))
        out = {"--version": "9.6.7\n", "audit": json.dumps(AUDIT)}.get(cmd[1], "")
        return subprocess.CompletedProcess(cmd, 0, stdout=out, stderr="")

    monkeypatch.setattr("npm_audit_reporter.infra.audit_runner.subprocess.run", fake_subprocess_run)
    real_create = mocked_wiring.create

    def create_with_real_npm_runner():
        container = real_create()
        container.audit_runner.reset_override()
        return container

    monkeypatch.setattr("npm_audit_reporter.app.main.Container", create_with_real_npm_runner)
    out = tmp_path / "report.json"

    result = runner.invoke(app, ["run", "--root", str(npm_project), "-t", "s3cr3t", "-o", str(out)])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[:2] == ["INFO - Verifying npm.", "INFO - Creating locks for dependency checker."]
    assert npm_calls == [["--version"], ["i", "--package-lock-only"], ["audit", "--json"]]


def test_run_with_existing_lockfile_stays_quiet_about_locks(npm_project, mocked_wiring):
    (npm_project / "package-lock.json").write_text("{}", encoding="utf-8")

    result = runner.invoke(app, ["run", "--root", str(npm_project), "-t", "s3cr3t"])

    assert result.exit_code == 0, result.output
    assert "Creating locks" not in result.output


def test_run_with_undecodable_file_name_still_reports(npm_project, tmp_path, mocked_wiring):
    fd = os.open(os.fsencode(npm_project) + b"/caf\xe9.txt", os.O_CREAT | os.O_WRONLY)
    os.close(fd)
    out = tmp_path / "report.json"

    result = runner.invoke(app, ["run", "--root", str(npm_project), "-t", "s3cr3t", "-o", str(out)])

    assert result.exit_code == 0, result.output
    bundle = json.loads(out.read_text(encoding="utf-8"))
    assert "caf\ufffd.txt" in bundle["Project"]["Project Meta"]["File Info"]
