"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from builders import SpecTree, flow, transition
from mobilespec.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def broken_spec(ok_spec: SpecTree) -> SpecTree:
    """ok_spec plus a transition to a screen that does not exist."""
    ok_spec.flow(
        flow(
            "home",
            [transition("open_tasks", "tasks"), transition("lost", "nowhere")],
            entry=True,
        ),
        group="home",
    )
    return ok_spec


class TestValidateCommand:
    def test_passes(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        result = cli_runner.invoke(app, ["validate", "--specs-dir", str(ok_spec.root)])

        assert result.exit_code == 0
        assert "Validation passed" in result.output
        assert "[L2_ENTRY_POINTS]" in result.output

    def test_fails_on_errors(self, cli_runner: CliRunner, broken_spec: SpecTree) -> None:
        result = cli_runner.invoke(app, ["validate", "-s", str(broken_spec.root)])

        assert result.exit_code == 1
        assert "[L2_INVALID_TRANSITION_TO]" in result.output
        assert "Validation failed" in result.output

    def test_json_output(self, cli_runner: CliRunner, broken_spec: SpecTree) -> None:
        result = cli_runner.invoke(
            app, ["validate", "-s", str(broken_spec.root), "--format", "json"]
        )

        payload = json.loads(result.stdout)
        assert result.exit_code == 1
        assert payload["ok"] is False
        codes = [d["code"] for d in payload["diagnostics"]]
        assert "L2_INVALID_TRANSITION_TO" in codes
        levels = {d["level"] for d in payload["diagnostics"]}
        assert levels <= {"error", "info"}

    def test_unknown_format(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        result = cli_runner.invoke(app, ["validate", "-s", str(ok_spec.root), "-f", "xml"])

        assert result.exit_code == 2

    def test_missing_directory(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["validate", "-s", str(tmp_path / "absent")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_empty_tree(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["validate", "-s", str(tmp_path)])

        assert result.exit_code == 1
        assert "[L2_NO_FILES]" in result.output


class TestOpenapiCheckCommand:
    def test_not_configured(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        result = cli_runner.invoke(app, ["openapi-check", "-s", str(ok_spec.root)])

        assert result.exit_code == 1
        assert "[OPENAPI_NOT_FOUND]" in result.output

    def test_explicit_document(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        ok_spec.state(
            {
                "screen": {
                    "id": "tasks",
                    "data": {"queries": {"tasks": {"operationId": "listTasks"}}},
                }
            },
            group="task",
        )
        contract = ok_spec.openapi(
            {"openapi": "3.0.3", "paths": {"/tasks": {"get": {"operationId": "listTasks"}}}}
        )

        result = cli_runner.invoke(
            app,
            ["openapi-check", "-s", str(ok_spec.root), "--openapi", str(contract), "-f", "json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"ok": True, "diagnostics": []}


class TestGenerateCommands:
    def test_mermaid(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        result = cli_runner.invoke(app, ["mermaid", "-s", str(ok_spec.root)])

        assert result.exit_code == 0
        assert "home -->|open_tasks/tap| tasks" in (ok_spec.root / "flows.md").read_text()

    def test_i18n_requires_locales(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        result = cli_runner.invoke(app, ["i18n", "-s", str(ok_spec.root)])

        assert result.exit_code == 1
        assert "i18n" in result.output
        assert not (ok_spec.root / "i18n").exists()

    def test_check_generates_when_clean(self, cli_runner: CliRunner, ok_spec: SpecTree) -> None:
        ok_spec.config({"i18n": {"locales": ["en", "ja"]}})

        first = cli_runner.invoke(app, ["check", "-s", str(ok_spec.root)])

        assert first.exit_code == 1
        assert not (ok_spec.root / "flows.md").exists()

        cli_runner.invoke(app, ["i18n", "-s", str(ok_spec.root)])

        second = cli_runner.invoke(app, ["check", "-s", str(ok_spec.root)])

        assert second.exit_code == 0
        assert (ok_spec.root / "flows.md").exists()
        ja = json.loads((ok_spec.root / "i18n" / "ja.json").read_text(encoding="utf-8"))
        assert ja["app.screen.home.title"] == ""

    def test_check_skips_generation_on_errors(
        self, cli_runner: CliRunner, broken_spec: SpecTree
    ) -> None:
        result = cli_runner.invoke(app, ["check", "-s", str(broken_spec.root)])

        assert result.exit_code == 1
        assert not (broken_spec.root / "flows.md").exists()


class TestVersion:
    def test_version_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "mobilespec version" in result.output
