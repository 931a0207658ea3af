"""Unit tests for status command.

Tests for the CLI status command implementation.
"""

import json
from pathlib import Path

from shipkit.cli.main import app
from shipkit.core.drift import commit_snapshot
from shipkit.core.ledger import DeploymentLedger
from shipkit.models.deployment import Platform, Profile
from typer.testing import CliRunner

runner = CliRunner()


class TestStatusCommand:
    """Tests for shipkit status command."""

    def test_not_initialized(self, in_project: Path) -> None:
        """Status without shipkit.toml exits with an error."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "not initialized" in result.output

    def test_empty_history(self, initialized_project: Path) -> None:
        """A fresh project shows the current version as not deployed."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "TEST APP DEPLOYMENT" in result.output
        assert "v1.0.0 (current)" in result.output
        assert "Not deployed" in result.output

    def test_from_subdirectory(self, initialized_project: Path, monkeypatch) -> None:
        """Status run from a subdirectory reads the enclosing project."""
        nested = initialized_project / "src"
        nested.mkdir()
        monkeypatch.chdir(nested)

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "v1.0.0 (current)" in result.output

    def test_missing_platform_warning(self, initialized_project: Path) -> None:
        """A platform lagging its sibling is reported."""
        DeploymentLedger(initialized_project).record_deployment(
            "1.0.0", Platform.IOS, Profile.PREVIEW
        )

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "android preview not yet deployed for v1.0.0" in result.output
        assert "✓" in result.output

    def test_drift_reported(self, initialized_project: Path, write_build_properties) -> None:
        """Critical config changes since the last snapshot are listed."""
        ledger = DeploymentLedger(initialized_project)
        commit_snapshot(Platform.ANDROID, ledger)
        commit_snapshot(Platform.IOS, ledger)
        write_build_properties(
            android={"minSdkVersion": 26, "targetSdkVersion": 35, "compileSdkVersion": 35},
            ios={"deploymentTarget": "15.1"},
        )

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "Config changes detected for android" in result.output
        assert "minSdkVersion: 24 → 26" in result.output
        assert "Config changes detected for ios" not in result.output

    def test_previous_versions_limited(self, initialized_project: Path) -> None:
        """Only three previous versions are shown without --all."""
        ledger = DeploymentLedger(initialized_project)
        for version in ("0.1.0", "0.2.0", "0.3.0", "0.4.0", "0.5.0"):
            ledger.record_deployment(version, Platform.IOS, Profile.PREVIEW)

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "v0.5.0" in result.output
        assert "v0.3.0" in result.output
        assert "v0.2.0" not in result.output
        assert "and 2 more" in result.output

    def test_all_versions(self, initialized_project: Path) -> None:
        """--all shows every tracked version."""
        ledger = DeploymentLedger(initialized_project)
        for version in ("0.1.0", "0.2.0", "0.3.0", "0.4.0"):
            ledger.record_deployment(version, Platform.ANDROID, Profile.PRODUCTION)

        result = runner.invoke(app, ["status", "--all"])

        assert result.exit_code == 0
        assert "v0.1.0" in result.output
        assert "more" not in result.output

    def test_specific_version(self, initialized_project: Path) -> None:
        """--version shows a single version's table."""
        DeploymentLedger(initialized_project).record_deployment(
            "0.9.0", Platform.IOS, Profile.PRODUCTION
        )

        result = runner.invoke(app, ["status", "--version", "0.9.0"])

        assert result.exit_code == 0
        assert "v0.9.0" in result.output
        assert "(current)" not in result.output

    def test_json_output(self, initialized_project: Path) -> None:
        """--json emits a machine-readable document."""
        timestamp = DeploymentLedger(initialized_project).record_deployment(
            "1.0.0", Platform.IOS, Profile.PREVIEW
        )

        result = runner.invoke(app, ["status", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["current_version"] == "1.0.0"
        assert data["versions"]["1.0.0"]["ios"]["preview"] == timestamp
        assert data["versions"]["1.0.0"]["android"]["preview"] is None
        assert {entry["platform"] for entry in data["drift"]} == {"ios", "android"}

    def test_json_respects_disabled_platform(self, initialized_project: Path) -> None:
        """Disabled platforms are left out of the drift report."""
        (initialized_project / "shipkit.toml").write_text("[platforms]\nandroid = false\n")

        result = runner.invoke(app, ["status", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [entry["platform"] for entry in data["drift"]] == ["ios"]

    def test_invalid_config(self, initialized_project: Path) -> None:
        """A broken shipkit.toml exits with code 1."""
        (initialized_project / "shipkit.toml").write_text("profiles = [")

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output
