"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

BuildPropertiesWriter = Callable[..., None]


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


@pytest.fixture
def sample_build_properties() -> dict[str, dict[str, Any]]:
    """Sample expo-build-properties plugin options."""
    return {
        "android": {
            "minSdkVersion": 24,
            "targetSdkVersion": 35,
            "compileSdkVersion": 35,
            "kotlinVersion": "1.9.25",
        },
        "ios": {
            "deploymentTarget": "15.1",
            "useFrameworks": "static",
        },
    }


@pytest.fixture
def project_root(tmp_path: Path, sample_build_properties: dict[str, dict[str, Any]]) -> Path:
    """Create an app project with app.json and package.json at version 1.0.0."""
    _write_json(
        tmp_path / "app.json",
        {
            "expo": {
                "name": "Test App",
                "slug": "test-app",
                "version": "1.0.0",
                "plugins": [
                    "expo-router",
                    ["expo-build-properties", sample_build_properties],
                ],
            }
        },
    )
    _write_json(tmp_path / "package.json", {"name": "test-app", "version": "1.0.0"})
    return tmp_path


@pytest.fixture
def write_build_properties(project_root: Path) -> BuildPropertiesWriter:
    """Return a function that replaces the build-properties plugin options."""

    def _write(**platform_configs: dict[str, Any]) -> None:
        app_json_path = project_root / "app.json"
        data = json.loads(app_json_path.read_text(encoding="utf-8"))
        data["expo"]["plugins"] = [["expo-build-properties", platform_configs]]
        _write_json(app_json_path, data)

    return _write


@pytest.fixture
def read_json() -> Callable[[Path], Any]:
    """Return a function that reads a JSON file."""

    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def in_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from inside the sample project."""
    monkeypatch.chdir(project_root)
    return project_root


@pytest.fixture
def initialized_project(in_project: Path) -> Path:
    """Sample project with shipkit.toml and an empty deployment ledger."""
    (in_project / "shipkit.toml").write_text(
        'project_name = "Test App"\nprofiles = ["preview", "production"]\n',
        encoding="utf-8",
    )
    _write_json(
        in_project / ".deployments.json",
        {"versions": {}, "lastConfig": {"ios": {}, "android": {}}},
    )
    return in_project
