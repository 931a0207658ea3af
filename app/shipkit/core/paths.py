"""Project-relative and XDG path management for shipkit.

Everything shipkit reads or writes about a release lives in the app's
project root:

- app.json: primary manifest (version at ``expo.version``)
- package.json: secondary manifest (version at ``version``)
- eas.json: build profiles
- shipkit.toml: shipkit project configuration
- .deployments.json: deployment ledger

User-level preferences (the colour theme) follow the XDG Base Directory
Specification under ~/.config/shipkit/.
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "shipkit"

APP_JSON_FILENAME = "app.json"
PACKAGE_JSON_FILENAME = "package.json"
EAS_JSON_FILENAME = "eas.json"
CONFIG_FILENAME = "shipkit.toml"
DEPLOYMENTS_FILENAME = ".deployments.json"


def resolve_project_root(project_root: Path | None = None) -> Path:
    """Resolve the project root, defaulting to the current working directory.

    Args:
        project_root: Explicit project root, or None for the cwd.

    Returns:
        Path to the project root.
    """
    return project_root if project_root is not None else Path.cwd()


def get_app_json_path(project_root: Path | None = None) -> Path:
    """Get the app.json path inside the project root."""
    return resolve_project_root(project_root) / APP_JSON_FILENAME


def get_package_json_path(project_root: Path | None = None) -> Path:
    """Get the package.json path inside the project root."""
    return resolve_project_root(project_root) / PACKAGE_JSON_FILENAME


def get_eas_json_path(project_root: Path | None = None) -> Path:
    """Get the eas.json path inside the project root."""
    return resolve_project_root(project_root) / EAS_JSON_FILENAME


def get_config_path(project_root: Path | None = None) -> Path:
    """Get the shipkit.toml path inside the project root."""
    return resolve_project_root(project_root) / CONFIG_FILENAME


def get_deployments_path(project_root: Path | None = None) -> Path:
    """Get the deployment ledger path inside the project root.

    Returns:
        Path to <project_root>/.deployments.json.
    """
    return resolve_project_root(project_root) / DEPLOYMENTS_FILENAME


def find_project_root(start_dir: Path | None = None) -> Path | None:
    """Walk upwards looking for a directory holding both manifests.

    A project root is the first directory (starting at ``start_dir``)
    that contains both package.json and app.json.

    Args:
        start_dir: Directory to start from. Default: cwd.

    Returns:
        Path to the project root, or None if no ancestor qualifies.
    """
    current = (start_dir or Path.cwd()).resolve()

    for candidate in (current, *current.parents):
        if (candidate / PACKAGE_JSON_FILENAME).exists() and (
            candidate / APP_JSON_FILENAME
        ).exists():
            return candidate

    return None


def locate_project_root() -> Path:
    """Get the project root enclosing the cwd.

    Returns:
        The nearest ancestor of the cwd holding both manifests, or the cwd
        itself when there is none (standalone mode).
    """
    return find_project_root() or Path.cwd()


def get_user_config_dir() -> Path:
    """Get the user configuration directory path.

    Returns:
        Path to ~/.config/shipkit/ (or XDG_CONFIG_HOME/shipkit/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME
