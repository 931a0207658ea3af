"""Readers for the app project's own documents.

This module reads app.json and eas.json from the project root. Missing
or malformed documents read as absent (None or an empty collection)
rather than raising, so shipkit stays usable in partially configured
projects.
"""

import logging
from pathlib import Path
from typing import Any

from shipkit.core.paths import get_app_json_path, get_eas_json_path
from shipkit.models.deployment import Platform
from shipkit.utils.jsonio import load_json_object

logger = logging.getLogger(__name__)

# Name of the config plugin that carries native build properties
BUILD_PROPERTIES_PLUGIN = "expo-build-properties"


def load_app_json(project_root: Path | None = None) -> dict[str, Any] | None:
    """Load app.json from the project root.

    Returns:
        Parsed app.json, or None if absent or invalid.
    """
    return load_json_object(get_app_json_path(project_root))


def load_eas_json(project_root: Path | None = None) -> dict[str, Any] | None:
    """Load eas.json from the project root.

    Returns:
        Parsed eas.json, or None if absent or invalid.
    """
    return load_json_object(get_eas_json_path(project_root))


def is_expo_project(project_root: Path | None = None) -> bool:
    """Check whether the project root holds an app.json with an ``expo`` section."""
    app_json = load_app_json(project_root)
    return app_json is not None and "expo" in app_json


def get_expo_section(app_json: dict[str, Any] | None) -> dict[str, Any]:
    """Get the ``expo`` object from a parsed app.json.

    Args:
        app_json: Parsed app.json or None.

    Returns:
        The ``expo`` object, or an empty dict if absent or not an object.
    """
    if app_json is None:
        return {}
    expo = app_json.get("expo")
    return expo if isinstance(expo, dict) else {}


def get_project_name(project_root: Path | None = None) -> str | None:
    """Get the app name from app.json (``expo.name``).

    Returns:
        The app name, or None if not configured.
    """
    name = get_expo_section(load_app_json(project_root)).get("name")
    return name if isinstance(name, str) else None


def get_available_profiles(project_root: Path | None = None) -> list[str]:
    """List the build profiles declared in eas.json.

    Returns:
        Profile names in declaration order, or an empty list.
    """
    eas_json = load_eas_json(project_root)
    if not eas_json:
        return []
    build = eas_json.get("build")
    if not isinstance(build, dict):
        return []
    return list(build.keys())


def get_build_properties(project_root: Path | None = None) -> dict[Platform, dict[str, Any]]:
    """Get the native build properties per platform.

    Looks for an ``["expo-build-properties", {...}]`` entry in
    ``expo.plugins`` and returns its ``ios`` and ``android`` sub-objects.

    Args:
        project_root: Project root. Default: cwd.

    Returns:
        Mapping of platform to its plugin config. Platforms without a
        configuration map to an empty dict.
    """
    properties: dict[Platform, dict[str, Any]] = {platform: {} for platform in Platform}

    plugin_config = _find_build_properties_plugin(load_app_json(project_root))
    if plugin_config is None:
        return properties

    for platform in Platform:
        platform_config = plugin_config.get(platform.value)
        if isinstance(platform_config, dict):
            properties[platform] = platform_config

    return properties


def _find_build_properties_plugin(app_json: dict[str, Any] | None) -> dict[str, Any] | None:
    """Find the options object of the build-properties plugin entry.

    Args:
        app_json: Parsed app.json or None.

    Returns:
        The plugin's options object, or None if the plugin is not
        configured or has no options.
    """
    plugins = get_expo_section(app_json).get("plugins")
    if not isinstance(plugins, list):
        return None

    for plugin in plugins:
        # String-only entries ("expo-router") carry no options
        if isinstance(plugin, list) and plugin and plugin[0] == BUILD_PROPERTIES_PLUGIN:
            if len(plugin) > 1 and isinstance(plugin[1], dict):
                return plugin[1]
            logger.debug("%s plugin has no options", BUILD_PROPERTIES_PLUGIN)
            return None

    return None
