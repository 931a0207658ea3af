"""JSON file I/O helpers.

Every read of a project document goes through :func:`load_json`, which
turns "missing", "unreadable" and "not valid JSON" into a single ``None``
result. Callers decide what default to substitute, so absence never
leaks out of the I/O boundary as an exception.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def file_exists(path: Path) -> bool:
    """Check if a file exists.

    Args:
        path: Path to check.

    Returns:
        True if the path exists, False otherwise.
    """
    return path.exists()


def load_json(path: Path) -> Any | None:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed JSON value, or None if the file is missing, unreadable,
        or does not contain valid JSON.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse JSON file %s: %s", path, e)
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read JSON file %s: %s", path, e)
        return None


def load_json_object(path: Path) -> dict[str, Any] | None:
    """Load a JSON file whose top-level value must be an object.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed dictionary, or None if the file is absent, invalid, or
        its top-level value is not an object.
    """
    data = load_json(path)
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning("Expected a JSON object in %s, got %s", path, type(data).__name__)
        return None
    return data


def save_json(path: Path, data: Any) -> None:
    """Write data as pretty-printed JSON.

    Parent directories are created as needed. The file is written in
    place with 2-space indentation and a trailing newline.

    Args:
        path: Destination path.
        data: JSON-serializable value.

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open(mode="w", encoding="utf-8") as f:
        f.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
