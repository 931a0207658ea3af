"""Utility modules for shipkit.

This module exports commonly used utility functions.
"""

from shipkit.utils.formatting import (
    console,
    err_console,
    print_banner,
    print_error,
    print_info,
    print_muted,
    print_success,
    print_warning,
)
from shipkit.utils.jsonio import file_exists, load_json, load_json_object, save_json

__all__ = [
    "console",
    "err_console",
    "file_exists",
    "load_json",
    "load_json_object",
    "print_banner",
    "print_error",
    "print_info",
    "print_muted",
    "print_success",
    "print_warning",
    "save_json",
]
