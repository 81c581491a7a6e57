"""Utility modules for hostprobe.

This module exports commonly used console helpers.
"""

from hostprobe.utils.formatting import (
    console,
    create_volume_table,
    err_console,
    format_size,
    format_volume_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_volume_table",
    "err_console",
    "format_size",
    "format_volume_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
