"""Utility modules"""

from .console import (
    console,
    format_trend_table,
    outcome_to_dict,
    print_json,
    print_status,
)

__all__ = [
    "console",
    "format_trend_table",
    "outcome_to_dict",
    "print_json",
    "print_status",
]
