"""
Console output helpers for the CLI

Detects whether the terminal can render Unicode symbols and falls back to
ASCII markers otherwise. Also renders trend tables and generation outcomes
for `cli.py trends` / `cli.py generate`.
"""

import json
import locale
import os
import sys
from typing import Any, Iterable

from ..core.orchestrator import GenerationOutcome
from ..models.content import TrendRecord


def supports_unicode() -> bool:
    """
    Check if the console supports Unicode output.

    FORCE_ASCII / FORCE_UNICODE environment variables override detection.
    """
    if os.environ.get("FORCE_ASCII", "").lower() in ("1", "true", "yes"):
        return False
    if os.environ.get("FORCE_UNICODE", "").lower() in ("1", "true", "yes"):
        return True

    if os.environ.get("CI") or os.environ.get("GITHUB_ACTIONS"):
        return True

    if sys.platform == "win32":
        return bool(
            os.environ.get("WT_SESSION")
            or os.environ.get("TERM_PROGRAM") == "vscode"
        )

    encoding = getattr(sys.stdout, "encoding", None) or locale.getpreferredencoding(False)
    return "utf" in str(encoding).lower()


class Console:
    """
    Console output with automatic Unicode detection.

    Usage:
        from trendcraft.utils.console import console

        console.print_warn("Trend store unavailable")  # ⚠ or [WARN]
        console.print_error("Generation failed")       # ✗ or [ERROR]
    """

    UNICODE_OK = "✓"
    UNICODE_ERROR = "✗"
    UNICODE_WARN = "⚠"
    UNICODE_UP = "↑"

    ASCII_OK = "[OK]"
    ASCII_ERROR = "[ERROR]"
    ASCII_WARN = "[WARN]"
    ASCII_UP = "+"

    def __init__(self):
        self._unicode = None

    @property
    def unicode(self) -> bool:
        if self._unicode is None:
            self._unicode = supports_unicode()
        return self._unicode

    @property
    def ok(self) -> str:
        return self.UNICODE_OK if self.unicode else self.ASCII_OK

    @property
    def error(self) -> str:
        return self.UNICODE_ERROR if self.unicode else self.ASCII_ERROR

    @property
    def warn(self) -> str:
        return self.UNICODE_WARN if self.unicode else self.ASCII_WARN

    @property
    def up(self) -> str:
        return self.UNICODE_UP if self.unicode else self.ASCII_UP

    def print_error(self, message: str):
        print(f"{self.error} {message}", file=sys.stderr)

    def print_warn(self, message: str):
        print(f"{self.warn} {message}")


console = Console()


def print_status(available: bool, name: str, state_true: str = "configured", state_false: str = "missing"):
    """Print a status line with a check mark or cross."""
    marker = console.ok if available else console.error
    state = state_true if available else state_false
    print(f"{marker} {name}: {state}")


def format_usage(count: int) -> str:
    """2300000 -> '2.3M', 890000 -> '890K'"""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.0f}K"
    return str(count)


def format_trend_table(records: Iterable[TrendRecord]) -> str:
    """Render trend records as a fixed-width table."""
    rows = [
        (
            r.platform,
            r.trend_type,
            r.title,
            format_usage(r.usage_count),
            f"{console.up}{r.growth_rate_percent:g}%",
        )
        for r in records
    ]
    header = ("PLATFORM", "TYPE", "TITLE", "USES", "GROWTH")
    widths = [max(len(str(cell)) for cell in column) for column in zip(header, *rows)]

    lines = ["  ".join(cell.ljust(w) for cell, w in zip(header, widths))]
    for row in rows:
        lines.append("  ".join(str(cell).ljust(w) for cell, w in zip(row, widths)))
    return "\n".join(line.rstrip() for line in lines)


def outcome_to_dict(outcome: GenerationOutcome) -> dict[str, Any]:
    """Wire form of a generation outcome, matching the HTTP response bodies."""
    if outcome.succeeded:
        return {
            "status": "succeeded",
            "kind": str(outcome.kind),
            "result": outcome.result.to_dict(),
            "degraded": outcome.degraded,
        }
    return {
        "status": "failed",
        "kind": str(outcome.kind),
        "error": {
            "type": str(outcome.error.error_type),
            "message": outcome.error.message,
            "field": getattr(outcome.error, "field", None),
        },
    }


def print_json(data: Any):
    print(json.dumps(data, ensure_ascii=False, indent=2))
