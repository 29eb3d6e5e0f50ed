"""Console output for the CLI.

Color follows the NO_COLOR convention (https://no-color.org/): an explicit
--no-color wins, then NO_COLOR / FORCE_COLOR, then whether stdout is a
terminal. Without color, status symbols fall back to bracketed words so
reports stay greppable.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

import click

from ..models import AccessibilityIssue, Severity


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    if explicit_flag is not None:
        return explicit_flag
    # Set at all, even to "", means no color
    if "NO_COLOR" in os.environ:
        return False
    if "FORCE_COLOR" in os.environ:
        return True
    isatty = getattr(stream or sys.stdout, "isatty", None)
    return bool(isatty and isatty())


@dataclass
class OutputConfig:
    use_color: bool = True
    quiet: bool = False
    verbose: bool = False
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    err_stream: TextIO = field(default_factory=lambda: sys.stderr)

    @classmethod
    def from_flags(
        cls,
        verbose: bool = False,
        quiet: bool = False,
        no_color: bool = False,
    ) -> OutputConfig:
        return cls(
            use_color=should_use_color(explicit_flag=False if no_color else None),
            quiet=quiet,
            verbose=verbose,
        )


class OutputManager:
    """Writes report lines, honoring quiet mode and color settings.

    Quiet mode hides progress and headers but never findings, the summary
    or errors.

    Example:
        >>> output = OutputManager(OutputConfig(use_color=False))
        >>> output.success("Heading Order: no issues")
        [OK] Heading Order: no issues
    """

    # status -> (colored symbol, color, plain fallback)
    STATUS = {
        "success": ("✓", "green", "[OK]"),
        "error": ("✗", "red", "[FAIL]"),
        "warning": ("⚠", "yellow", "[WARN]"),
        "info": ("ℹ", "blue", "[INFO]"),
    }

    SEVERITY_STYLES: dict[Severity, dict[str, Any]] = {
        Severity.CRITICAL: {"fg": "red", "bold": True},
        Severity.HIGH: {"fg": "red"},
        Severity.MEDIUM: {"fg": "yellow"},
        Severity.LOW: {"fg": "blue"},
    }

    def __init__(self, config: OutputConfig | None = None):
        self.config = config or OutputConfig()

    def _style(self, text: str, **kwargs: Any) -> str:
        return click.style(text, **kwargs) if self.config.use_color else text

    def _emit(
        self,
        message: str,
        status: str | None = None,
        err: bool = False,
        force: bool = False,
    ) -> None:
        if self.config.quiet and not (err or force):
            return
        if status:
            symbol, color, plain = self.STATUS[status]
            prefix = self._style(symbol, fg=color) if self.config.use_color else plain
            message = f"{prefix} {message}"
        click.echo(message, file=self.config.err_stream if err else self.config.stream)

    def success(self, message: str, force: bool = False) -> None:
        self._emit(message, "success", force=force)

    def error(self, message: str) -> None:
        self._emit(message, err=True)

    def warning(self, message: str, force: bool = False) -> None:
        self._emit(message, "warning", force=force)

    def info(self, message: str) -> None:
        self._emit(message, "info")

    def plain(self, message: str, force: bool = False) -> None:
        self._emit(message, force=force)

    def header(self, title: str) -> None:
        self._emit(self._style(title, bold=True))
        self._emit("=" * len(title))

    def issue(self, issue: AccessibilityIssue) -> None:
        """Write one finding: severity tag and message, then where it is."""
        severity = issue.severity
        tag = f"[{severity.value if isinstance(severity, Severity) else severity}]"
        style = self.SEVERITY_STYLES.get(severity, {"dim": True})
        self._emit(f"  {self._style(tag, **style)} {issue.message}", force=True)
        where = f"      at {issue.location.xpath} ({issue.location.context})"
        self._emit(self._style(where, dim=True), force=True)
        if self.config.verbose and issue.evidence.snippet:
            self._emit(self._style(f"      {issue.evidence.snippet}", dim=True))

    def summary(self, counts: dict[str, int], failed: bool) -> None:
        """Write the totals line, e.g. ``[FAIL] 3 issue(s) | 1 high | 2 low``."""
        parts = [f"{counts.get('total', 0)} issue(s)"]
        parts += [
            f"{counts[s.value]} {s.value.lower()}" for s in Severity if counts.get(s.value)
        ]
        self._emit(" | ".join(parts), "error" if failed else "success", force=True)
