"""Errors the CLI reports to the user before exiting.

Each error carries a category, an optional hint on how to recover and the
values that identify what went wrong. Usage errors exit with status 2 so
they are distinguishable from an audit that found issues (status 1).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import click


class ErrorCategory(Enum):
    CONFIGURATION = "configuration"
    FILE_SYSTEM = "file_system"
    VALIDATION = "validation"  # bad command-line arguments
    RENDERING = "rendering"


@dataclass
class CLIError(Exception):
    """A user-facing failure with an exit status.

    Attributes:
        category: What kind of failure this is.
        message: First line shown to the user.
        suggestion: How to recover, if known.
        details: Identifying values, listed one per line.
        exit_code: Process exit status.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 2

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        def style(text: str, **kwargs: Any) -> str:
            return click.style(text, **kwargs) if use_color else text

        lines = [f"{style('Error:', fg='red', bold=True)} {self.message}"]
        if self.suggestion:
            lines.append(f"{style('Suggestion:', fg='cyan')} {self.suggestion}")
        lines.extend(
            style(f"  {key}: {value}", dim=True) for key, value in (self.details or {}).items()
        )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format(use_color=False)


class SourceNotFoundError(CLIError):
    def __init__(self, path: str):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=f"Source file not found: {path}",
            suggestion="Pass an existing HTML file, or a URL together with --render",
            details={"path": path},
        )


class InvalidConfigError(CLIError):
    """Unreadable or invalid engine configuration."""

    def __init__(self, message: str, config_file: str | None = None):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion="Check a11y-engine.config.json and A11Y_ENGINE_* variables",
            details={"config_file": config_file} if config_file else None,
        )


class UnknownCheckerError(CLIError):
    def __init__(self, checker_id: str, available: list[str]):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=f"Unknown checker: {checker_id}",
            suggestion="Run 'a11y-engine list-checkers' to see available checkers",
            details={"available": ", ".join(available)},
        )


class RenderFailedError(CLIError):
    """The page could not be loaded in the browser.

    Exits with status 1: the arguments were fine, the environment was not.
    """

    def __init__(self, message: str, url: str):
        super().__init__(
            category=ErrorCategory.RENDERING,
            message=message,
            suggestion=(
                "Install the browser with 'playwright install chromium' and "
                "check that the URL is reachable"
            ),
            details={"url": url},
            exit_code=1,
        )
