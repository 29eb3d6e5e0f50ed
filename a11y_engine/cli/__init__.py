"""CLI package for the accessibility engine.

Modules:
    main: click command group (``audit``, ``list-checkers``)
    output: OutputManager for consistent CLI output with color/quiet support
    errors: Structured error types with recovery suggestions
"""

from .errors import (
    CLIError,
    ErrorCategory,
    InvalidConfigError,
    RenderFailedError,
    SourceNotFoundError,
    UnknownCheckerError,
)
from .output import OutputConfig, OutputManager, should_use_color

__all__ = [
    # Output
    "OutputConfig",
    "OutputManager",
    "should_use_color",
    # Errors
    "CLIError",
    "ErrorCategory",
    "InvalidConfigError",
    "RenderFailedError",
    "SourceNotFoundError",
    "UnknownCheckerError",
]
