"""Reporters for accessibility issues.

This package provides output formatters for diagnostic records,
including plain JSON and SARIF for code scanning integration.
"""

from .json_reporter import from_json, summarize, to_json, to_report
from .sarif import SARIFConfig, SARIFExporter, severity_to_sarif_level


def to_sarif(issues, config: SARIFConfig | None = None) -> dict:
    """Export issues to a SARIF document."""
    return SARIFExporter(config).export(issues)


__all__ = [
    "SARIFConfig",
    "SARIFExporter",
    "from_json",
    "severity_to_sarif_level",
    "summarize",
    "to_json",
    "to_report",
    "to_sarif",
]
