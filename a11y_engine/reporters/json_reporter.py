"""JSON export of accessibility issues."""

import json
from collections import Counter
from typing import Any

from ..models import AccessibilityIssue, Severity, sort_issues


def summarize(issues: list[AccessibilityIssue]) -> dict[str, int]:
    """Issue counts per severity, plus the total."""
    counts = Counter(
        issue.severity.value if isinstance(issue.severity, Severity) else issue.severity
        for issue in issues
    )
    summary = {severity.value: counts.get(severity.value, 0) for severity in Severity}
    for name, count in counts.items():
        summary.setdefault(name, count)
    summary["total"] = len(issues)
    return summary


def to_report(issues: list[AccessibilityIssue], url: str = "") -> dict[str, Any]:
    ordered = sort_issues(issues)
    return {
        "url": url,
        "summary": summarize(ordered),
        "issues": [issue.to_dict() for issue in ordered],
    }


def to_json(issues: list[AccessibilityIssue], url: str = "", indent: int = 2) -> str:
    """Serialize issues, most severe first, with a summary block."""
    return json.dumps(to_report(issues, url), indent=indent, ensure_ascii=False)


def from_json(payload: str) -> list[AccessibilityIssue]:
    """Load issues from a report or a bare list of records."""
    data = json.loads(payload)
    records = data["issues"] if isinstance(data, dict) else data
    return [AccessibilityIssue.from_dict(record) for record in records]
