"""Data models for accessibility checking.

This module defines the core data structures shared by every checker:
severities, per-element validation outcomes, the results returned to the
toolbar, and the structured diagnostic record emitted for each failure.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """Severity levels for accessibility findings."""

    CRITICAL = "Critical"  # Blocks access to content entirely
    HIGH = "High"  # Major barrier for assistive technology users
    MEDIUM = "Medium"  # Degrades the experience, workaround exists
    LOW = "Low"  # Best-practice deviation

    def __lt__(self, other: "Severity") -> bool:
        order = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
        return order.index(self) < order.index(other)

    def __le__(self, other: "Severity") -> bool:
        return self == other or self < other

    def __gt__(self, other: "Severity") -> bool:
        return not self <= other

    def __ge__(self, other: "Severity") -> bool:
        return not self < other

    @classmethod
    def parse(cls, value: "Severity | str") -> "Severity | str":
        """Parse a severity, keeping unrecognized values as raw strings.

        Downstream data may carry severities this version does not know;
        those are preserved rather than rejected.
        """
        if isinstance(value, Severity):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        return str(value)


def severity_rank(severity: "Severity | str") -> int:
    """Sort key for severities, most severe first; unknown values sort last."""
    ranks = {
        Severity.CRITICAL: 0,
        Severity.HIGH: 1,
        Severity.MEDIUM: 2,
        Severity.LOW: 3,
    }
    if isinstance(severity, Severity):
        return ranks[severity]
    return len(ranks)


class RunMode(str, Enum):
    """Modes accepted by a checker's run entry point."""

    APPLY = "apply"
    CLEANUP = "cleanup"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a single element against one rule.

    Outcomes are produced fresh on every pass and never retained; only
    their side effects (annotation, diagnostic record) persist.
    """

    is_valid: bool
    message: str | None = None
    severity: Severity | None = None
    expected: str | None = None
    found: str | None = None
    label: str | None = None  # Short text shown in the annotation badge
    code: str | None = None  # Rule-specific failure code, e.g. "html-has-lang"

    @classmethod
    def valid(cls, label: str | None = None) -> "ValidationOutcome":
        """Create a passing outcome."""
        return cls(is_valid=True, label=label)


@dataclass
class ToolResult:
    """Result of a lifecycle call, as consumed by the toolbar."""

    success: bool
    issues: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"success": self.success}
        if self.issues is not None:
            result["issues"] = list(self.issues)
        return result


@dataclass
class IssueLocation:
    """Where in the document a finding was made."""

    xpath: str
    selector: str
    element_type: str
    context: str
    attribute: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "xpath": self.xpath,
            "selector": self.selector,
            "element_type": self.element_type,
            "context": self.context,
        }
        if self.attribute is not None:
            result["attribute"] = self.attribute
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IssueLocation":
        """Create from dictionary."""
        return cls(
            xpath=data.get("xpath", ""),
            selector=data.get("selector", ""),
            element_type=data.get("element_type", ""),
            context=data.get("context", ""),
            attribute=data.get("attribute"),
        )


@dataclass
class IssueEvidence:
    """Found versus expected values plus the offending markup."""

    found_value: str
    expected_value: str
    snippet: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "found_value": self.found_value,
            "expected_value": self.expected_value,
            "snippet": self.snippet,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IssueEvidence":
        """Create from dictionary."""
        return cls(
            found_value=data.get("found_value", ""),
            expected_value=data.get("expected_value", ""),
            snippet=data.get("snippet", ""),
        )


@dataclass
class IssueImpact:
    """Who and what is affected by a finding."""

    user_groups: list[str] = field(default_factory=list)
    assistive_tech: list[str] = field(default_factory=list)
    functionality: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_groups": list(self.user_groups),
            "assistive_tech": list(self.assistive_tech),
            "functionality": list(self.functionality),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IssueImpact":
        """Create from dictionary."""
        return cls(
            user_groups=list(data.get("user_groups", [])),
            assistive_tech=list(data.get("assistive_tech", [])),
            functionality=list(data.get("functionality", [])),
        )


@dataclass
class FixSuggestion:
    """Actionable remediation for a finding."""

    description: str
    code_example: str = ""
    related_resources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "description": self.description,
            "code_example": self.code_example,
            "related_resources": list(self.related_resources),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FixSuggestion":
        """Create from dictionary."""
        return cls(
            description=data.get("description", ""),
            code_example=data.get("code_example", ""),
            related_resources=list(data.get("related_resources", [])),
        )


_ISSUE_FIELDS = frozenset(
    {
        "issue_id",
        "rule_id",
        "agent_id",
        "step_id",
        "url",
        "normalized_url",
        "location",
        "severity",
        "confidence",
        "evidence",
        "impact",
        "fix_suggestion",
    }
)


@dataclass
class AccessibilityIssue:
    """A durable, structured description of one failed validation.

    Independent of live document state: once emitted, a record stays
    valid after the checker cleans up its annotations.
    """

    issue_id: str
    rule_id: str  # WCAG success criterion, e.g. "1.3.1"
    agent_id: str  # Checker that produced the record
    step_id: str  # Check within the checker, e.g. "heading_sequence_check"
    url: str
    normalized_url: str
    location: IssueLocation
    severity: Severity | str
    evidence: IssueEvidence
    impact: IssueImpact
    fix_suggestion: FixSuggestion
    confidence: float = 1.0
    extensions: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        severity = (
            self.severity.value
            if isinstance(self.severity, Severity)
            else self.severity
        )
        result = {
            "issue_id": self.issue_id,
            "rule_id": self.rule_id,
            "agent_id": self.agent_id,
            "step_id": self.step_id,
            "url": self.url,
            "normalized_url": self.normalized_url,
            "location": self.location.to_dict(),
            "severity": severity,
            "confidence": self.confidence,
            "evidence": self.evidence.to_dict(),
            "impact": self.impact.to_dict(),
            "fix_suggestion": self.fix_suggestion.to_dict(),
        }
        for key, value in self.extensions.items():
            result.setdefault(key, value)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccessibilityIssue":
        """Create from dictionary.

        Unknown top-level fields are kept in ``extensions`` so that records
        written by newer producers survive a round-trip.
        """
        return cls(
            issue_id=data["issue_id"],
            rule_id=data["rule_id"],
            agent_id=data.get("agent_id", ""),
            step_id=data.get("step_id", ""),
            url=data.get("url", ""),
            normalized_url=data.get("normalized_url", ""),
            location=IssueLocation.from_dict(data.get("location", {})),
            severity=Severity.parse(data.get("severity", Severity.LOW.value)),
            confidence=float(data.get("confidence", 1.0)),
            evidence=IssueEvidence.from_dict(data.get("evidence", {})),
            impact=IssueImpact.from_dict(data.get("impact", {})),
            fix_suggestion=FixSuggestion.from_dict(data.get("fix_suggestion", {})),
            extensions={k: v for k, v in data.items() if k not in _ISSUE_FIELDS},
        )

    @property
    def message(self) -> str:
        """Human-readable summary of the finding."""
        return self.fix_suggestion.description


def make_issue_id(agent_id: str, xpath: str) -> str:
    """Build a deterministic issue id from the checker and element position.

    Repeated runs against an unchanged tree yield the same id.
    """
    slug = re.sub(r"[^\w]", "_", xpath).strip("_")
    return f"{agent_id}_{slug}"


def normalize_page_url(url: str) -> str:
    """Strip the scheme and trailing slash from a page URL."""
    return re.sub(r"^https?://", "", url).rstrip("/")


def sort_issues(issues: list[AccessibilityIssue]) -> list[AccessibilityIssue]:
    """Order issues most severe first, then by checker and position."""
    return sorted(
        issues,
        key=lambda i: (severity_rank(i.severity), i.agent_id, i.location.xpath),
    )
