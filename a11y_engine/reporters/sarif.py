"""SARIF 2.1.0 export of diagnostic records.

Each checker becomes a rule and each record a result whose logical
location is the element XPath, so code scanning dashboards can group
and deduplicate findings across runs.

Format reference: https://docs.oasis-open.org/sarif/sarif/v2.1.0/
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..models import AccessibilityIssue, Severity, sort_issues


@dataclass
class SARIFConfig:
    """Configuration for SARIF output."""

    tool_name: str = "a11y-engine"
    tool_version: str = "0.1.0"
    tool_information_uri: str = "https://www.w3.org/WAI/WCAG21/quickref/"
    include_remediation: bool = True  # Whether to include fix suggestions


# Rule metadata for SARIF, keyed by checker id
RULE_METADATA = {
    "heading-order": {
        "name": "HeadingOrder",
        "shortDescription": "Headings skip levels or do not start at H1",
        "fullDescription": (
            "Headings must form a sequential outline so that screen reader "
            "users can navigate the page structure."
        ),
        "helpUri": "https://www.w3.org/WAI/tutorials/page-structure/headings/",
        "tags": ["accessibility", "wcag131", "structure"],
    },
    "link-labels": {
        "name": "ConsistentLinkLabels",
        "shortDescription": "Links to the same destination use different labels",
        "fullDescription": (
            "Components with the same functionality must be identified "
            "consistently; links to one URL should share one label."
        ),
        "helpUri": "https://www.w3.org/WAI/WCAG21/Understanding/consistent-identification",
        "tags": ["accessibility", "wcag324", "links"],
    },
    "language": {
        "name": "LanguageAttributes",
        "shortDescription": "Missing or malformed language attributes",
        "fullDescription": (
            "The page and any language-of-parts overrides must declare "
            "well-formed BCP 47 language tags."
        ),
        "helpUri": "https://www.w3.org/International/questions/qa-html-language-declarations",
        "tags": ["accessibility", "wcag311", "wcag312", "content"],
    },
    "cursor-affordance": {
        "name": "CursorAffordance",
        "shortDescription": "Interactive elements without a pointer cursor",
        "fullDescription": (
            "Clickable controls should show a pointer cursor and disabled "
            "controls should not."
        ),
        "helpUri": "https://developer.mozilla.org/en-US/docs/Web/CSS/cursor",
        "tags": ["accessibility", "best-practice", "interaction"],
    },
    "keyboard-access": {
        "name": "KeyboardAccessibility",
        "shortDescription": "Functionality not operable through the keyboard",
        "fullDescription": (
            "All functionality must be reachable and operable with a "
            "keyboard, without requiring specific timings."
        ),
        "helpUri": "https://www.w3.org/WAI/WCAG21/Understanding/keyboard.html",
        "tags": ["accessibility", "wcag211", "interaction"],
    },
}


def severity_to_sarif_level(severity: Severity | str) -> str:
    """Map a severity to a SARIF level (error/warning/note)."""
    mapping = {
        Severity.CRITICAL: "error",
        Severity.HIGH: "error",
        Severity.MEDIUM: "warning",
        Severity.LOW: "note",
    }
    if isinstance(severity, Severity):
        return mapping[severity]
    return "warning"


class SARIFExporter:
    """Exports accessibility issues to SARIF format."""

    SARIF_VERSION = "2.1.0"
    SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"

    def __init__(self, config: SARIFConfig | None = None):
        self.config = config or SARIFConfig()

    def export(
        self,
        issues: list[AccessibilityIssue],
        output_path: Path | None = None,
    ) -> dict[str, Any]:
        """Export issues to a SARIF document.

        Args:
            issues: Diagnostic records to export.
            output_path: Optional path to write the SARIF file.

        Returns:
            SARIF document as dictionary.
        """
        sarif_doc = self._build_sarif_document(sort_issues(issues))

        if output_path:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(sarif_doc, f, indent=2)

        return sarif_doc

    def export_json(self, issues: list[AccessibilityIssue]) -> str:
        return json.dumps(self.export(issues), indent=2)

    def _build_sarif_document(self, issues: list[AccessibilityIssue]) -> dict[str, Any]:
        rule_ids = list(dict.fromkeys(issue.agent_id for issue in issues))
        rules = self._build_rule_definitions(rule_ids)
        rule_index = {rule_id: idx for idx, rule_id in enumerate(rule_ids)}

        results = [
            self._build_result(issue, rule_index[issue.agent_id]) for issue in issues
        ]

        return {
            "$schema": self.SARIF_SCHEMA,
            "version": self.SARIF_VERSION,
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": self.config.tool_name,
                            "version": self.config.tool_version,
                            "informationUri": self.config.tool_information_uri,
                            "rules": rules,
                        }
                    },
                    "results": results,
                }
            ],
        }

    def _build_rule_definitions(self, rule_ids: list[str]) -> list[dict[str, Any]]:
        rules = []
        for rule_id in rule_ids:
            metadata = RULE_METADATA.get(rule_id, {})
            rule = {
                "id": rule_id,
                "name": metadata.get("name", rule_id.replace("-", " ").title()),
                "shortDescription": {
                    "text": metadata.get("shortDescription", f"Checker {rule_id}")
                },
                "fullDescription": {
                    "text": metadata.get(
                        "fullDescription", f"Accessibility checker: {rule_id}"
                    )
                },
                "properties": {"tags": metadata.get("tags", ["accessibility"])},
            }
            if "helpUri" in metadata:
                rule["helpUri"] = metadata["helpUri"]
            rules.append(rule)
        return rules

    def _build_result(self, issue: AccessibilityIssue, rule_index: int) -> dict[str, Any]:
        location = issue.location
        result: dict[str, Any] = {
            "ruleId": issue.agent_id,
            "ruleIndex": rule_index,
            "level": severity_to_sarif_level(issue.severity),
            "message": {"text": issue.message},
            "partialFingerprints": {"issueId": issue.issue_id},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": issue.url or "document"},
                        "region": {"snippet": {"text": issue.evidence.snippet}},
                    },
                    "logicalLocations": [
                        {
                            "fullyQualifiedName": location.xpath,
                            "name": location.selector,
                            "kind": "element",
                        }
                    ],
                }
            ],
        }

        if self.config.include_remediation and issue.fix_suggestion.code_example:
            result["fixes"] = [
                {"description": {"text": issue.fix_suggestion.code_example}}
            ]

        result["properties"] = {
            "wcag": issue.rule_id,
            "severity": (
                issue.severity.value
                if isinstance(issue.severity, Severity)
                else issue.severity
            ),
            "confidence": issue.confidence,
            "context": location.context,
        }
        return result


__all__ = [
    "SARIFConfig",
    "SARIFExporter",
    "severity_to_sarif_level",
]
