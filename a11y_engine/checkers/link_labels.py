"""Consistent link label checker (WCAG 3.2.4)."""

import re
from collections import defaultdict

from bs4 import Tag

from ..dom.utils import accessible_name, index_of
from ..models import FixSuggestion, IssueImpact, Severity, ValidationOutcome
from .base import BaseChecker


def normalize_link_url(href: str) -> str:
    """Drop the fragment and trailing slash, then case-fold."""
    url = re.sub(r"#.*$", "", href.strip())
    return url.rstrip("/").lower()


def is_skipped_href(href: str) -> bool:
    """Links that do not navigate anywhere comparable are not grouped."""
    value = href.strip()
    return not value or value.startswith("#") or value.lower().startswith("javascript:")


class LinkLabelChecker(BaseChecker):
    """Checks that links to the same destination share one label."""

    confidence = 0.9

    @property
    def checker_id(self) -> str:
        return "link-labels"

    @property
    def name(self) -> str:
        return "Consistent Link Labels"

    @property
    def rule_id(self) -> str:
        return "3.2.4"

    @property
    def default_category(self) -> str:
        return "links"

    @property
    def step_id(self) -> str:
        return "link_label_consistency_check"

    def get_selector(self) -> str:
        return 'a[href]:not([role="button"]), [role="link"][href]'

    def label_for(self, element: Tag) -> str:
        return accessible_name(element, self.document)

    def group_by_destination(self, elements: list[Tag]) -> dict[str, list[int]]:
        """Indices of comparable links keyed by normalized URL."""
        buckets: dict[str, list[int]] = defaultdict(list)
        for index, element in enumerate(elements):
            href = element.get("href") or ""
            if is_skipped_href(href):
                continue
            buckets[normalize_link_url(href)].append(index)
        return buckets

    def validate_all(self, elements: list[Tag]) -> list[ValidationOutcome]:
        labels = [self.label_for(element) for element in elements]
        outcomes: list[ValidationOutcome | None] = [None] * len(elements)

        for url, indices in self.group_by_destination(elements).items():
            distinct = sorted({labels[i] for i in indices})
            for i in indices:
                badge = f"{labels[i] or '(no label)'} → {url}"
                if len(distinct) == 1:
                    outcomes[i] = ValidationOutcome.valid(label=badge)
                    continue
                others = ", ".join(f'"{label}"' for label in distinct if label != labels[i])
                outcomes[i] = ValidationOutcome(
                    is_valid=False,
                    message=f"Inconsistent labels for {url}",
                    severity=Severity.MEDIUM,
                    expected=f"one label for all links to {url} (also used: {others})",
                    found=labels[i],
                    label=badge,
                    code="consistent-link-labels",
                )

        return [outcome or ValidationOutcome.valid() for outcome in outcomes]

    def validate_element(
        self, element: Tag, elements: list[Tag] | None = None
    ) -> ValidationOutcome:
        if elements is None:
            elements = self.get_elements()
        return self.validate_all(elements)[index_of(elements, element)]

    def get_attribute(self, outcome: ValidationOutcome) -> str | None:
        return "href"

    def get_impact(self, outcome: ValidationOutcome) -> IssueImpact:
        return IssueImpact(
            user_groups=["Screen reader users", "Users with cognitive disabilities"],
            assistive_tech=["Screen readers", "Voice control software"],
            functionality=["Navigation", "Link purpose"],
        )

    def get_fix_suggestion(
        self, element: Tag, outcome: ValidationOutcome
    ) -> FixSuggestion:
        return FixSuggestion(
            description=(
                f"{outcome.message}. Links with the same destination should use "
                "the same accessible label"
            ),
            code_example=f'<a href="{element.get("href", "")}">Same label everywhere</a>',
            related_resources=[
                "https://www.w3.org/WAI/WCAG21/Understanding/consistent-identification",
            ],
        )
