"""Heading order checker (WCAG 1.3.1)."""

from bs4 import Tag

from ..dom.utils import get_int_attribute, index_of, is_hidden, text_content
from ..models import FixSuggestion, IssueImpact, Severity, ValidationOutcome
from .base import BaseChecker

DEFAULT_ARIA_HEADING_LEVEL = 2

HEADING_RESOURCES = [
    "https://www.w3.org/WAI/tutorials/page-structure/headings/",
    "https://developer.mozilla.org/en-US/docs/Web/HTML/Element/Heading_Elements",
    "https://webaim.org/techniques/semanticstructure/#headings",
]


def heading_level(element: Tag) -> int:
    """Level from a valid ``aria-level``, else the tag name, else 2."""
    aria_level = get_int_attribute(element, "aria-level")
    if aria_level is not None and aria_level >= 1:
        return aria_level
    name = element.name or ""
    if len(name) == 2 and name[0] == "h" and name[1] in "123456":
        return int(name[1])
    return DEFAULT_ARIA_HEADING_LEVEL


class HeadingOrderChecker(BaseChecker):
    """Checks that headings start at level 1 and never skip a level.

    The sequence is walked in document order carrying the last valid
    level; a heading may go at most one level deeper than that, and may
    always return to a shallower level.
    """

    @property
    def checker_id(self) -> str:
        return "heading-order"

    @property
    def name(self) -> str:
        return "Heading Order"

    @property
    def rule_id(self) -> str:
        return "1.3.1"

    @property
    def step_id(self) -> str:
        return "heading_sequence_check"

    @property
    def description(self) -> str:
        return "Headings must form a sequential outline starting at H1"

    def get_selector(self) -> str:
        return 'h1, h2, h3, h4, h5, h6, [role="heading"]'

    def get_elements(self) -> list[Tag]:
        return [el for el in super().get_elements() if not is_hidden(el, self.document)]

    def validate_all(self, elements: list[Tag]) -> list[ValidationOutcome]:
        outcomes = []
        last_valid_level = 0
        for index, element in enumerate(elements):
            outcome, last_valid_level = self._check(element, index, last_valid_level)
            outcomes.append(outcome)
        return outcomes

    def validate_element(
        self, element: Tag, elements: list[Tag] | None = None
    ) -> ValidationOutcome:
        if elements is None:
            elements = self.get_elements()
        position = index_of(elements, element)
        return self.validate_all(elements[: position + 1])[position]

    def _check(
        self, element: Tag, index: int, last_valid_level: int
    ) -> tuple[ValidationOutcome, int]:
        level = heading_level(element)
        label = f"H{level}"

        if index == 0:
            if level != 1:
                outcome = ValidationOutcome(
                    is_valid=False,
                    message=f"First heading must be H1, found H{level}",
                    severity=Severity.CRITICAL,
                    expected="h1",
                    found=f"h{level}",
                    label=label,
                    code="first-heading",
                )
            else:
                outcome = self._check_text(element, level, label)
            # The first heading always sets the baseline
            return outcome, level

        if level > last_valid_level + 1:
            return (
                ValidationOutcome(
                    is_valid=False,
                    message=f"Invalid heading sequence: H{last_valid_level} to H{level}",
                    severity=Severity.HIGH,
                    expected=f"h{last_valid_level + 1}",
                    found=f"h{level}",
                    label=label,
                    code="skipped-level",
                ),
                last_valid_level,
            )

        outcome = self._check_text(element, level, label)
        return outcome, level if outcome.is_valid else last_valid_level

    def _check_text(self, element: Tag, level: int, label: str) -> ValidationOutcome:
        if not text_content(element) and not (element.get("aria-label") or "").strip():
            return ValidationOutcome(
                is_valid=False,
                message=f"H{level} heading has no text content",
                severity=Severity.HIGH,
                expected="text content",
                found="empty heading",
                label=label,
                code="empty-heading",
            )
        return ValidationOutcome.valid(label=label)

    def get_impact(self, outcome: ValidationOutcome) -> IssueImpact:
        return IssueImpact(
            user_groups=[
                "Screen reader users",
                "Keyboard users",
                "Users with cognitive disabilities",
            ],
            assistive_tech=["Screen readers", "Navigation tools"],
            functionality=["Content structure", "Navigation", "Document outline"],
        )

    def get_fix_suggestion(
        self, element: Tag, outcome: ValidationOutcome
    ) -> FixSuggestion:
        if outcome.code == "empty-heading":
            code_example = f"<{element.name}>Descriptive section title</{element.name}>"
        else:
            code_example = f"<{outcome.expected}>{text_content(element)}</{outcome.expected}>"
        return FixSuggestion(
            description=outcome.message or "",
            code_example=code_example,
            related_resources=list(HEADING_RESOURCES),
        )
