"""Pointer cursor affordance checker."""

from bs4 import Tag

from ..models import FixSuggestion, IssueImpact, Severity, ValidationOutcome
from .base import BaseChecker

INTERACTIVE_ROLES = (
    "button",
    "link",
    "checkbox",
    "menuitem",
    "menuitemcheckbox",
    "menuitemradio",
    "option",
    "radio",
    "switch",
    "tab",
)


def is_disabled(element: Tag) -> bool:
    return element.get("disabled") is not None or element.get("aria-disabled") == "true"


class CursorAffordanceChecker(BaseChecker):
    """Checks that clickable controls look clickable.

    Enabled controls must show a pointer cursor; disabled ones must not,
    since the pointer suggests an action that will not happen.
    """

    @property
    def checker_id(self) -> str:
        return "cursor-affordance"

    @property
    def name(self) -> str:
        return "Cursor Affordance"

    @property
    def rule_id(self) -> str:
        return "best-practice"

    @property
    def default_category(self) -> str:
        return "interaction"

    @property
    def step_id(self) -> str:
        return "cursor_pointer_check"

    def get_selector(self) -> str:
        roles = ", ".join(f'[role="{role}"]' for role in INTERACTIVE_ROLES)
        return (
            "a[href], button, summary, "
            'input[type="button"], input[type="submit"], input[type="reset"], '
            f'input[type="image"], {roles}'
        )

    def validate_element(
        self, element: Tag, elements: list[Tag] | None = None
    ) -> ValidationOutcome:
        cursor = self.document.computed_style(element).get("cursor", "auto")

        if is_disabled(element):
            if cursor == "pointer":
                return ValidationOutcome(
                    is_valid=False,
                    message=f"Disabled <{element.name}> shows a pointer cursor",
                    severity=Severity.LOW,
                    expected="cursor: not-allowed or default",
                    found=f"cursor: {cursor}",
                    label="Disabled pointer",
                    code="disabled-pointer",
                )
            return ValidationOutcome.valid(label=f"cursor: {cursor}")

        if cursor != "pointer":
            return ValidationOutcome(
                is_valid=False,
                message=f"Interactive <{element.name}> does not show a pointer cursor",
                severity=Severity.LOW,
                expected="cursor: pointer",
                found=f"cursor: {cursor}",
                label="No pointer",
                code="missing-pointer",
            )
        return ValidationOutcome.valid(label="cursor: pointer")

    def get_attribute(self, outcome: ValidationOutcome) -> str | None:
        return "style"

    def get_impact(self, outcome: ValidationOutcome) -> IssueImpact:
        return IssueImpact(
            user_groups=["Mouse users", "Users with cognitive disabilities"],
            assistive_tech=["Screen magnifiers"],
            functionality=["Affordance", "Interaction"],
        )

    def get_fix_suggestion(
        self, element: Tag, outcome: ValidationOutcome
    ) -> FixSuggestion:
        if outcome.code == "disabled-pointer":
            example = f"{element.name}:disabled, {element.name}[aria-disabled='true'] {{ cursor: not-allowed; }}"
        else:
            example = f"{element.name} {{ cursor: pointer; }}"
        return FixSuggestion(
            description=outcome.message or "",
            code_example=example,
            related_resources=[
                "https://developer.mozilla.org/en-US/docs/Web/CSS/cursor",
            ],
        )
