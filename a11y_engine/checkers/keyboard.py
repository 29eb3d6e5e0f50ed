"""Keyboard reachability checker (WCAG 2.1.1)."""

from bs4 import Tag

from ..dom.utils import accessible_name, get_int_attribute, is_element
from ..models import FixSuggestion, IssueImpact, Severity, ValidationOutcome
from .base import BaseChecker

NATIVE_CONTROL_SELECTOR = (
    "a[href], area[href], button, input:not([type='hidden']), select, "
    "textarea, details > summary:first-of-type, iframe, audio[controls], "
    "video[controls], [contenteditable]:not([contenteditable='false'])"
)

CUSTOM_CONTROL_ROLES = (
    "button",
    "link",
    "menuitem",
    "tab",
    "checkbox",
    "radio",
    "switch",
    "combobox",
    "option",
)

MOUSE_ONLY_EVENTS = (
    "mousedown",
    "mouseup",
    "mousemove",
    "mouseover",
    "mouseout",
    "mouseenter",
    "mouseleave",
    "dragstart",
    "dragend",
    "dragover",
    "dragenter",
    "dragleave",
)
KEYBOARD_EVENTS = ("keydown", "keyup", "keypress", "focus", "blur", "click")


def inline_handlers(element: Tag) -> set[str]:
    """Event names with inline ``on*`` handler attributes."""
    return {name[2:].lower() for name in element.attrs if name.lower().startswith("on")}


def is_inert(element: Tag) -> bool:
    current = element
    while is_element(current):
        if current.get("inert") is not None:
            return True
        current = current.parent
    return False


class KeyboardAccessibilityChecker(BaseChecker):
    """Checks that interactive elements can be reached and used by keyboard."""

    @property
    def checker_id(self) -> str:
        return "keyboard-access"

    @property
    def name(self) -> str:
        return "Keyboard Accessibility"

    @property
    def rule_id(self) -> str:
        return "2.1.1"

    @property
    def default_category(self) -> str:
        return "interaction"

    @property
    def step_id(self) -> str:
        return "keyboard_reachability_check"

    def get_selector(self) -> str:
        roles = ", ".join(f'[role="{role}"]' for role in CUSTOM_CONTROL_ROLES)
        return f"{NATIVE_CONTROL_SELECTOR}, [tabindex], [onclick], {roles}"

    def is_native_control(self, element: Tag) -> bool:
        return self.document.matches(element, NATIVE_CONTROL_SELECTOR)

    def is_custom_control(self, element: Tag) -> bool:
        """Non-native element scripted or announced as a control."""
        role = (element.get("role") or "").strip()
        return element.get("onclick") is not None or role in CUSTOM_CONTROL_ROLES

    def validate_element(
        self, element: Tag, elements: list[Tag] | None = None
    ) -> ValidationOutcome:
        if is_inert(element) or element.get("disabled") is not None:
            return ValidationOutcome.valid(label="Not focusable (disabled)")

        tabindex = get_int_attribute(element, "tabindex")
        handlers = inline_handlers(element)

        if self.is_native_control(element):
            if tabindex is not None and tabindex < 0:
                return self._fail(
                    "negative-tabindex",
                    f"<{element.name}> is removed from the tab order (tabindex={tabindex})",
                    Severity.HIGH,
                    expected="tabindex >= 0 or no tabindex",
                    found=f"tabindex={tabindex}",
                )
        elif self.is_custom_control(element):
            outcome = self._check_custom_control(element, tabindex)
            if outcome is not None:
                return outcome

        if tabindex is not None and tabindex > 0:
            return self._fail(
                "positive-tabindex",
                f"<{element.name}> uses a positive tabindex ({tabindex})",
                Severity.MEDIUM,
                expected="tabindex=0",
                found=f"tabindex={tabindex}",
            )

        mouse_only = handlers.intersection(MOUSE_ONLY_EVENTS)
        if mouse_only and not handlers.intersection(KEYBOARD_EVENTS):
            return self._fail(
                "mouse-only",
                f"<{element.name}> has mouse-only interactions "
                f"({', '.join(sorted(mouse_only))})",
                Severity.HIGH,
                expected="keyboard equivalent (onkeydown, onfocus or onclick)",
                found=", ".join(f"on{e}" for e in sorted(mouse_only)),
            )

        return ValidationOutcome.valid(label="Keyboard OK")

    def _check_custom_control(
        self, element: Tag, tabindex: int | None
    ) -> ValidationOutcome | None:
        if tabindex is None or tabindex < 0:
            return self._fail(
                "not-focusable",
                f"Custom control <{element.name}> is not keyboard focusable",
                Severity.HIGH,
                expected='tabindex="0"',
                found="no tabindex" if tabindex is None else f"tabindex={tabindex}",
            )
        role = (element.get("role") or "").strip()
        if role not in CUSTOM_CONTROL_ROLES:
            return self._fail(
                "missing-role",
                f"Custom control <{element.name}> has no valid interactive role",
                Severity.HIGH,
                expected=f"role in {', '.join(CUSTOM_CONTROL_ROLES)}",
                found=f'role="{role}"' if role else "no role",
            )
        if not accessible_name(element, self.document, include_title=True):
            return self._fail(
                "missing-label",
                f"Custom control <{element.name}> has no accessible label",
                Severity.HIGH,
                expected="aria-label, aria-labelledby or text content",
                found="no label",
            )
        return None

    @staticmethod
    def _fail(
        code: str, message: str, severity: Severity, expected: str, found: str
    ) -> ValidationOutcome:
        return ValidationOutcome(
            is_valid=False,
            message=message,
            severity=severity,
            expected=expected,
            found=found,
            label=code.replace("-", " ").capitalize(),
            code=code,
        )

    def get_attribute(self, outcome: ValidationOutcome) -> str | None:
        return {
            "negative-tabindex": "tabindex",
            "positive-tabindex": "tabindex",
            "not-focusable": "tabindex",
            "missing-role": "role",
            "missing-label": "aria-label",
        }.get(outcome.code or "")

    def get_impact(self, outcome: ValidationOutcome) -> IssueImpact:
        return IssueImpact(
            user_groups=["Keyboard users", "Screen reader users", "Users with motor disabilities"],
            assistive_tech=["Keyboard", "Switch devices", "Screen readers"],
            functionality=["Operability", "Focus order"],
        )

    def get_fix_suggestion(
        self, element: Tag, outcome: ValidationOutcome
    ) -> FixSuggestion:
        examples = {
            "negative-tabindex": f"<{element.name}> without tabindex=\"-1\"",
            "positive-tabindex": f'<{element.name} tabindex="0">',
            "not-focusable": f'<{element.name} role="button" tabindex="0" onkeydown="...">',
            "missing-role": f'<{element.name} role="button" tabindex="0">',
            "missing-label": f'<{element.name} role="button" tabindex="0" aria-label="Close">',
            "mouse-only": f'<{element.name} onmouseover="show()" onfocus="show()">',
        }
        return FixSuggestion(
            description=outcome.message or "",
            code_example=examples.get(outcome.code or "", ""),
            related_resources=[
                "https://www.w3.org/WAI/WCAG21/Understanding/keyboard.html",
                "https://webaim.org/techniques/keyboard/",
            ],
        )
