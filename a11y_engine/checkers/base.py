"""
Base class for accessibility checkers.

A checker selects elements from a live document, validates each one
against a single accessibility rule, annotates the outcome in place and
emits an ``AccessibilityIssue`` for every failure. While active it keeps
its annotations current through a ``RevalidationLoop``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from bs4 import Tag

from ..config import EngineConfig
from ..dom.document import LiveDocument
from ..dom.utils import (
    LABEL_ATTRIBUTE,
    OWNER_ATTRIBUTE,
    STATE_ATTRIBUTE,
    css_path,
    is_engine_owned,
    landmark_context,
    markup_snippet,
    xpath,
)
from ..engine_logging import LogCategory, get_category_logger, log_group
from ..errors import SelectorError
from ..models import (
    AccessibilityIssue,
    FixSuggestion,
    IssueEvidence,
    IssueImpact,
    IssueLocation,
    RunMode,
    Severity,
    ToolResult,
    ValidationOutcome,
    make_issue_id,
    normalize_page_url,
)
from .revalidation import RevalidationLoop
from .snapshots import SnapshotStore

logger = get_category_logger(LogCategory.CHECKERS)

IssueSink = Callable[[AccessibilityIssue], None]


class BaseChecker(ABC):
    """Abstract base class for all accessibility checkers."""

    #: Confidence attached to emitted records
    confidence: float = 1.0

    def __init__(
        self,
        document: LiveDocument,
        config: EngineConfig | None = None,
        issue_sink: IssueSink | None = None,
    ):
        self.document = document
        self.config = config or EngineConfig()
        self.issue_sink = issue_sink
        self.is_active = False
        self.diagnostics: list[AccessibilityIssue] = []
        self.last_elements: list[Tag] = []
        self._snapshots = SnapshotStore()
        self._owned_nodes: list[Tag] = []
        self._loop = RevalidationLoop(self)

    @property
    @abstractmethod
    def checker_id(self) -> str:
        """Unique checker identifier (e.g., 'heading-order')."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable checker name."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """WCAG success criterion checked, e.g. '1.3.1'."""

    @property
    def default_category(self) -> str:
        """Toolbar category this checker belongs to."""
        return "structure"

    @property
    def step_id(self) -> str:
        return f"{self.checker_id.replace('-', '_')}_check"

    @property
    def description(self) -> str:
        return f"Checker {self.checker_id}: {self.name}"

    @property
    def revalidation_loop(self) -> RevalidationLoop:
        return self._loop

    @property
    def snapshots(self) -> SnapshotStore:
        return self._snapshots

    @abstractmethod
    def get_selector(self) -> str:
        """CSS selector for the elements this checker inspects."""

    @abstractmethod
    def validate_element(
        self, element: Tag, elements: list[Tag] | None = None
    ) -> ValidationOutcome:
        """Validate one element.

        Sequence-sensitive checkers use ``elements``, the full ordered list
        the element belongs to; others ignore it.
        """

    def validate_all(self, elements: list[Tag]) -> list[ValidationOutcome]:
        """Validate an ordered list of elements in one pass."""
        return [self.validate_element(element, elements) for element in elements]

    def get_elements(self) -> list[Tag]:
        """Query the document afresh for matching elements.

        Raises:
            SelectorError: If the selector is malformed.
        """
        return [
            element
            for element in self.document.query(self.get_selector())
            if not is_engine_owned(element)
        ]

    # Diagnostics

    def get_impact(self, outcome: ValidationOutcome) -> IssueImpact:
        return IssueImpact()

    @abstractmethod
    def get_fix_suggestion(
        self, element: Tag, outcome: ValidationOutcome
    ) -> FixSuggestion:
        """Remediation advice for a failing outcome."""

    def get_rule_id(self, outcome: ValidationOutcome) -> str:
        return self.rule_id

    def get_attribute(self, outcome: ValidationOutcome) -> str | None:
        """Attribute the finding is about, if any."""
        return None

    def build_issue(
        self, element: Tag, outcome: ValidationOutcome
    ) -> AccessibilityIssue:
        """Build the diagnostic record for a failing outcome."""
        position = xpath(element)
        url = self.config.reporting.page_url or self.document.url
        return AccessibilityIssue(
            issue_id=make_issue_id(self.checker_id, position),
            rule_id=self.get_rule_id(outcome),
            agent_id=self.checker_id,
            step_id=self.step_id,
            url=url,
            normalized_url=normalize_page_url(url),
            location=IssueLocation(
                xpath=position,
                selector=css_path(element),
                element_type=element.name,
                context=landmark_context(element),
                attribute=self.get_attribute(outcome),
            ),
            severity=outcome.severity or Severity.MEDIUM,
            confidence=self.confidence,
            evidence=IssueEvidence(
                found_value=outcome.found or "",
                expected_value=outcome.expected or "",
                snippet=markup_snippet(
                    element, self.config.reporting.snippet_max_length
                ),
            ),
            impact=self.get_impact(outcome),
            fix_suggestion=self.get_fix_suggestion(element, outcome),
        )

    def collect_issues(self) -> list[AccessibilityIssue]:
        """Validate the document and return records without annotating."""
        elements = self.get_elements()
        outcomes = self.validate_all(elements)
        return [
            self.build_issue(element, outcome)
            for element, outcome in zip(elements, outcomes, strict=True)
            if not outcome.is_valid
        ]

    # Annotation

    def annotate(self, element: Tag, outcome: ValidationOutcome) -> None:
        """Mark an element as passing or failing in the live document."""
        self._snapshots.record(element)

        annotation = self.config.annotation
        colors = annotation.colors_for(self.document.color_scheme)
        color = colors.valid if outcome.is_valid else colors.invalid
        background = (
            colors.valid_background if outcome.is_valid else colors.invalid_background
        )
        self.document.set_style(
            element, "outline", f"{annotation.outline_width} solid {color}"
        )
        self.document.set_style(element, "background-color", background)
        self.document.set_attribute(
            element, STATE_ATTRIBUTE, "valid" if outcome.is_valid else "error"
        )
        if outcome.message:
            self.document.set_attribute(element, LABEL_ATTRIBUTE, outcome.message)

        label = outcome.label or (None if outcome.is_valid else outcome.message)
        if (
            annotation.insert_badges
            and label
            and element is not self.document.root
            and element.parent is not None
        ):
            badge = self.document.create_element(
                "span",
                {
                    "class": annotation.badge_class,
                    OWNER_ATTRIBUTE: self.checker_id,
                    "aria-hidden": "true",
                    "style": f"background-color: {color}; color: {colors.badge_text}",
                },
                text=label,
            )
            self.document.insert_before(element, badge)
            self._owned_nodes.append(badge)

    def _remove_owned_nodes(self) -> None:
        for node in reversed(self._owned_nodes):
            if node.parent is not None:
                self.document.remove(node)
        self._owned_nodes.clear()

    # Lifecycle

    def apply(self) -> ToolResult:
        """Validate, annotate and start watching the document."""
        if self.is_active:
            logger.debug(f"{self.checker_id} already active")
            return ToolResult(success=False)

        try:
            elements = self.get_elements()
        except SelectorError as e:
            logger.error(f"{self.checker_id}: {e}", extra={"checker_id": self.checker_id})
            return ToolResult(success=False, issues=[str(e)])

        if not elements:
            logger.info(f"{self.name}: no matching elements found")
            return ToolResult(success=False)

        outcomes = self.validate_all(elements)

        self.diagnostics = []
        messages: list[str] = []
        for element, outcome in zip(elements, outcomes, strict=True):
            if outcome.is_valid:
                continue
            issue = self.build_issue(element, outcome)
            self.diagnostics.append(issue)
            messages.append(outcome.message or issue.message)
            if self.issue_sink is not None:
                self.issue_sink(issue)

        for element, outcome in zip(elements, outcomes, strict=True):
            self.annotate(element, outcome)

        self.last_elements = elements
        self.is_active = True
        self._loop.start()
        self._log_results(len(elements), messages)
        return ToolResult(success=True, issues=messages)

    def cleanup(self) -> ToolResult:
        """Stop watching and restore the document to its pre-apply state."""
        if not self.is_active:
            return ToolResult(success=False)

        self._loop.stop()
        self._remove_owned_nodes()
        restored = self._snapshots.restore_all(self.document)
        self.last_elements = []
        self.is_active = False
        logger.debug(f"{self.checker_id}: restored {restored} elements")
        return ToolResult(success=True)

    def revalidate(self) -> ToolResult:
        """Rerun the full cycle against the current document."""
        self.cleanup()
        return self.apply()

    def run(self, mode: RunMode | str) -> ToolResult:
        """Toolbar entry point.

        Raises:
            ValueError: If ``mode`` is not 'apply' or 'cleanup'.
        """
        try:
            mode = RunMode(mode)
        except ValueError:
            raise ValueError(
                f"Invalid mode {mode!r}; expected 'apply' or 'cleanup'"
            ) from None
        if mode is RunMode.APPLY:
            return self.apply()
        return self.cleanup()

    def _log_results(self, element_count: int, messages: list[str]) -> None:
        extra = {"checker_id": self.checker_id, "element_count": element_count}
        if messages:
            log_group(
                logger,
                logging.WARNING,
                f"{self.name}: {len(messages)} issue(s) in {element_count} element(s)",
                messages,
                marker="x",
                **extra,
            )
        else:
            logger.info(
                f"{self.name}: all {element_count} element(s) pass", extra=extra
            )
