"""
Checker registry with toolbar selection semantics.

Checkers are grouped into categories; at most one checker per category is
active at a time. Activating a checker cleans up whichever checker was
active in its category first.
"""

from ..config import EngineConfig
from ..dom.document import LiveDocument
from ..engine_logging import LogCategory, get_category_logger
from ..models import AccessibilityIssue, RunMode, ToolResult, sort_issues
from .base import BaseChecker, IssueSink
from .cursor import CursorAffordanceChecker
from .headings import HeadingOrderChecker
from .keyboard import KeyboardAccessibilityChecker
from .language import LanguageChecker
from .link_labels import LinkLabelChecker

logger = get_category_logger(LogCategory.REGISTRY)

CHECKER_CLASSES: list[type[BaseChecker]] = [
    HeadingOrderChecker,
    KeyboardAccessibilityChecker,
    CursorAffordanceChecker,
    LinkLabelChecker,
    LanguageChecker,
]


class CheckerRegistry:
    """Binds checkers to one document and enforces one active per category."""

    def __init__(self, document: LiveDocument):
        self.document = document
        self._checkers: dict[str, BaseChecker] = {}
        self._by_category: dict[str, list[BaseChecker]] = {}
        self._category_of: dict[str, str] = {}
        self._active: dict[str, str] = {}  # category -> checker_id

    def register(self, checker: BaseChecker, category: str | None = None) -> None:
        """Register a checker under a category (its default when omitted).

        Raises:
            ValueError: If the checker is bound to another document or the
                id is already registered.
        """
        if checker.document is not self.document:
            raise ValueError(f"Checker {checker.checker_id} is bound to another document")
        checker_id = checker.checker_id
        if checker_id in self._checkers:
            raise ValueError(f"Checker already registered: {checker_id}")

        category = category or checker.default_category
        self._checkers[checker_id] = checker
        self._category_of[checker_id] = category
        self._by_category.setdefault(category, []).append(checker)
        logger.debug(f"Registered checker {checker_id} in category {category}")

    def get(self, checker_id: str) -> BaseChecker | None:
        return self._checkers.get(checker_id)

    def get_all(self) -> list[BaseChecker]:
        return list(self._checkers.values())

    def categories(self) -> dict[str, list[str]]:
        """Checker ids per category, in registration order."""
        return {
            category: [c.checker_id for c in checkers]
            for category, checkers in self._by_category.items()
        }

    def category_of(self, checker_id: str) -> str | None:
        return self._category_of.get(checker_id)

    def active(self) -> dict[str, str]:
        """Active checker id per category."""
        return dict(self._active)

    def toggle(self, category: str, checker_id: str) -> ToolResult:
        """Select or deselect a checker within a category.

        Raises:
            KeyError: If the checker is not registered in ``category``.
        """
        if self._category_of.get(checker_id) != category:
            raise KeyError(f"No checker {checker_id!r} in category {category!r}")

        checker = self._checkers[checker_id]
        current = self._active.get(category)

        if current == checker_id:
            del self._active[category]
            logger.info(f"Deactivating {checker_id}")
            return checker.run(RunMode.CLEANUP)

        if current is not None:
            logger.info(f"Switching {category} from {current} to {checker_id}")
            self._checkers[current].run(RunMode.CLEANUP)
            del self._active[category]

        result = checker.run(RunMode.APPLY)
        if result.success:
            self._active[category] = checker_id
        return result

    def cleanup_all(self) -> int:
        """Clean up every active checker; returns how many were cleaned."""
        cleaned = 0
        for category, checker_id in list(self._active.items()):
            if self._checkers[checker_id].run(RunMode.CLEANUP).success:
                cleaned += 1
            del self._active[category]
        return cleaned

    def diagnostics(self) -> list[AccessibilityIssue]:
        """Records from the latest pass of every active checker."""
        issues: list[AccessibilityIssue] = []
        for checker_id in self._active.values():
            issues.extend(self._checkers[checker_id].diagnostics)
        return sort_issues(issues)


def create_default_registry(
    document: LiveDocument,
    config: EngineConfig | None = None,
    issue_sink: IssueSink | None = None,
) -> CheckerRegistry:
    """Create a registry holding every built-in checker."""
    config = config or EngineConfig()
    registry = CheckerRegistry(document)
    for checker_class in CHECKER_CLASSES:
        registry.register(checker_class(document, config=config, issue_sink=issue_sink))
    return registry
