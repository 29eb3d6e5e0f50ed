"""Re-run a checker when the document or its color scheme changes."""

from collections.abc import Callable
from typing import TYPE_CHECKING

from bs4 import Tag

from ..dom.mutations import ATTRIBUTES, CHILD_LIST, MutationObserver, MutationRecord
from ..dom.utils import ANNOTATION_ATTRIBUTE_PREFIX, contains, is_engine_owned
from ..engine_logging import LogCategory, get_category_logger

if TYPE_CHECKING:
    from .base import BaseChecker

logger = get_category_logger(LogCategory.REVALIDATION)


class RevalidationLoop:
    """Subscription that drives cleanup-then-apply cycles for one checker.

    Watches child-list and attribute changes under the document's top
    element plus color-scheme changes. One delivered batch of mutation
    records causes at most one revalidation.
    """

    def __init__(self, checker: "BaseChecker"):
        self.checker = checker
        self._observer: MutationObserver | None = None
        self._unsubscribe_scheme: Callable[[], None] | None = None
        self.revalidation_count = 0

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        document = self.checker.document
        self._observer = document.observe(self._on_mutations)
        self._observer.observe(document.root, child_list=True, subtree=True, attributes=True)
        self._unsubscribe_scheme = document.on_color_scheme_change(self._on_color_scheme_change)

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.disconnect()
            self._observer = None
        if self._unsubscribe_scheme is not None:
            self._unsubscribe_scheme()
            self._unsubscribe_scheme = None

    def is_relevant(self, records: list[MutationRecord]) -> bool:
        """Whether any record in the batch affects the checker's elements."""
        selector = self.checker.get_selector()
        root = self.checker.document.root
        for record in records:
            if record.type == CHILD_LIST:
                for node in [*record.added_nodes, *record.removed_nodes]:
                    if not isinstance(node, Tag) or is_engine_owned(node):
                        continue
                    if contains(self.checker.last_elements, node):
                        return True
                    if self.checker.document.matches(node, selector):
                        return True
                    if node.select_one(selector) is not None:
                        return True
            elif record.type == ATTRIBUTES and record.target is root:
                if not (record.attribute_name or "").startswith(ANNOTATION_ATTRIBUTE_PREFIX):
                    return True
        return False

    def _on_mutations(self, records: list[MutationRecord], observer: MutationObserver) -> None:
        if not self.checker.is_active:
            return
        if self.is_relevant(records):
            logger.debug(
                f"{self.checker.checker_id}: {len(records)} mutation(s), revalidating",
                extra={"checker_id": self.checker.checker_id},
            )
            self._revalidate()

    def _on_color_scheme_change(self, scheme: str) -> None:
        if not self.checker.is_active:
            return
        logger.debug(
            f"{self.checker.checker_id}: color scheme now {scheme}, revalidating",
            extra={"checker_id": self.checker.checker_id},
        )
        self._revalidate()

    def _revalidate(self) -> None:
        self.revalidation_count += 1
        self.checker.revalidate()
