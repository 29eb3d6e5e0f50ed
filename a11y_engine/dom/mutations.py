"""Mutation records and observers for the live document."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bs4 import Tag

if TYPE_CHECKING:
    from .document import LiveDocument

CHILD_LIST = "childList"
ATTRIBUTES = "attributes"


@dataclass
class MutationRecord:
    """One change to the document tree."""

    type: str  # CHILD_LIST or ATTRIBUTES
    target: Tag
    added_nodes: list[Tag] = field(default_factory=list)
    removed_nodes: list[Tag] = field(default_factory=list)
    attribute_name: str | None = None
    old_value: str | None = None


@dataclass
class ObserveOptions:
    child_list: bool = False
    subtree: bool = False
    attributes: bool = False
    attribute_filter: frozenset[str] | None = None


MutationCallback = Callable[[list[MutationRecord], "MutationObserver"], None]


class MutationObserver:
    """Queues matching mutation records and delivers them in batches.

    Records are delivered when the owning document is flushed; everything
    queued since the previous delivery arrives as one batch.
    """

    def __init__(self, document: "LiveDocument", callback: MutationCallback):
        self._document = document
        self._callback = callback
        self._targets: list[tuple[Tag, ObserveOptions]] = []
        self._queue: list[MutationRecord] = []

    @property
    def is_observing(self) -> bool:
        return bool(self._targets)

    def observe(
        self,
        target: Tag,
        child_list: bool = False,
        subtree: bool = False,
        attributes: bool = False,
        attribute_filter: list[str] | None = None,
    ) -> None:
        """Start observing ``target``; re-observing replaces its options."""
        attributes = attributes or attribute_filter is not None
        if not (child_list or attributes):
            raise ValueError("observe() requires child_list or attributes")
        options = ObserveOptions(
            child_list=child_list,
            subtree=subtree,
            attributes=attributes,
            attribute_filter=(
                frozenset(attribute_filter) if attribute_filter is not None else None
            ),
        )
        self._targets = [(t, o) for t, o in self._targets if t is not target]
        self._targets.append((target, options))
        self._document._register_observer(self)

    def disconnect(self) -> None:
        """Stop observing and discard records not yet delivered."""
        self._targets.clear()
        self._queue.clear()
        self._document._unregister_observer(self)

    def take_records(self) -> list[MutationRecord]:
        """Return and clear pending records without invoking the callback."""
        records, self._queue = self._queue, []
        return records

    @property
    def pending(self) -> int:
        return len(self._queue)

    def _wants(self, record: MutationRecord) -> bool:
        for target, options in self._targets:
            if record.type == CHILD_LIST and not options.child_list:
                continue
            if record.type == ATTRIBUTES:
                if not options.attributes:
                    continue
                if (
                    options.attribute_filter is not None
                    and record.attribute_name not in options.attribute_filter
                ):
                    continue
            if record.target is target:
                return True
            if options.subtree and _is_ancestor(target, record.target):
                return True
        return False

    def _enqueue(self, record: MutationRecord) -> None:
        if self._wants(record):
            self._queue.append(record)

    def _deliver(self) -> bool:
        records = self.take_records()
        if not records:
            return False
        self._callback(records, self)
        return True


def _is_ancestor(ancestor: Tag, node: Tag) -> bool:
    parent = node.parent
    while parent is not None:
        if parent is ancestor:
            return True
        parent = parent.parent
    return False
