"""Pre-annotation snapshots of element presentation.

A snapshot holds only what annotation writes: the ``outline`` and
``background-color`` declarations, the raw ``style`` attribute and the
state/label markers. Restoring puts those back and leaves every other
attribute as the host page has it now.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bs4 import Tag

from ..dom.document import parse_inline_style
from ..dom.element_map import ElementMap
from ..dom.utils import LABEL_ATTRIBUTE, STATE_ATTRIBUTE

if TYPE_CHECKING:
    from ..dom.document import LiveDocument

ANNOTATED_STYLES = ("outline", "background-color")


@dataclass(frozen=True)
class ElementSnapshot:
    """Presentation state of an element before a checker touched it."""

    original_outline: str | None
    original_background: str | None
    original_style: str | None  # Raw attribute; None when absent
    original_state: str | None
    original_label: str | None

    @classmethod
    def capture(cls, element: Tag) -> "ElementSnapshot":
        style = element.get("style")
        declarations = parse_inline_style(style)
        return cls(
            original_outline=declarations.get("outline"),
            original_background=declarations.get("background-color"),
            original_style=style,
            original_state=element.get(STATE_ATTRIBUTE),
            original_label=element.get(LABEL_ATTRIBUTE),
        )

    def restore(self, document: "LiveDocument", element: Tag) -> None:
        """Undo annotation on ``element``, keeping unrelated host changes."""
        declarations = parse_inline_style(element.get("style"))
        for prop, original in zip(
            ANNOTATED_STYLES, (self.original_outline, self.original_background), strict=True
        ):
            if original is None:
                declarations.pop(prop, None)
            else:
                declarations[prop] = original

        if declarations == parse_inline_style(self.original_style):
            # Unchanged apart from annotation: put back the exact original text
            if self.original_style is None:
                document.remove_attribute(element, "style")
            elif element.get("style") != self.original_style:
                document.set_attribute(element, "style", self.original_style)
        else:
            for prop in ANNOTATED_STYLES:
                document.set_style(element, prop, declarations.get(prop))

        for name, original in (
            (STATE_ATTRIBUTE, self.original_state),
            (LABEL_ATTRIBUTE, self.original_label),
        ):
            if original is None:
                document.remove_attribute(element, name)
            elif element.get(name) != original:
                document.set_attribute(element, name, original)


class SnapshotStore:
    """Per-checker snapshots keyed by element identity.

    An entry exists exactly while the checker has altered that element's
    presentation. Elements garbage-collected in the meantime drop out.
    """

    def __init__(self) -> None:
        self._entries: ElementMap[ElementSnapshot] = ElementMap()

    def record(self, element: Tag) -> bool:
        """Snapshot ``element`` unless already recorded.

        Returns:
            True if a new snapshot was taken.
        """
        if element in self._entries:
            return False
        self._entries.set(element, ElementSnapshot.capture(element))
        return True

    def get(self, element: Tag) -> ElementSnapshot | None:
        return self._entries.get(element)

    def __contains__(self, element: object) -> bool:
        return element in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def restore_all(self, document: "LiveDocument") -> int:
        """Restore every recorded element and empty the store.

        Returns:
            Number of elements restored.
        """
        restored = 0
        for element, snapshot in list(self._entries.items()):
            snapshot.restore(document, element)
            restored += 1
        self._entries.clear()
        return restored

    def clear(self) -> None:
        self._entries.clear()
