"""Identity-keyed map over document elements that does not keep them alive.

bs4 ``Tag`` objects compare and hash structurally, so two distinct headings
with the same markup would collide in a normal dict. Entries here are keyed
by object identity and disappear when the element is garbage-collected.
"""

import weakref
from collections.abc import Iterator
from typing import Generic, TypeVar

from bs4 import Tag

V = TypeVar("V")


class ElementMap(Generic[V]):
    """Map from element identity to a value, holding elements weakly."""

    def __init__(self) -> None:
        self._values: dict[int, V] = {}
        self._refs: dict[int, weakref.ref] = {}

    def _discard(self, key: int) -> None:
        self._values.pop(key, None)
        self._refs.pop(key, None)

    def set(self, element: Tag, value: V) -> None:
        key = id(element)
        if key not in self._refs:
            self._refs[key] = weakref.ref(element, lambda _, k=key: self._discard(k))
        self._values[key] = value

    def get(self, element: Tag, default: V | None = None) -> V | None:
        return self._values.get(id(element), default)

    def pop(self, element: Tag, default: V | None = None) -> V | None:
        key = id(element)
        self._refs.pop(key, None)
        return self._values.pop(key, default)

    def __contains__(self, element: object) -> bool:
        ref = self._refs.get(id(element))
        return ref is not None and ref() is element

    def __len__(self) -> int:
        return len(self._values)

    def items(self) -> Iterator[tuple[Tag, V]]:
        """Yield (element, value) pairs for elements still alive."""
        for key, ref in list(self._refs.items()):
            element = ref()
            if element is not None and key in self._values:
                yield element, self._values[key]

    def clear(self) -> None:
        self._values.clear()
        self._refs.clear()
