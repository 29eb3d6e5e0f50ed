"""Host document abstraction used by the checkers."""

from .document import COLOR_SCHEMES, LiveDocument
from .element_map import ElementMap
from .mutations import ATTRIBUTES, CHILD_LIST, MutationObserver, MutationRecord

__all__ = [
    "ATTRIBUTES",
    "CHILD_LIST",
    "COLOR_SCHEMES",
    "ElementMap",
    "LiveDocument",
    "MutationObserver",
    "MutationRecord",
]
