"""Element helpers: positions, text, accessible names and markup snippets."""

import copy
import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

OWNER_ATTRIBUTE = "data-a11y-owner"
STATE_ATTRIBUTE = "data-a11y-state"
LABEL_ATTRIBUTE = "data-a11y-label"
ANNOTATION_ATTRIBUTE_PREFIX = "data-a11y-"

_SKIPPED_TEXT_ELEMENTS = frozenset({"script", "style", "template", "noscript"})

LANDMARK_ROLES = {
    "main": "main",
    "nav": "navigation",
    "header": "banner",
    "footer": "contentinfo",
    "aside": "complementary",
    "form": "form",
    "search": "search",
}
_ARIA_LANDMARKS = frozenset(
    {"main", "navigation", "banner", "contentinfo", "complementary", "form", "search", "region"}
)
DEFAULT_CONTEXT = "Document structure"


def is_element(node: object) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_engine_owned(node: Tag) -> bool:
    """Whether ``node`` or an ancestor was inserted by a checker."""
    current = node
    while is_element(current):
        if current.get(OWNER_ATTRIBUTE) is not None:
            return True
        current = current.parent
    return False


def index_of(elements: list[Tag], element: Tag) -> int:
    """Identity-based index; ``list.index`` compares tags structurally."""
    for i, candidate in enumerate(elements):
        if candidate is element:
            return i
    raise ValueError("element not in list")


def contains(elements: list[Tag], element: Tag) -> bool:
    return any(candidate is element for candidate in elements)


def _position_among_siblings(element: Tag) -> int:
    position = 1
    sibling = element.previous_sibling
    while sibling is not None:
        if (
            isinstance(sibling, Tag)
            and sibling.name == element.name
            and sibling.get(OWNER_ATTRIBUTE) is None
        ):
            position += 1
        sibling = sibling.previous_sibling
    return position


def xpath(element: Tag) -> str:
    """Positional XPath such as ``/html[1]/body[1]/h2[1]``.

    Engine-owned siblings are not counted, so the path is stable whether or
    not annotations are present.
    """
    parts = []
    current = element
    while is_element(current):
        parts.append(f"{current.name}[{_position_among_siblings(current)}]")
        current = current.parent
    return "/" + "/".join(reversed(parts))


def css_path(element: Tag) -> str:
    """CSS path using ``:nth-of-type`` where a tag repeats among siblings."""
    path = []
    current = element
    while is_element(current):
        if current.get("id") and current is not element:
            path.append(f"#{current['id']}")
            break
        index = _position_among_siblings(current)
        path.append(f"{current.name}:nth-of-type({index})" if index > 1 else current.name)
        current = current.parent
    return " > ".join(reversed(path))


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _collect_text(node: Tag, parts: list[str], include_alt: bool, skip_hidden: bool) -> None:
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
            continue
        if not isinstance(child, Tag):
            continue
        if child.get(OWNER_ATTRIBUTE) is not None or child.name in _SKIPPED_TEXT_ELEMENTS:
            continue
        if skip_hidden and (
            child.get("hidden") is not None or child.get("aria-hidden") == "true"
        ):
            continue
        if include_alt and child.name == "img":
            parts.append(f" {child.get('alt', '')} ")
            continue
        _collect_text(child, parts, include_alt, skip_hidden)


def text_content(element: Tag) -> str:
    """Whitespace-normalized text, excluding engine-owned nodes."""
    parts: list[str] = []
    _collect_text(element, parts, include_alt=False, skip_hidden=False)
    return normalize_whitespace("".join(parts))


def visible_text(element: Tag) -> str:
    """Text a user perceives, including image alternatives."""
    parts: list[str] = []
    _collect_text(element, parts, include_alt=True, skip_hidden=True)
    return normalize_whitespace("".join(parts))


def accessible_name(element: Tag, document, include_title: bool = False) -> str:
    """Resolve the accessible label of an element.

    ``aria-label`` wins, then the text of ``aria-labelledby`` targets, then
    visible content (image ``alt`` included).
    """
    label = normalize_whitespace(element.get("aria-label") or "")
    if label:
        return label

    labelledby = element.get("aria-labelledby")
    if labelledby:
        texts = []
        for ref in labelledby.split():
            target = document.get_element_by_id(ref)
            if target is not None:
                texts.append(visible_text(target))
        label = normalize_whitespace(" ".join(texts))
        if label:
            return label

    label = visible_text(element)
    if label:
        return label

    if element.name in ("input", "img", "area"):
        label = normalize_whitespace(element.get("alt") or element.get("value") or "")
        if label:
            return label

    if include_title:
        return normalize_whitespace(element.get("title") or "")
    return ""


def landmark_context(element: Tag) -> str:
    """Describe the nearest enclosing landmark."""
    current = element.parent
    while is_element(current):
        role = current.get("role")
        landmark = role if role in _ARIA_LANDMARKS else LANDMARK_ROLES.get(current.name)
        if landmark:
            label = normalize_whitespace(current.get("aria-label") or "")
            return f'{landmark} landmark "{label}"' if label else f"{landmark} landmark"
        current = current.parent
    return DEFAULT_CONTEXT


def is_hidden(element: Tag, document) -> bool:
    """Whether the element is hidden from users and assistive technology."""
    if document.computed_style(element).get("visibility") in ("hidden", "collapse"):
        return True
    current = element
    while is_element(current):
        if current.get("hidden") is not None or current.get("aria-hidden") == "true":
            return True
        if document.computed_style(current).get("display") == "none":
            return True
        current = current.parent
    return False


def markup_snippet(element: Tag, max_length: int = 200) -> str:
    """Serialize an element without engine annotations, truncated."""
    clean = copy.copy(element)
    for owned in clean.find_all(attrs={OWNER_ATTRIBUTE: True}):
        owned.decompose()
    for node in [clean, *clean.find_all(True)]:
        for name in [n for n in node.attrs if n.startswith(ANNOTATION_ATTRIBUTE_PREFIX)]:
            del node.attrs[name]
    markup = normalize_whitespace(str(clean))
    if len(markup) > max_length:
        return markup[: max_length - 3] + "..."
    return markup


def get_int_attribute(element: Tag, name: str) -> int | None:
    value = element.get(name)
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
