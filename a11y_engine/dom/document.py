"""Live, observable document tree backed by BeautifulSoup.

``LiveDocument`` is the host the checkers run against: it answers selector
queries, resolves computed styles, records every mutation made through its
primitives for registered observers, and tracks the active color scheme.
"""

import re
from collections.abc import Callable, Iterator

import soupsieve
from bs4 import BeautifulSoup, Tag

from ..engine_logging import LogCategory, get_category_logger
from ..errors import SelectorError
from .element_map import ElementMap
from .mutations import ATTRIBUTES, CHILD_LIST, MutationCallback, MutationObserver, MutationRecord

logger = get_category_logger(LogCategory.DOM)

COLOR_SCHEMES = ("light", "dark")

# Properties inherited from the parent when the element declares none
INHERITED_PROPERTIES = ("cursor", "visibility", "color")

_BLOCK_ELEMENTS = frozenset(
    {
        "html", "body", "div", "p", "h1", "h2", "h3", "h4", "h5", "h6",
        "ul", "ol", "dl", "dd", "dt", "section", "article", "nav", "header",
        "footer", "main", "aside", "form", "fieldset", "figure", "figcaption",
        "blockquote", "pre", "address", "hr", "details", "summary", "dialog",
    }
)
_NON_RENDERED_ELEMENTS = frozenset(
    {"head", "script", "style", "template", "title", "meta", "link", "noscript", "base"}
)
_UA_DISPLAY = {"li": "list-item", "table": "table", "tr": "table-row", "td": "table-cell",
               "th": "table-cell", "button": "inline-block", "input": "inline-block",
               "select": "inline-block", "textarea": "inline-block"}


def parse_inline_style(style: str | None) -> dict[str, str]:
    """Parse a ``style`` attribute into an ordered property map."""
    declarations: dict[str, str] = {}
    if not style:
        return declarations
    for chunk in style.split(";"):
        prop, sep, value = chunk.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        value = re.sub(r"\s*!important\s*$", "", value.strip(), flags=re.IGNORECASE)
        if prop and value:
            declarations[prop] = value
    return declarations


def format_inline_style(declarations: dict[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in declarations.items())


class LiveDocument:
    """An in-process document with DOM-like query, style and mutation APIs."""

    def __init__(
        self,
        soup: BeautifulSoup,
        url: str | None = None,
        color_scheme: str = "light",
        base_styles: ElementMap[dict[str, str]] | None = None,
    ):
        if color_scheme not in COLOR_SCHEMES:
            raise ValueError(f"Unknown color scheme: {color_scheme}")
        self.soup = soup
        self.url = url or ""
        self._color_scheme = color_scheme
        self._base_styles: ElementMap[dict[str, str]] = base_styles or ElementMap()
        self._observers: list[MutationObserver] = []
        self._scheme_callbacks: list[Callable[[str], None]] = []
        self._ensure_root()

    @classmethod
    def from_html(
        cls,
        markup: str,
        url: str | None = None,
        color_scheme: str = "light",
    ) -> "LiveDocument":
        """Parse markup into a live document.

        Fragments without an ``<html>`` element are placed inside a
        generated ``<html><body>`` so every document has a top element.
        """
        soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
        return cls(soup, url=url, color_scheme=color_scheme)

    def _ensure_root(self) -> None:
        if self.soup.find("html") is not None:
            return
        html = self.soup.new_tag("html")
        body = self.soup.new_tag("body")
        for child in list(self.soup.contents):
            body.append(child.extract())
        html.append(body)
        self.soup.append(html)

    # Tree access

    @property
    def root(self) -> Tag:
        """The top ``<html>`` element."""
        return self.soup.find("html")

    @property
    def body(self) -> Tag | None:
        return self.root.find("body")

    def iter_elements(self) -> Iterator[Tag]:
        """Yield every element in document order, starting at the root."""
        root = self.root
        yield root
        yield from root.find_all(True)

    def query(self, selector: str) -> list[Tag]:
        """Return elements matching a CSS selector in document order.

        Raises:
            SelectorError: If the selector cannot be parsed.
        """
        try:
            return self.soup.select(selector)
        except soupsieve.SelectorSyntaxError as e:
            raise SelectorError(selector, str(e).splitlines()[0]) from e

    def query_one(self, selector: str) -> Tag | None:
        found = self.query(selector)
        return found[0] if found else None

    def matches(self, element: Tag, selector: str) -> bool:
        """Whether ``element`` itself matches ``selector``."""
        try:
            return soupsieve.match(selector, element)
        except soupsieve.SelectorSyntaxError as e:
            raise SelectorError(selector, str(e).splitlines()[0]) from e

    def get_element_by_id(self, element_id: str) -> Tag | None:
        return self.root.find(id=element_id)

    def serialize(self) -> str:
        return str(self.soup)

    # Styles

    def set_base_styles(self, element: Tag, styles: dict[str, str]) -> None:
        """Record browser-computed styles for an element."""
        self._base_styles.set(element, dict(styles))

    def computed_style(self, element: Tag) -> dict[str, str]:
        """Resolve the effective style of an element.

        User-agent defaults and inherited values come first, then styles
        captured from a browser render, then inline declarations.
        """
        base = self._base_styles.get(element)
        if base is not None:
            styles = dict(base)
        else:
            styles = {"display": self._ua_display(element), "visibility": "visible", "cursor": "auto"}
            parent = element.parent
            if isinstance(parent, Tag) and not isinstance(parent, BeautifulSoup):
                parent_styles = self.computed_style(parent)
                for prop in INHERITED_PROPERTIES:
                    if prop in parent_styles:
                        styles[prop] = parent_styles[prop]
            if element.name in ("a", "area") and element.get("href") is not None:
                styles["cursor"] = "pointer"
        styles.update(parse_inline_style(element.get("style")))
        return styles

    @staticmethod
    def _ua_display(element: Tag) -> str:
        if element.get("hidden") is not None or element.name in _NON_RENDERED_ELEMENTS:
            return "none"
        if element.name in _BLOCK_ELEMENTS:
            return "block"
        return _UA_DISPLAY.get(element.name, "inline")

    # Mutation primitives

    def create_element(
        self,
        name: str,
        attrs: dict[str, str] | None = None,
        text: str | None = None,
    ) -> Tag:
        """Create a detached element; no mutation is recorded until inserted."""
        element = self.soup.new_tag(name, attrs=dict(attrs or {}))
        if text:
            element.string = text
        return element

    def append_child(self, parent: Tag, child: Tag) -> Tag:
        if child.parent is not None:
            self.remove(child)
        parent.append(child)
        self._emit(MutationRecord(CHILD_LIST, parent, added_nodes=[child]))
        return child

    def insert_before(self, reference: Tag, new: Tag) -> Tag:
        if new.parent is not None:
            self.remove(new)
        reference.insert_before(new)
        self._emit(MutationRecord(CHILD_LIST, reference.parent, added_nodes=[new]))
        return new

    def insert_after(self, reference: Tag, new: Tag) -> Tag:
        if new.parent is not None:
            self.remove(new)
        reference.insert_after(new)
        self._emit(MutationRecord(CHILD_LIST, reference.parent, added_nodes=[new]))
        return new

    def remove(self, element: Tag) -> Tag:
        parent = element.parent
        if parent is None:
            return element
        # Record first so subtree observers can still see the ancestry
        record = MutationRecord(CHILD_LIST, parent, removed_nodes=[element])
        self._emit(record)
        element.extract()
        return element

    def wrap(self, element: Tag, wrapper: Tag) -> Tag:
        """Replace ``element`` with ``wrapper`` and move it inside."""
        parent = element.parent
        if parent is None:
            raise ValueError("Cannot wrap a detached element")
        element.wrap(wrapper)
        self._emit(MutationRecord(CHILD_LIST, parent, added_nodes=[wrapper], removed_nodes=[element]))
        self._emit(MutationRecord(CHILD_LIST, wrapper, added_nodes=[element]))
        return wrapper

    def unwrap(self, wrapper: Tag) -> list[Tag]:
        """Replace ``wrapper`` with its children."""
        parent = wrapper.parent
        if parent is None:
            raise ValueError("Cannot unwrap a detached element")
        children = [c for c in wrapper.contents if isinstance(c, Tag)]
        self._emit(MutationRecord(CHILD_LIST, parent, added_nodes=children, removed_nodes=[wrapper]))
        wrapper.unwrap()
        return children

    def set_attribute(self, element: Tag, name: str, value: str) -> None:
        old = element.get(name)
        element[name] = value
        self._emit(MutationRecord(ATTRIBUTES, element, attribute_name=name, old_value=old))

    def remove_attribute(self, element: Tag, name: str) -> None:
        if name not in element.attrs:
            return
        old = element.attrs.pop(name)
        self._emit(MutationRecord(ATTRIBUTES, element, attribute_name=name, old_value=old))

    def set_style(self, element: Tag, prop: str, value: str | None) -> None:
        """Set or remove (``value=None``) one inline style property."""
        declarations = parse_inline_style(element.get("style"))
        if value is None:
            declarations.pop(prop, None)
        else:
            declarations[prop] = value
        if declarations:
            self.set_attribute(element, "style", format_inline_style(declarations))
        else:
            self.remove_attribute(element, "style")

    # Observation

    def observe(self, callback: MutationCallback) -> MutationObserver:
        """Create an observer; call ``observe()`` on it to start receiving records."""
        return MutationObserver(self, callback)

    def _register_observer(self, observer: MutationObserver) -> None:
        if not any(o is observer for o in self._observers):
            self._observers.append(observer)

    def _unregister_observer(self, observer: MutationObserver) -> None:
        self._observers = [o for o in self._observers if o is not observer]

    def _emit(self, record: MutationRecord) -> None:
        for observer in list(self._observers):
            observer._enqueue(record)

    @property
    def has_pending_records(self) -> bool:
        return any(o.pending for o in self._observers)

    def flush(self) -> int:
        """Deliver queued records, one batch per observer.

        Returns:
            Number of observers that received a batch.
        """
        delivered = 0
        for observer in list(self._observers):
            if observer._deliver():
                delivered += 1
        return delivered

    def settle(self, max_rounds: int = 10) -> bool:
        """Flush repeatedly until no records remain.

        Returns:
            True if the document became quiescent within ``max_rounds``.
        """
        for _ in range(max_rounds):
            if not self.has_pending_records:
                return True
            self.flush()
        if self.has_pending_records:
            logger.warning(
                f"Document did not settle after {max_rounds} rounds; "
                "checkers may be revalidating each other"
            )
            return False
        return True

    # Color scheme

    @property
    def color_scheme(self) -> str:
        return self._color_scheme

    def set_color_scheme(self, scheme: str) -> None:
        """Switch the color scheme, notifying subscribers on change."""
        if scheme not in COLOR_SCHEMES:
            raise ValueError(f"Unknown color scheme: {scheme}")
        if scheme == self._color_scheme:
            return
        self._color_scheme = scheme
        logger.debug(f"Color scheme changed to {scheme}")
        for callback in list(self._scheme_callbacks):
            callback(scheme)

    def on_color_scheme_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Subscribe to color-scheme changes; returns an unsubscribe function."""
        self._scheme_callbacks.append(callback)

        def unsubscribe() -> None:
            self._scheme_callbacks = [c for c in self._scheme_callbacks if c is not callback]

        return unsubscribe
