"""Browser rendering for live documents.

Loads a page in headless Chromium, captures the rendered DOM together with
a subset of computed styles per element, and returns a ``LiveDocument``
whose style resolution uses those captured values.
"""

import asyncio

try:
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import async_playwright

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False
    PlaywrightError = None
    async_playwright = None

from ..engine_logging import LogCategory, get_category_logger
from ..errors import RenderError
from .document import LiveDocument

logger = get_category_logger(LogCategory.DOM)

STYLE_INDEX_ATTRIBUTE = "data-a11y-style-index"

CAPTURED_PROPERTIES = ["display", "visibility", "cursor", "color", "background-color"]

# Tags every element with its index, captures computed styles, and returns
# the serialized DOM. The index attribute is removed again in Python.
_CAPTURE_SCRIPT = """([attr, props]) => {
    const styles = [];
    document.querySelectorAll('*').forEach((el, i) => {
        el.setAttribute(attr, String(i));
        const computed = window.getComputedStyle(el);
        const entry = {};
        for (const prop of props) {
            entry[prop] = computed.getPropertyValue(prop);
        }
        styles.push(entry);
    });
    const doctype = document.doctype ? '<!DOCTYPE ' + document.doctype.name + '>' : '';
    const markup = doctype + document.documentElement.outerHTML;
    document.querySelectorAll('[' + attr + ']').forEach(el => el.removeAttribute(attr));
    return {markup, styles};
}"""


async def _render(url: str, color_scheme: str, timeout_ms: int) -> tuple[str, list[dict]]:
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True)
        try:
            context = await browser.new_context(color_scheme=color_scheme)
            page = await context.new_page()
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
            captured = await page.evaluate(
                _CAPTURE_SCRIPT, [STYLE_INDEX_ATTRIBUTE, CAPTURED_PROPERTIES]
            )
        finally:
            await browser.close()
    return captured["markup"], captured["styles"]


def render_document(
    url: str,
    color_scheme: str = "light",
    timeout_ms: int = 30000,
) -> LiveDocument:
    """Render ``url`` in Chromium and build a live document from the result.

    Raises:
        ImportError: If Playwright is not installed.
        RenderError: If the page cannot be loaded.
    """
    if not PLAYWRIGHT_AVAILABLE:
        raise ImportError(
            "Playwright is required for rendering. "
            "Install with: pip install playwright && playwright install chromium"
        )

    logger.info(f"Rendering {url} ({color_scheme} scheme)")
    try:
        markup, styles = asyncio.run(_render(url, color_scheme, timeout_ms))
    except PlaywrightError as e:
        raise RenderError(f"Failed to render {url}: {e}") from e

    document = LiveDocument.from_html(markup, url=url, color_scheme=color_scheme)
    seeded = 0
    for element in list(document.iter_elements()):
        index = element.attrs.pop(STYLE_INDEX_ATTRIBUTE, None)
        if index is None:
            continue
        try:
            document.set_base_styles(element, styles[int(index)])
            seeded += 1
        except (ValueError, IndexError):
            logger.debug(f"Ignoring style index {index!r} on <{element.name}>")
    logger.debug(f"Seeded computed styles for {seeded} elements")
    return document
