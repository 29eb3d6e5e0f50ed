"""
Shared fixtures for the a11y-engine test suite.

Provides test fixtures for:
- Live documents built from markup
- Engine configuration
- A realistic sample page on disk
- Logger state isolation between tests
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from a11y_engine.config import EngineConfig, ReportingConfig
from a11y_engine.dom import LiveDocument
from a11y_engine.engine_logging import ROOT_LOGGER_NAME

SAMPLE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><title>Sample</title></head>
<body>
<header>
  <nav aria-label="Primary">
    <a href="/">Home</a>
    <a href="/about">About us</a>
  </nav>
</header>
<main>
  <h1>Welcome</h1>
  <h3>Skipped a level</h3>
  <p lang="fr">Bonjour</p>
  <a href="/about/">About</a>
  <button>Save</button>
  <div onclick="openMenu()">Menu</div>
</main>
</body>
</html>
"""


@pytest.fixture
def make_document() -> Callable[..., LiveDocument]:
    """Factory building a LiveDocument from markup."""

    def _make(markup: str, **kwargs) -> LiveDocument:
        kwargs.setdefault("url", "https://example.com/page/")
        return LiveDocument.from_html(markup, **kwargs)

    return _make


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine configuration with a fixed page URL."""
    return EngineConfig(reporting=ReportingConfig(page_url="https://example.com/page/"))


@pytest.fixture
def sample_page() -> str:
    """Markup of a page with several known problems."""
    return SAMPLE_PAGE


@pytest.fixture
def sample_page_file(tmp_path: Path) -> Path:
    """The sample page written to a temporary file."""
    path = tmp_path / "page.html"
    path.write_text(SAMPLE_PAGE, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolate_engine_logger() -> Iterator[None]:
    """Restore the engine logger after tests that call setup_logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
