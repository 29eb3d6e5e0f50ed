"""Client-side accessibility auditing engine.

Rule checkers inspect a live document, annotate compliant and
non-compliant elements in place, and emit structured diagnostic records.
"""

__version__ = "0.1.0"

from .checkers import (
    BaseChecker,
    CheckerRegistry,
    CursorAffordanceChecker,
    HeadingOrderChecker,
    KeyboardAccessibilityChecker,
    LanguageChecker,
    LinkLabelChecker,
    create_default_registry,
)
from .config import EngineConfig, load_engine_config
from .dom import LiveDocument
from .errors import A11yEngineError, ConfigurationError, SelectorError
from .models import AccessibilityIssue, RunMode, Severity, ToolResult, ValidationOutcome

__all__ = [
    "A11yEngineError",
    "AccessibilityIssue",
    "BaseChecker",
    "CheckerRegistry",
    "ConfigurationError",
    "CursorAffordanceChecker",
    "EngineConfig",
    "HeadingOrderChecker",
    "KeyboardAccessibilityChecker",
    "LanguageChecker",
    "LinkLabelChecker",
    "LiveDocument",
    "RunMode",
    "SelectorError",
    "Severity",
    "ToolResult",
    "ValidationOutcome",
    "create_default_registry",
    "load_engine_config",
]
