"""Accessibility checkers and the lifecycle framework they share."""

from .base import BaseChecker, IssueSink
from .cursor import CursorAffordanceChecker
from .headings import HeadingOrderChecker, heading_level
from .keyboard import KeyboardAccessibilityChecker
from .language import LanguageChecker, is_valid_language_tag
from .link_labels import LinkLabelChecker, normalize_link_url
from .registry import CHECKER_CLASSES, CheckerRegistry, create_default_registry
from .revalidation import RevalidationLoop
from .snapshots import ElementSnapshot, SnapshotStore

__all__ = [
    "BaseChecker",
    "CHECKER_CLASSES",
    "CheckerRegistry",
    "CursorAffordanceChecker",
    "ElementSnapshot",
    "HeadingOrderChecker",
    "IssueSink",
    "KeyboardAccessibilityChecker",
    "LanguageChecker",
    "LinkLabelChecker",
    "RevalidationLoop",
    "SnapshotStore",
    "create_default_registry",
    "heading_level",
    "is_valid_language_tag",
    "normalize_link_url",
]
