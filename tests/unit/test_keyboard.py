"""Unit tests for the keyboard accessibility checker."""

import pytest

from a11y_engine.checkers.keyboard import (
    KeyboardAccessibilityChecker,
    inline_handlers,
    is_inert,
)
from a11y_engine.models import Severity


def codes_for(make_document, markup):
    checker = KeyboardAccessibilityChecker(make_document(markup))
    elements = checker.get_elements()
    return [outcome.code for outcome in checker.validate_all(elements)]


class TestHelpers:
    """Tests for handler and inert helpers."""

    def test_inline_handlers(self, make_document):
        """Test inline event handlers are listed by event name."""
        doc = make_document('<div onClick="a()" onmouseover="b()" title="x"></div>')
        assert inline_handlers(doc.query_one("div")) == {"click", "mouseover"}

    def test_is_inert(self, make_document):
        """Test inert is inherited."""
        doc = make_document("<div inert><button>x</button></div><button>y</button>")
        inside, outside = doc.query("button")

        assert is_inert(inside) is True
        assert is_inert(outside) is False


class TestKeyboardAccessibility:
    """Tests for keyboard reachability validation."""

    @pytest.mark.parametrize(
        "markup",
        [
            "<button>OK</button>",
            '<a href="/x">Link</a>',
            '<input type="text" aria-label="Name">',
            '<div role="button" tabindex="0" onclick="go()">Open</div>',
            '<div role="button" tabindex="0" title="Close"></div>',
            '<div tabindex="-1">Skip target</div>',
            '<button disabled tabindex="-1">Off</button>',
            '<div inert><button tabindex="-1">Off</button></div>',
            '<span role="button" tabindex="0" onmouseover="x()" onfocus="x()">Hover</span>',
        ],
    )
    def test_passing(self, make_document, markup):
        """Test keyboard-operable markup passes."""
        assert codes_for(make_document, markup) == [None]

    @pytest.mark.parametrize(
        "markup,code",
        [
            ('<button tabindex="-1">X</button>', "negative-tabindex"),
            ('<a href="/x" tabindex="3">X</a>', "positive-tabindex"),
            ('<div onclick="go()">Open</div>', "not-focusable"),
            ('<div role="tab">Tab</div>', "not-focusable"),
            ('<div onclick="go()" tabindex="0">Open</div>', "missing-role"),
            ('<div role="button" tabindex="0"></div>', "missing-label"),
            ('<span role="button" tabindex="0" onmouseover="x()">Hover</span>', "mouse-only"),
        ],
    )
    def test_failing(self, make_document, markup, code):
        """Test each failure mode gets its code."""
        assert codes_for(make_document, markup) == [code]

    def test_severities(self, make_document):
        """Test positive tabindex is Medium and the rest High."""
        doc = make_document(
            '<a href="/x" tabindex="2">A</a><div onclick="go()">B</div>'
        )
        issues = KeyboardAccessibilityChecker(doc).collect_issues()

        assert [i.severity for i in issues] == [Severity.MEDIUM, Severity.HIGH]
        assert all(i.rule_id == "2.1.1" for i in issues)

    def test_record_details(self, make_document):
        """Test evidence and attribute for a missing role."""
        doc = make_document('<div onclick="go()" tabindex="0">Open</div>')
        [issue] = KeyboardAccessibilityChecker(doc).collect_issues()

        assert issue.evidence.found_value == "no role"
        assert issue.location.attribute == "role"
        assert issue.message == "Custom control <div> has no valid interactive role"
        assert 'role="button"' in issue.fix_suggestion.code_example

    def test_badge_label(self, make_document):
        """Test badges show a readable failure code."""
        doc = make_document('<button tabindex="-1">X</button>')
        KeyboardAccessibilityChecker(doc).apply()

        assert doc.query_one("[data-a11y-owner]").get_text() == "Negative tabindex"
