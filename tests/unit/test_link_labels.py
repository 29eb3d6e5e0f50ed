"""Unit tests for the consistent link label checker."""

import pytest

from a11y_engine.checkers.link_labels import (
    LinkLabelChecker,
    is_skipped_href,
    normalize_link_url,
)
from a11y_engine.models import Severity


class TestUrlHelpers:
    """Tests for URL normalization and skipping."""

    @pytest.mark.parametrize(
        "href,expected",
        [
            ("/about", "/about"),
            ("/about/", "/about"),
            ("/About#team", "/about"),
            ("  https://Example.com/Docs/  ", "https://example.com/docs"),
        ],
    )
    def test_normalize(self, href, expected):
        """Test fragments, trailing slashes and case are normalized."""
        assert normalize_link_url(href) == expected

    @pytest.mark.parametrize(
        "href,skipped",
        [("", True), ("#top", True), ("javascript:void(0)", True), ("/x", False)],
    )
    def test_skipped(self, href, skipped):
        """Test in-page and script links are not compared."""
        assert is_skipped_href(href) is skipped


class TestLinkLabels:
    """Tests for label consistency validation."""

    def test_inconsistent_labels(self, make_document):
        """Test every link in an inconsistent group is flagged."""
        doc = make_document(
            '<a href="/about">About us</a>'
            '<a href="/about/">About</a>'
            '<a href="/contact">Contact</a>'
            '<a href="/contact#form">Contact</a>'
        )
        issues = LinkLabelChecker(doc).collect_issues()

        assert len(issues) == 2
        assert {i.evidence.found_value for i in issues} == {"About us", "About"}
        assert all(i.severity is Severity.MEDIUM for i in issues)
        assert all(i.rule_id == "3.2.4" for i in issues)
        assert issues[0].message.startswith("Inconsistent labels for /about")
        assert issues[0].location.attribute == "href"
        assert issues[0].confidence == 0.9
        assert '"About"' in issues[0].evidence.expected_value

    def test_consistent_labels(self, make_document):
        """Test identical labels pass."""
        doc = make_document('<a href="/a">Docs</a><a href="/a/">Docs</a>')
        assert LinkLabelChecker(doc).collect_issues() == []

    def test_label_sources(self, make_document):
        """Test aria-label, labelledby and image alt all resolve to one label."""
        doc = make_document(
            '<span id="docs-label">Docs</span>'
            '<a href="/docs" aria-label="Docs">Read</a>'
            '<a href="/docs" aria-labelledby="docs-label">Click</a>'
            '<a href="/docs"><img src="d.png" alt="Docs"></a>'
            '<a href="/DOCS">Docs</a>'
        )
        assert LinkLabelChecker(doc).collect_issues() == []

    def test_skipped_links_pass(self, make_document):
        """Test in-page and script links are never flagged."""
        doc = make_document(
            '<a href="#top">Top</a><a href="#top">Back up</a>'
            '<a href="javascript:void(0)">Menu</a>'
        )
        checker = LinkLabelChecker(doc)

        assert checker.collect_issues() == []
        assert checker.apply().success is True

    def test_button_role_excluded(self, make_document):
        """Test links acting as buttons are not selected."""
        doc = make_document('<a href="/x" role="button">Open</a><a href="/x">Go</a>')
        assert len(LinkLabelChecker(doc).get_elements()) == 1

    def test_badge_shows_destination(self, make_document):
        """Test badges show label and destination."""
        doc = make_document('<a href="/a">Docs</a>')
        LinkLabelChecker(doc).apply()

        assert doc.query_one("[data-a11y-owner]").get_text() == "Docs → /a"

    def test_single_element_validation(self, make_document):
        """Test validate_element uses the whole page."""
        doc = make_document('<a href="/a">One</a><a href="/a">Two</a>')
        checker = LinkLabelChecker(doc)
        first = checker.get_elements()[0]

        assert checker.validate_element(first).is_valid is False
