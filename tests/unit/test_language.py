"""Unit tests for the language attribute checker."""

import pytest

from a11y_engine.checkers.language import LanguageChecker, is_valid_language_tag
from a11y_engine.models import Severity


class TestLanguageTags:
    """Tests for BCP 47 well-formedness."""

    @pytest.mark.parametrize(
        "tag",
        ["en", "EN", "en-US", "fr-CA", "zh-Hant-TW", "sr-Latn", "es-419", "de-CH-1996", "x-private", "i-klingon"],
    )
    def test_valid(self, tag):
        """Test well-formed tags are accepted."""
        assert is_valid_language_tag(tag) is True

    @pytest.mark.parametrize("tag", ["", "  ", "en_US", "123", "toolonglanguagetag", "e", "en-"])
    def test_invalid(self, tag):
        """Test malformed tags are rejected."""
        assert is_valid_language_tag(tag) is False


class TestLanguageChecker:
    """Tests for language attribute validation."""

    def test_missing_page_language(self, make_document):
        """Test a page without lang gets a Critical issue."""
        doc = make_document("<html><body><p>x</p></body></html>")
        issues = LanguageChecker(doc).collect_issues()

        assert len(issues) == 1
        assert issues[0].severity is Severity.CRITICAL
        assert issues[0].rule_id == "3.1.1"
        assert issues[0].location.xpath == "/html[1]"
        assert issues[0].location.attribute == "lang"

    def test_invalid_page_language(self, make_document):
        """Test a malformed page language is a High issue."""
        doc = make_document('<html lang="en_US"><body></body></html>')
        issues = LanguageChecker(doc).collect_issues()

        assert len(issues) == 1
        assert issues[0].severity is Severity.HIGH
        assert issues[0].evidence.found_value == "en_US"

    def test_language_of_parts(self, make_document):
        """Test malformed overrides are flagged under 3.1.2."""
        doc = make_document(
            '<html lang="en"><body><p lang="fr-CA">Bonjour</p><p lang="123">?</p></body></html>'
        )
        issues = LanguageChecker(doc).collect_issues()

        assert len(issues) == 1
        assert issues[0].severity is Severity.HIGH
        assert issues[0].rule_id == "3.1.2"
        assert issues[0].location.xpath == "/html[1]/body[1]/p[2]"

    def test_mismatched_xml_lang(self, make_document):
        """Test lang and xml:lang must agree."""
        doc = make_document('<html lang="en" xml:lang="fr"><body></body></html>')
        issues = LanguageChecker(doc).collect_issues()

        assert len(issues) == 1
        assert issues[0].severity is Severity.MEDIUM
        assert issues[0].message == "Make lang and xml:lang carry the same language tag"
        assert issues[0].location.attribute == "xml:lang"

    def test_matching_xml_lang_case_insensitive(self, make_document):
        """Test case differences between lang and xml:lang are fine."""
        doc = make_document(
            '<html lang="en"><body><p lang="de" xml:lang="DE">Hallo</p></body></html>'
        )
        assert LanguageChecker(doc).collect_issues() == []

    def test_root_annotated_without_badge(self, make_document):
        """Test the top element is annotated but gets no badge."""
        doc = make_document('<html lang="en"><body><p lang="fr">x</p></body></html>')
        checker = LanguageChecker(doc)

        checker.apply()

        assert doc.root["data-a11y-state"] == "valid"
        assert [b.get_text() for b in doc.query("[data-a11y-owner]")] == ["fr"]

    def test_restore_root(self, make_document):
        """Test cleanup restores the top element exactly."""
        markup = '<html lang="en"><body><p lang="es">Hola</p></body></html>'
        doc = make_document(markup)
        checker = LanguageChecker(doc)

        checker.apply()
        checker.cleanup()

        assert doc.serialize() == markup
