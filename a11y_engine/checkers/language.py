"""Language attribute checker (WCAG 3.1.1 and 3.1.2)."""

import re

from bs4 import Tag

from ..models import FixSuggestion, IssueImpact, Severity, ValidationOutcome
from .base import BaseChecker

# Well-formed BCP 47 language tag (RFC 5646 section 2.1)
_LANGTAG = (
    r"(?:[a-z]{2,3}(?:-[a-z]{3}){0,3}|[a-z]{4}|[a-z]{5,8})"  # language, extlang
    r"(?:-[a-z]{4})?"  # script
    r"(?:-(?:[a-z]{2}|[0-9]{3}))?"  # region
    r"(?:-(?:[a-z0-9]{5,8}|[0-9][a-z0-9]{3}))*"  # variants
    r"(?:-[0-9a-wy-z](?:-[a-z0-9]{2,8})+)*"  # extensions
    r"(?:-x(?:-[a-z0-9]{1,8})+)?"  # private use
)
BCP47_PATTERN = re.compile(
    rf"^(?:{_LANGTAG}|x(?:-[a-z0-9]{{1,8}})+)$", re.IGNORECASE
)

GRANDFATHERED_TAGS = frozenset(
    {
        "en-gb-oed", "i-ami", "i-bnn", "i-default", "i-enochian", "i-hak",
        "i-klingon", "i-lux", "i-mingo", "i-navajo", "i-pwn", "i-tao",
        "i-tay", "i-tsu", "sgn-be-fr", "sgn-be-nl", "sgn-ch-de",
        "art-lojban", "cel-gaulish", "no-bok", "no-nyn", "zh-guoyu",
        "zh-hakka", "zh-min", "zh-min-nan", "zh-xiang",
    }
)

LANGUAGE_RESOURCES = {
    "html-has-lang": "https://dequeuniversity.com/rules/axe/4.6/html-has-lang",
    "html-valid-lang": "https://dequeuniversity.com/rules/axe/4.6/html-valid-lang",
    "valid-lang": "https://dequeuniversity.com/rules/axe/4.6/valid-lang",
    "xml-lang-mismatch": "https://dequeuniversity.com/rules/axe/4.6/xml-lang-mismatch",
}


def is_valid_language_tag(tag: str) -> bool:
    """Whether ``tag`` is a well-formed BCP 47 language tag."""
    value = tag.strip()
    if not value:
        return False
    return value.lower() in GRANDFATHERED_TAGS or bool(BCP47_PATTERN.match(value))


class LanguageChecker(BaseChecker):
    """Checks the page language and every language-of-parts override."""

    @property
    def checker_id(self) -> str:
        return "language"

    @property
    def name(self) -> str:
        return "Language Attributes"

    @property
    def rule_id(self) -> str:
        return "3.1.1"

    @property
    def default_category(self) -> str:
        return "content"

    @property
    def step_id(self) -> str:
        return "language_attribute_check"

    def get_selector(self) -> str:
        return r"html, [lang], [xml\:lang]"

    def validate_element(
        self, element: Tag, elements: list[Tag] | None = None
    ) -> ValidationOutcome:
        lang = (element.get("lang") or "").strip()
        xml_lang = (element.get("xml:lang") or "").strip()

        if element.name == "html":
            if not lang:
                return ValidationOutcome(
                    is_valid=False,
                    message="HTML element missing lang attribute",
                    severity=Severity.CRITICAL,
                    expected="lang attribute with a BCP 47 tag",
                    found="no lang attribute",
                    label="Missing lang",
                    code="html-has-lang",
                )
            if not is_valid_language_tag(lang):
                return ValidationOutcome(
                    is_valid=False,
                    message=f"Invalid language code: {lang}",
                    severity=Severity.HIGH,
                    expected="well-formed BCP 47 tag",
                    found=lang,
                    label=f"Invalid: {lang}",
                    code="html-valid-lang",
                )
        else:
            declared = lang or xml_lang
            if declared and not is_valid_language_tag(declared):
                return ValidationOutcome(
                    is_valid=False,
                    message=f"Invalid language code: {declared}",
                    severity=Severity.HIGH,
                    expected="well-formed BCP 47 tag",
                    found=declared,
                    label=f"Invalid: {declared}",
                    code="valid-lang",
                )

        if lang and xml_lang and lang.lower() != xml_lang.lower():
            return ValidationOutcome(
                is_valid=False,
                message=f"Language attributes don't match: {lang} vs {xml_lang}",
                severity=Severity.MEDIUM,
                expected=f'xml:lang="{lang}"',
                found=f'xml:lang="{xml_lang}"',
                label=f"Mismatch: {lang} ≠ {xml_lang}",
                code="xml-lang-mismatch",
            )

        return ValidationOutcome.valid(label=lang or xml_lang or None)

    def get_rule_id(self, outcome: ValidationOutcome) -> str:
        if outcome.code in ("html-has-lang", "html-valid-lang"):
            return "3.1.1"
        return "3.1.2"

    def get_attribute(self, outcome: ValidationOutcome) -> str | None:
        return "xml:lang" if outcome.code == "xml-lang-mismatch" else "lang"

    def get_impact(self, outcome: ValidationOutcome) -> IssueImpact:
        return IssueImpact(
            user_groups=["Screen reader users", "Users of translation tools"],
            assistive_tech=["Screen readers", "Braille displays", "Text-to-speech"],
            functionality=["Pronunciation", "Language switching"],
        )

    def get_fix_suggestion(
        self, element: Tag, outcome: ValidationOutcome
    ) -> FixSuggestion:
        if outcome.code == "html-has-lang":
            description = "Add a lang attribute to the <html> element"
            example = '<html lang="en">'
        elif outcome.code == "xml-lang-mismatch":
            description = "Make lang and xml:lang carry the same language tag"
            example = f'<{element.name} lang="{element.get("lang")}" xml:lang="{element.get("lang")}">'
        else:
            description = f"{outcome.message}; use a BCP 47 tag such as 'en' or 'fr-CA'"
            example = f'<{element.name} lang="en">'
        resources = [LANGUAGE_RESOURCES[outcome.code]] if outcome.code in LANGUAGE_RESOURCES else []
        resources.append("https://www.w3.org/International/questions/qa-html-language-declarations")
        return FixSuggestion(
            description=description,
            code_example=example,
            related_resources=resources,
        )
