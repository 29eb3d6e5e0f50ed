"""Unit tests for mutation- and color-scheme-driven revalidation."""

import pytest

from a11y_engine.checkers import HeadingOrderChecker, LanguageChecker, LinkLabelChecker
from a11y_engine.dom.document import parse_inline_style

PAGE = "<main><h1>Title</h1><h2>Section</h2><p>Body text</p></main>"


@pytest.fixture
def document(make_document):
    return make_document(PAGE)


@pytest.fixture
def checker(document):
    checker = HeadingOrderChecker(document)
    assert checker.apply().success is True
    return checker


def badge_texts(document):
    return [b.get_text() for b in document.query("[data-a11y-owner]")]


class TestRelevance:
    """Tests for which mutations trigger a revalidation."""

    def test_unrelated_insert_ignored(self, checker, document):
        """Test inserting non-matching content does not revalidate."""
        main = document.query_one("main")
        document.append_child(main, document.create_element("p", text="More"))

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 0

    def test_matching_insert(self, checker, document):
        """Test inserting a heading revalidates and reports it."""
        main = document.query_one("main")
        document.append_child(main, document.create_element("h4", text="Deep"))

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 1
        assert [i.location.element_type for i in checker.diagnostics] == ["h4"]
        assert badge_texts(document) == ["H1", "H2", "H4"]

    def test_nested_insert(self, checker, document):
        """Test headings inside an inserted subtree are noticed."""
        section = document.create_element("section")
        section.append(document.create_element("h3", text="Nested"))

        document.append_child(document.query_one("main"), section)
        document.flush()

        assert checker.revalidation_loop.revalidation_count == 1
        assert checker.diagnostics == []

    def test_removal_of_checked_element(self, checker, document):
        """Test removing an annotated element revalidates."""
        document.remove(document.query_one("h2"))

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 1
        assert badge_texts(document) == ["H1"]

    def test_root_attribute_change(self, checker, document):
        """Test attribute changes on the top element revalidate."""
        document.set_attribute(document.root, "lang", "fr")

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 1

    def test_annotation_attribute_on_root_ignored(self, checker, document):
        """Test engine attributes on the top element are ignored."""
        document.set_attribute(document.root, "data-a11y-state", "valid")

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 0

    def test_engine_owned_insert_ignored(self, checker, document):
        """Test nodes inserted by checkers are ignored."""
        badge = document.create_element("h2", {"data-a11y-owner": "other"}, text="H9")
        document.append_child(document.query_one("main"), badge)

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 0

    def test_one_revalidation_per_batch(self, checker, document):
        """Test a batch of records causes a single revalidation."""
        main = document.query_one("main")
        for level in (3, 4, 5):
            document.append_child(main, document.create_element(f"h{level}", text="x"))

        document.flush()

        assert checker.revalidation_loop.revalidation_count == 1
        assert document.settle() is True

    def test_own_mutations_do_not_retrigger(self, checker, document):
        """Test a revalidation does not queue work for itself."""
        document.append_child(document.query_one("main"), document.create_element("h3", text="x"))

        assert document.settle() is True
        assert checker.revalidation_loop.revalidation_count == 1
        assert document.has_pending_records is False


class TestColorScheme:
    """Tests for color-scheme revalidation."""

    def test_scheme_change_recolors(self, checker, document):
        """Test annotations switch to the new scheme's colors."""
        document.set_color_scheme("dark")

        assert checker.revalidation_loop.revalidation_count == 1
        h1 = document.query_one("h1")
        assert parse_inline_style(h1["style"])["outline"] == "2px solid #5fd97a"
        assert badge_texts(document) == ["H1", "H2"]

    def test_inactive_checker_ignores_scheme(self, checker, document):
        """Test a cleaned-up checker stays inactive."""
        checker.cleanup()

        document.set_color_scheme("dark")

        assert checker.revalidation_loop.revalidation_count == 0
        assert checker.is_active is False
        assert document.query("[data-a11y-state]") == []


class TestStability:
    """Tests for results across revalidations."""

    def test_stable_issue_ids(self, make_document):
        """Test issue ids do not change when nothing relevant changed."""
        document = make_document("<h2>A</h2><h4>B</h4>")
        checker = HeadingOrderChecker(document)
        checker.apply()
        before = [i.issue_id for i in checker.diagnostics]

        document.set_color_scheme("dark")

        assert [i.issue_id for i in checker.diagnostics] == before

    def test_several_active_checkers_settle(self, make_document):
        """Test checkers active together reach a quiescent document."""
        document = make_document(
            '<html lang="en"><body><h1>A</h1><a href="/x">Go</a></body></html>'
        )
        checkers = [
            LanguageChecker(document),
            HeadingOrderChecker(document),
            LinkLabelChecker(document),
        ]
        for checker in checkers:
            checker.apply()

        document.set_color_scheme("dark")
        document.append_child(document.body, document.create_element("h3", text="New"))

        assert document.settle() is True
        assert [c.revalidation_loop.revalidation_count for c in checkers] == [1, 2, 1]

    def test_cleanup_after_revalidation_restores(self, make_document):
        """Test cleanup still restores the document after revalidating."""
        document = make_document(PAGE)
        checker = HeadingOrderChecker(document)
        checker.apply()
        document.set_color_scheme("dark")

        checker.cleanup()

        assert document.serialize() == make_document(PAGE).serialize()


class TestHostChanges:
    """Tests for page changes made while a checker is active."""

    def test_root_class_survives_revalidation(self, make_document):
        """Test a theme class set on the top element is kept."""
        document = make_document('<html lang="en"><body><p>Hi</p></body></html>')
        checker = LanguageChecker(document)
        checker.apply()

        document.set_attribute(document.root, "class", "dark")
        document.flush()

        assert checker.revalidation_loop.revalidation_count == 1
        assert document.root.get("class") == "dark"

        checker.cleanup()

        assert document.root.get("class") == "dark"
        assert document.root.get("data-a11y-state") is None
        assert document.root.get("style") is None

    def test_element_class_survives_cleanup(self, checker, document):
        """Test an attribute added to an annotated element is kept."""
        h2 = document.query_one("h2")
        document.set_attribute(h2, "class", "highlight")

        checker.cleanup()

        assert h2.attrs == {"class": "highlight"}

    def test_host_style_survives_cleanup(self, checker, document):
        """Test inline declarations added by the page are kept."""
        h1 = document.query_one("h1")
        document.set_style(h1, "color", "navy")

        checker.cleanup()

        assert h1["style"] == "color: navy"
