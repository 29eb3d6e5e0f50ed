"""Unit tests for annotation snapshots."""

from a11y_engine.checkers.snapshots import ElementSnapshot, SnapshotStore
from a11y_engine.dom.document import parse_inline_style


class TestElementSnapshot:
    """Tests for ElementSnapshot.capture."""

    def test_capture_style_parts(self, make_document):
        """Test outline and background are captured from the inline style."""
        doc = make_document(
            '<p style="outline: 1px dotted blue; background-color: white">x</p>'
        )
        snapshot = ElementSnapshot.capture(doc.query_one("p"))

        assert snapshot.original_outline == "1px dotted blue"
        assert snapshot.original_background == "white"
        assert snapshot.original_style.startswith("outline")

    def test_capture_without_style(self, make_document):
        """Test absent styles are recorded as None."""
        doc = make_document('<p id="a">x</p>')
        snapshot = ElementSnapshot.capture(doc.query_one("p"))

        assert snapshot.original_outline is None
        assert snapshot.original_style is None
        assert snapshot.original_state is None
        assert snapshot.original_label is None


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_first_touch_only(self, make_document):
        """Test an element is snapshotted once."""
        doc = make_document("<p>x</p>")
        p = doc.query_one("p")
        store = SnapshotStore()

        assert store.record(p) is True
        doc.set_style(p, "outline", "2px solid red")
        assert store.record(p) is False
        assert store.get(p).original_style is None

    def test_restore_all(self, make_document):
        """Test restore removes what annotation wrote, in the original text."""
        markup = '<p id="a" style="color:red" title="t">x</p>'
        doc = make_document(markup)
        p = doc.query_one("p")
        before = doc.serialize()
        store = SnapshotStore()

        store.record(p)
        doc.set_style(p, "outline", "2px solid red")
        doc.set_style(p, "background-color", "#fee")
        doc.set_attribute(p, "data-a11y-state", "error")
        doc.set_attribute(p, "data-a11y-label", "Broken")

        assert store.restore_all(doc) == 1
        assert doc.serialize() == before
        assert len(store) == 0
        assert p not in store

    def test_restore_keeps_host_attribute_changes(self, make_document):
        """Test attributes the page changed meanwhile are left alone."""
        doc = make_document('<p id="a" title="t">x</p>')
        p = doc.query_one("p")
        store = SnapshotStore()

        store.record(p)
        doc.set_style(p, "outline", "2px solid red")
        doc.set_attribute(p, "data-a11y-state", "error")
        doc.set_attribute(p, "class", "highlight")
        doc.remove_attribute(p, "title")
        store.restore_all(doc)

        assert p.attrs == {"id": "a", "class": "highlight"}

    def test_restore_keeps_host_style_changes(self, make_document):
        """Test host style declarations survive, annotation ones do not."""
        doc = make_document('<p style="outline: 1px dotted blue">x</p>')
        p = doc.query_one("p")
        store = SnapshotStore()

        store.record(p)
        doc.set_style(p, "outline", "2px solid red")
        doc.set_style(p, "background-color", "#fee")
        doc.set_style(p, "color", "green")
        store.restore_all(doc)

        assert parse_inline_style(p["style"]) == {
            "outline": "1px dotted blue",
            "color": "green",
        }

    def test_restore_restores_preexisting_markers(self, make_document):
        """Test marker attributes present before annotation come back."""
        doc = make_document('<p data-a11y-state="valid">x</p>')
        p = doc.query_one("p")
        store = SnapshotStore()

        store.record(p)
        doc.set_attribute(p, "data-a11y-state", "error")
        doc.set_attribute(p, "data-a11y-label", "Broken")
        store.restore_all(doc)

        assert p.attrs == {"data-a11y-state": "valid"}

    def test_restore_emits_attribute_records(self, make_document):
        """Test restoration is observable like any other mutation."""
        doc = make_document("<p>x</p>")
        p = doc.query_one("p")
        store = SnapshotStore()
        store.record(p)
        doc.set_attribute(p, "data-a11y-state", "valid")

        batches = []
        observer = doc.observe(lambda records, obs: batches.append(records))
        observer.observe(doc.root, subtree=True, attributes=True)
        store.restore_all(doc)
        doc.flush()

        assert [r.attribute_name for r in batches[0]] == ["data-a11y-state"]
        assert batches[0][0].old_value == "valid"
