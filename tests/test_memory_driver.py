# tests/test_memory_driver.py
"""
Tests for the in-memory driver backing the element tests.
"""

import pytest

from domnode import (ElementNotReadyError, ErrorKind, NotSupportedByDriverError,
                     Query, StaleElementError)
from domnode.drivers import Key, MemoryDriver, MemoryElement, NodeCall


def node(driver, selector, locator, **options):
    return driver.find_first(Query.create(selector, locator, **options))


@pytest.fixture
def doc():
    return MemoryDriver().load(
        MemoryElement("div", "Hello", id="greeting", class_="banner", children=[
            MemoryElement("span", "world", id="who"),
        ]),
        MemoryElement("textarea", "notes", id="notes"),
        MemoryElement("input", id="r1", type="radio", name="size", checked=True),
        MemoryElement("input", id="r2", type="radio", name="size"),
        MemoryElement("div", id="off", disabled=True),
    )


class TestMemoryElement:
    """Tests for the document tree."""

    def test_trailing_underscore(self):
        """class_ should become the class attribute."""
        assert MemoryElement("p", class_="x").attributes == {"class": "x"}

    def test_replace_with(self, doc):
        """replace_with should put the new node in place and detach the old one."""
        old = node(doc, "id", "greeting").native
        new = MemoryElement("div", id="greeting")
        old.replace_with(new)

        assert old.parent is None
        assert doc.is_attached(new)
        assert not doc.is_attached(old)

    def test_replace_detached(self):
        """A detached node cannot be replaced."""
        with pytest.raises(ValueError):
            MemoryElement("p").replace_with(MemoryElement("p"))


class TestMemoryDriver:
    """Tests for searching and journaling."""

    def test_selectors(self, doc):
        """Should support id, tag, name, text and attribute selectors."""
        assert node(doc, "id", "who").native.text == "world"
        assert node(doc, "tag", "TEXTAREA").native.attributes["id"] == "notes"
        assert node(doc, "name", "size").native.attributes["id"] == "r1"
        assert node(doc, "text", "ell").native.attributes["id"] == "greeting"
        assert node(doc, "attribute", ("class", "banner")).native.attributes["id"] == "greeting"
        assert node(doc, "id", "nope") is None

    def test_unknown_selector(self, doc):
        """Unknown selectors raise ValueError."""
        with pytest.raises(ValueError):
            node(doc, "css", "#who")

    def test_malformed_attribute_locator(self, doc):
        """The attribute selector needs a pair."""
        with pytest.raises(ValueError):
            node(doc, "attribute", "class")

    def test_journal(self, doc):
        """Every binding call is recorded."""
        greeting = node(doc, "id", "greeting")
        greeting.tag_name()
        greeting.trigger("focus")

        assert doc.calls() == [
            NodeCall("tag_name", greeting.native, ()),
            NodeCall("trigger", greeting.native, ("focus",)),
        ]
        assert [c.operation for c in doc.calls("trigger")] == ["trigger"]

    def test_injected_failures(self, doc):
        """Injected failures are raised in order, then calls succeed."""
        greeting = node(doc, "id", "greeting")
        doc.inject_failures(lambda: ElementNotReadyError("busy"), times=2)

        for _ in range(2):
            with pytest.raises(ElementNotReadyError):
                greeting.tag_name()
        assert greeting.tag_name() == "div"

    def test_stale_binding(self, doc):
        """Calls on a detached node raise StaleElementError."""
        who = node(doc, "id", "who")
        who.native.remove()

        with pytest.raises(StaleElementError):
            who.all_text()

    def test_error_kinds(self, doc):
        """error_kind should read the kind of driver errors."""
        assert doc.error_kind(StaleElementError("x")) is ErrorKind.STALE_REFERENCE
        assert doc.error_kind(NotSupportedByDriverError("path")) is ErrorKind.NOT_SUPPORTED
        assert doc.error_kind(KeyError("x")) is ErrorKind.UNKNOWN

    def test_reset(self, doc):
        """reset should drop the document, journal and pending failures."""
        node(doc, "id", "greeting").tag_name()
        doc.inject_failures(lambda: ElementNotReadyError("busy"))
        doc.reset()

        assert doc.history == []
        assert node(doc, "id", "greeting") is None
        assert node(doc, "tag", "body").tag_name() == "body"


class TestMemoryNode:
    """Tests for node semantics."""

    def test_text(self, doc):
        """all_text should join own and descendant text."""
        assert node(doc, "id", "greeting").all_text() == "Hello world"

    def test_textarea_value(self, doc):
        """A textarea's value defaults to its text."""
        notes = node(doc, "id", "notes")
        assert notes.value() == "notes"
        notes.set("changed")
        assert notes.value() == "changed"

    def test_radio_group(self, doc):
        """Checking a radio unchecks the rest of its group."""
        node(doc, "id", "r2").click()
        assert node(doc, "id", "r1").is_checked() is False
        assert node(doc, "id", "r2").is_checked() is True
        assert node(doc, "id", "r2").value() == "on"

    def test_set_not_supported_on_div(self, doc):
        """Only text inputs can be set."""
        with pytest.raises(NotSupportedByDriverError):
            node(doc, "id", "greeting").set("x")

    def test_send_keys_space(self, doc):
        """Key.SPACE types a space."""
        notes = node(doc, "id", "notes")
        notes.set("a")
        notes.send_keys(Key.SPACE, "b")
        assert notes.value() == "a b"

    def test_path(self, doc):
        """Paths index siblings sharing a tag."""
        assert node(doc, "id", "r2").path() == "/html/body/input[2]"
        assert node(doc, "id", "who").path() == "/html/body/div[1]/span"

    def test_drag_to_detached(self, doc):
        """Dragging onto a detached node is stale."""
        source = node(doc, "id", "greeting")
        target = node(doc, "id", "notes")
        target.native.remove()

        with pytest.raises(StaleElementError):
            source.drag_to(target)

    def test_disabled_state(self, doc):
        """disabled marks the node disabled."""
        assert node(doc, "id", "off").is_disabled() is True
        assert node(doc, "id", "greeting").is_disabled() is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
