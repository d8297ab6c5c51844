# tests/test_reload.py
"""
Tests for Element.reload: stale reference recovery.
"""

import pytest

from domnode import (Element, ElementNotFoundError, ErrorKind, Query,
                     StaleElementError, TimeoutError)
from domnode.drivers import MemoryDriver, MemoryElement


class ForeignStaleError(Exception):
    """Exception class of a third-party client, unknown to domnode."""


class ForeignDriver(MemoryDriver):
    """Driver mapping its client's exceptions onto kinds."""

    def error_kind(self, error):
        if isinstance(error, ForeignStaleError):
            return ErrorKind.STALE_REFERENCE
        return super().error_kind(error)


class TestReload:
    """Tests for reload on reloadable and non-reloadable handles."""

    def test_not_reloadable_is_noop(self, session):
        """Handles from first() are not reloadable; reload keeps the binding."""
        field = session.first("id", "name")
        original = field.native
        original.replace_with(MemoryElement("input", id="name"))

        assert field.reloadable is False
        assert field.reload() is field
        assert field.native is original

    def test_swaps_in_fresh_binding(self, session):
        """A reloadable handle should follow its query to the new node."""
        field = session.find("id", "name")
        replacement = MemoryElement("input", id="name", value="fresh")
        field.native.replace_with(replacement)

        assert field.reload() is field
        assert field.native is replacement
        assert field.value() == "fresh"

    def test_idempotent_when_node_still_present(self, session):
        """Reloading twice in a stable document should not change anything."""
        field = session.find("id", "name")
        original = field.native
        before = field.path()

        field.reload().reload()

        assert field.native is original
        assert field.path() == before

    def test_gone_element_keeps_binding(self, session):
        """Reload of a removed element never raises and keeps the old binding."""
        field = session.find("id", "name")
        original = field.native
        original.remove()

        field.reload()
        field.reload()

        assert field.native is original

    def test_scope_gone(self, session):
        """A stale scope counts as "element is gone"."""
        form = session.find("id", "signup")
        field = form.find("id", "name")
        original = field.native
        form.native.remove()

        field.reload()

        assert field.native is original

    def test_scope_is_reloaded_first(self, session, form_factory):
        """A re-rendered scope should be reloaded before the element."""
        form = session.find("id", "signup")
        field = form.find("id", "name")
        new_form = form_factory()
        form.native.replace_with(new_form)

        field.reload()

        assert form.native is new_form
        assert field.native is next(e for e in new_form.descendants() if e.attributes.get("id") == "name")

    def test_malformed_locator_propagates(self, session, driver):
        """A malformed locator is a programmer error, not "element is gone"."""
        node = driver.find_first(Query.create("id", "name"))
        element = Element(session, node, session.document, Query.create("bogus", "x")).allow_reload()

        with pytest.raises(ValueError, match="Unknown selector"):
            element.reload()

    def test_unexpected_driver_error_propagates(self, session, driver):
        """Failures outside the expected kinds are re-raised."""
        form = session.find("id", "signup")
        field = form.find("id", "name")
        driver.inject_failures(lambda: RuntimeError("connection reset"))

        with pytest.raises(RuntimeError, match="connection reset"):
            field.reload()

    @pytest.mark.parametrize("factory", [
        lambda: StaleElementError("stale"),
        lambda: ElementNotFoundError("id 'name'"),
    ])
    def test_expected_driver_errors_swallowed(self, session, driver, factory):
        """Not-found and stale failures during the lookup keep the binding."""
        form = session.find("id", "signup")
        field = form.find("id", "name")
        original = field.native
        driver.inject_failures(factory)

        field.reload()

        assert field.native is original

    def test_foreign_exception_mapped_by_driver(self, form_factory, session_factory):
        """Kinds come from the driver, not from exception classes."""
        driver = ForeignDriver().load(form_factory())
        session = session_factory(driver)
        form = session.find("id", "signup")
        field = form.find("id", "name")
        original = field.native
        driver.inject_failures(lambda: ForeignStaleError("gone"))

        field.reload()

        assert field.native is original

    def test_foreign_exception_retried(self, form_factory, session_factory):
        """Mapped foreign exceptions are retried by synchronize."""
        driver = ForeignDriver().load(form_factory())
        field = session_factory(driver).find("id", "locked")
        driver.inject_failures(lambda: ForeignStaleError("gone"), times=2)

        assert field.value() == "fixed"


class TestFind:
    """Tests for find on the document and element scopes."""

    def test_find_waits_for_element(self, session, driver):
        """find() should raise ElementNotFoundError after the find timeout."""
        with pytest.raises(ElementNotFoundError) as exc_info:
            session.find("id", "missing")
        assert exc_info.value.scope_description == "document"

    def test_find_returns_reloadable(self, session):
        """find() handles are reloadable, first() handles are not."""
        assert session.find("id", "name").reloadable is True
        assert session.first("id", "name").reloadable is False

    def test_find_visible_option(self, session):
        """The visible option should skip hidden elements."""
        assert session.first("tag", "span", visible=True) is None
        assert session.first("tag", "span").text("all") == "secret"

    def test_unknown_query_option(self, session):
        """Unknown query options are rejected without retry."""
        with pytest.raises(ValueError):
            session.find("id", "name", exact=True)

    def test_find_reloads_replaced_scope(self, session, form_factory):
        """find() on a re-rendered element scope should reload the scope and retry."""
        form = session.find("id", "signup")
        new_form = form_factory()
        form.native.replace_with(new_form)

        field = form.find("id", "name")

        assert form.native is new_form
        assert field.native is next(e for e in new_form.descendants() if e.attributes.get("id") == "name")

    def test_first_after_scope_recovered(self, session, form_factory):
        """Once find() has reloaded the scope, first() queries the new node."""
        form = session.find("id", "signup")
        new_form = form_factory()
        form.native.replace_with(new_form)
        form.find("id", "name")

        agree = form.first("id", "agree")

        assert agree is not None
        assert agree.native in list(new_form.descendants())

    def test_find_in_replaced_scope_without_automatic_reload(self, driver, session_factory, form_factory):
        """Without automatic reload a stale scope times out with the stale error."""
        session = session_factory(driver, automatic_reload=False)
        form = session.find("id", "signup")
        form.native.replace_with(form_factory())

        with pytest.raises(TimeoutError) as exc_info:
            form.find("id", "name")

        assert isinstance(exc_info.value.original_exception, StaleElementError)

    def test_find_on_non_reloadable_scope_does_not_reload(self, session, form_factory):
        """A first() handle is not reloadable, so a stale scope keeps failing."""
        form = session.first("id", "signup")
        form.native.replace_with(form_factory())

        with pytest.raises(TimeoutError) as exc_info:
            form.find("id", "name")

        assert isinstance(exc_info.value.original_exception, StaleElementError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
