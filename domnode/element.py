# domnode/element.py
"""
@file element.py
@brief Element handle: a stable local handle onto a volatile remote node.

Every operation runs through synchronize(), which retries driver-reported
transient failures until the session deadline and may reload the handle
between attempts. Operations taking extended arguments consult the binding's
declared capabilities before dispatching.
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Tuple, Type, TypeVar

from .actionlogger import ACTION_LOGGER
from .capabilities import normalize_click_arguments, verify_extended_support
from .context import ActionContextManager, tracked_action
from .exceptions import (INVALID_ELEMENT_KINDS, RELOAD_EXPECTED_KINDS,
                         RETRYABLE_KINDS, DisabledOptionWarning, ElementWarning,
                         ErrorKind, ObsoleteElementError, ReadOnlyElementError,
                         RedundantSelectionWarning, TimeoutError)
from .interfaces import INode, IQueryScope
from .query import Query
from .scope import Scope
from .waits import wait_until_passes

if TYPE_CHECKING:
    from .session import Session

T = TypeVar("T")

logger = logging.getLogger("domnode")


class Element(Scope):
    """
    A single element on the page.

    Wraps a driver binding (INode) together with the query and scope it was
    found with, so the binding can be re-resolved when the page changes:

        button = session.find("id", "submit")
        button.click()
        button.click("shift", x=5, y=5)   # needs a driver with extended click
        button["title"]
        field.set("abc").value()
    """

    def __init__(
        self,
        session: Session,
        binding: INode,
        query_scope: IQueryScope,
        query: Query,
    ):
        """
        @param session Owning session (driver, options, timings)
        @param binding Driver binding for the remote node
        @param query_scope Scope the query was resolved against
        @param query Locator used to find the element
        """
        if binding is None:
            raise ValueError("Element requires a driver binding")
        self.session = session
        self._binding = binding
        self._query_scope = query_scope
        self._query = query
        self._allow_reload = False

    @property
    def query(self) -> Query:
        return self._query

    @property
    def query_scope(self) -> IQueryScope:
        return self._query_scope

    @property
    def reloadable(self) -> bool:
        return self._allow_reload

    @property
    def description(self) -> str:
        return self._query.description

    def allow_reload(self) -> Element:
        """Let reload() and automatic reloads swap this handle's binding."""
        self._allow_reload = True
        return self

    # --- Synchronization ---

    def synchronize(
        self,
        action: Callable[[INode], T],
        timeout: Optional[float] = None,
        errors: Optional[Iterable[ErrorKind]] = None,
    ) -> T:
        """
        Run action against the current binding, retrying transient failures.

        Failures whose kind is in errors (default RETRYABLE_KINDS) are retried
        until the deadline; the handle is reloaded before each retry when
        the session has automatic_reload on. Any other failure propagates
        immediately. Calls nested inside another synchronize run once.

        @param action Callable receiving the binding
        @param timeout Deadline in seconds, defaults to the session's synchronize timeout
        @param errors Error kinds to retry
        @throws ObsoleteElementError if the last failure says the node is detached
        @throws TimeoutError carrying the last transient failure otherwise
        """
        session = self.session
        if session.synchronized:
            return action(self._binding)

        settings = session.time_config.synchronize
        seconds = settings.timeout if timeout is None else float(timeout)
        if not session.driver.needs_waiting:
            seconds = 0.0
        kinds = RETRYABLE_KINDS if errors is None else frozenset(errors)

        session.synchronized = True
        try:
            return wait_until_passes(
                lambda: action(self._binding),
                timeout=seconds,
                interval=settings.interval,
                description=ActionContextManager.get_current_description(),
                stage="synchronize",
                retry_if=lambda e: session.error_kind(e) in kinds,
                before_retry=self._before_retry,
            )
        except TimeoutError as e:
            last = e.original_exception
            if last is not None and session.error_kind(last) in INVALID_ELEMENT_KINDS:
                ACTION_LOGGER.log(
                    action="synchronize",
                    element=self.description,
                    status="error",
                    exception=last,
                    attempt=e.attempt_count,
                    event="obsolete",
                )
                raise ObsoleteElementError.from_timeout(e, self.description) from last
            raise
        finally:
            session.synchronized = False

    def _before_retry(self, error: BaseException) -> None:
        if self.session.options.automatic_reload:
            self.reload()

    # --- Stale reference recovery ---

    def reload(self) -> Element:
        """
        Re-resolve the query against its scope and swap in the fresh binding.

        A no-op unless the handle is reloadable. When nothing matches, or the
        lookup fails with a not-found/stale kind, the current binding is kept.
        Any other failure propagates.
        """
        if not self._allow_reload:
            return self
        fresh = self._lookup_binding()
        if fresh is not None:
            self._binding = fresh
        return self

    def _lookup_binding(self) -> Optional[INode]:
        query = self._query
        try:
            reloaded = self._query_scope.reload().first(
                query.selector, query.locator, **query.as_kwargs()
            )
        except Exception as e:
            kind = self.session.error_kind(e)
            if kind not in RELOAD_EXPECTED_KINDS:
                raise
            logger.debug("Reload of %s kept previous binding: %s", self.description, e)
            ACTION_LOGGER.log(
                action="reload",
                element=self.description,
                status="skipped",
                metadata={"kind": kind.value},
                event="reload",
            )
            return None

        if reloaded is None:
            logger.debug("Reload of %s found no match", self.description)
            ACTION_LOGGER.log(
                action="reload",
                element=self.description,
                status="skipped",
                metadata={"kind": ErrorKind.NOT_FOUND.value},
                event="reload",
            )
            return None

        ACTION_LOGGER.log(action="reload", element=self.description, status="ok", event="reload")
        return reloaded._binding

    # --- Scope ---

    def first(self, selector: str, locator: Any, **options: Any) -> Optional[Element]:
        """First descendant matching the query, or None."""
        query = Query.create(selector, locator, **options)
        node = self._binding.find_first(query)
        if node is None:
            return None
        return Element(self.session, node, self, query)

    # --- Queries ---

    @property
    def native(self) -> Any:
        """The raw driver object, for driver specific calls."""
        return self.synchronize(lambda node: node.native)

    @tracked_action("text")
    def text(self, text_type: Optional[str] = None) -> str:
        """
        Text of the element.

        @param text_type "all" or "visible"; by default visible text only,
               unless the session neither ignores hidden elements nor asks
               for visible text only
        """
        if text_type not in (None, "all", "visible"):
            raise ValueError(f"Unknown text type: {text_type}. Use 'all' or 'visible'")
        if text_type is None:
            options = self.session.options
            if options.ignore_hidden_elements or options.visible_text_only:
                text_type = "visible"
            else:
                text_type = "all"
        if text_type == "all":
            return self.synchronize(lambda node: node.all_text())
        return self.synchronize(lambda node: node.visible_text())

    def __getitem__(self, attribute: str) -> Optional[str]:
        return self.attribute(attribute)

    @tracked_action("attribute")
    def attribute(self, name: str) -> Optional[str]:
        return self.synchronize(lambda node: node.attribute(name))

    @tracked_action("value")
    def value(self) -> Any:
        return self.synchronize(lambda node: node.value())

    @tracked_action("tag_name")
    def tag_name(self) -> str:
        return self.synchronize(lambda node: node.tag_name())

    @tracked_action("is_visible")
    def is_visible(self) -> bool:
        """Not all drivers support CSS, so the result may be inaccurate."""
        return self.synchronize(lambda node: node.is_visible())

    @tracked_action("is_checked")
    def is_checked(self) -> bool:
        return self.synchronize(lambda node: node.is_checked())

    @tracked_action("is_selected")
    def is_selected(self) -> bool:
        return self.synchronize(lambda node: node.is_selected())

    @tracked_action("is_disabled")
    def is_disabled(self) -> bool:
        return self.synchronize(lambda node: node.is_disabled())

    @tracked_action("is_readonly")
    def is_readonly(self) -> bool:
        return self.synchronize(lambda node: node.is_readonly())

    @tracked_action("is_multiple")
    def is_multiple(self) -> bool:
        return self.synchronize(lambda node: node.is_multiple())

    @tracked_action("path")
    def path(self) -> str:
        """Location path (XPath-like) of the element."""
        return self.synchronize(lambda node: node.path())

    # --- Actions ---

    @tracked_action("set")
    def set(self, value: Any, **options: Any) -> Element:
        """
        Set the value of a form element.

        @param value New value
        @param options Driver specific options; require a driver declaring
               extended support for "set"
        @throws ReadOnlyElementError on a read-only element
        @throws CapabilityError if options are given and unsupported
        """
        if self.is_readonly():
            raise ReadOnlyElementError(self.description, value)

        if not options:
            self.synchronize(lambda node: node.set(value))
            return self

        def set_extended(node: INode) -> None:
            verify_extended_support("set", node)
            node.set(value, dict(options))

        self.synchronize(set_extended)
        return self

    @tracked_action("select_option")
    def select_option(self) -> Element:
        """Select this option element. Warns if it is disabled or already selected."""
        if self.is_disabled():
            self._warn("select_option", DisabledOptionWarning, f"Attempt to select disabled option: {self._option_label()}")
        elif self.is_selected():
            self._warn("select_option", RedundantSelectionWarning, f"Option already selected: {self._option_label()}")
        self.synchronize(lambda node: node.select_option())
        return self

    @tracked_action("unselect_option")
    def unselect_option(self) -> Element:
        """Unselect this option element inside a multiple select."""
        self.synchronize(lambda node: node.unselect_option())
        return self

    @tracked_action("click")
    def click(self, *keys: str, x: Optional[float] = None, y: Optional[float] = None) -> Element:
        """
        Click the element.

        @param keys Modifier keys held while clicking (alt, control, meta, shift)
        @param x, y Offset from the top left corner; the middle if omitted
        """
        self._click("click", keys, x, y)
        return self

    @tracked_action("right_click")
    def right_click(self, *keys: str, x: Optional[float] = None, y: Optional[float] = None) -> Element:
        self._click("right_click", keys, x, y)
        return self

    @tracked_action("double_click")
    def double_click(self, *keys: str, x: Optional[float] = None, y: Optional[float] = None) -> Element:
        self._click("double_click", keys, x, y)
        return self

    def _click(self, operation: str, keys: Tuple[str, ...], x: Optional[float], y: Optional[float]) -> None:
        modifiers, offset = normalize_click_arguments(keys, x, y)
        if not modifiers and not offset:
            self.synchronize(lambda node: getattr(node, operation)())
            return

        def click_extended(node: INode) -> None:
            verify_extended_support(operation, node)
            getattr(node, operation)(list(modifiers), offset or None)

        self.synchronize(click_extended)

    @tracked_action("send_keys")
    def send_keys(self, *keys: Any) -> Element:
        """Send keystrokes to the element."""
        self.synchronize(lambda node: node.send_keys(*keys))
        return self

    @tracked_action("hover")
    def hover(self) -> Element:
        self.synchronize(lambda node: node.hover())
        return self

    @tracked_action("trigger")
    def trigger(self, event: str) -> Element:
        """Trigger an event (e.g. "focus", "mouseover") on the element."""
        self.synchronize(lambda node: node.trigger(event))
        return self

    @tracked_action("drag_to")
    def drag_to(self, other: Element) -> Element:
        """Drag this element onto other."""
        self.synchronize(lambda node: node.drag_to(other._binding))
        return self

    # --- Diagnostics ---

    def __repr__(self) -> str:
        binding = self._binding
        try:
            tag = binding.tag_name()
        except Exception as e:
            if self.session.error_kind(e) in INVALID_ELEMENT_KINDS:
                return "Obsolete <domnode.Element>"
            raise

        try:
            path = binding.path()
        except Exception as e:
            kind = self.session.error_kind(e)
            if kind is ErrorKind.NOT_SUPPORTED:
                return f'<domnode.Element tag="{tag}">'
            if kind in INVALID_ELEMENT_KINDS:
                return "Obsolete <domnode.Element>"
            raise
        return f'<domnode.Element tag="{tag}" path="{path}">'

    # --- Helpers ---

    def _option_label(self) -> Any:
        return self.value() or self.text("all")

    def _warn(self, action: str, category: Type[ElementWarning], message: str) -> None:
        ACTION_LOGGER.log(
            action=action,
            element=self.description,
            status="warning",
            metadata={"category": category.__name__, "message": message},
            event="warning",
        )
        warnings.warn(message, category, stacklevel=4)
