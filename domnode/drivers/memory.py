# domnode/drivers/memory.py
"""
@file memory.py
@brief In-memory document driver.

Simulates a small DOM so element handles can be exercised without a
browser. Nodes can be detached or replaced to simulate page re-renders,
transient failures can be injected, and every binding call is journaled
in MemoryDriver.history.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import (Any, Callable, Deque, Dict, Iterable, Iterator, List,
                    NamedTuple, Optional, Sequence, Union)

from ..capabilities import FULL, NodeCapabilities
from ..exceptions import (DriverError, NotSupportedByDriverError,
                          StaleElementError, UnselectNotAllowedError)
from ..interfaces import IDriver, INode
from ..query import Query

SELECTORS = ("id", "tag", "name", "text", "attribute")
QUERY_OPTIONS = ("visible",)
TEXT_INPUT_TAGS = ("input", "textarea")


class Key(Enum):
    """Special keys understood by MemoryNode.send_keys."""
    BACKSPACE = "backspace"
    ENTER = "enter"
    TAB = "tab"
    ESCAPE = "escape"
    SPACE = "space"
    LEFT = "left"
    RIGHT = "right"
    SHIFT = "shift"
    CONTROL = "control"
    ALT = "alt"
    META = "meta"


class NodeCall(NamedTuple):
    operation: str
    element: "MemoryElement"
    args: tuple


class MemoryElement:
    """
    A node of the in-memory document.

    Keyword arguments become attributes; a trailing underscore is dropped so
    class_="x" sets "class". Boolean attributes (disabled, readonly, hidden,
    checked, selected, multiple) are stored as True.
    """

    def __init__(self, tag: str, text: str = "", children: Iterable[MemoryElement] = (), **attributes: Any):
        self.tag = tag.lower()
        self.text = text
        self.attributes: Dict[str, Any] = {k.rstrip("_"): v for k, v in attributes.items()}
        self.parent: Optional[MemoryElement] = None
        self.children: List[MemoryElement] = []
        for child in children:
            self.append(child)

    def append(self, child: MemoryElement) -> MemoryElement:
        if child.parent is not None:
            child.remove()
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> MemoryElement:
        """Detach from the tree; bindings to this node become stale."""
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None
        return self

    def replace_with(self, other: MemoryElement) -> MemoryElement:
        """Put other where this node is and detach this node."""
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot replace a detached element")
        if other.parent is not None:
            other.remove()
        index = parent.children.index(self)
        parent.children[index] = other
        other.parent = parent
        self.parent = None
        return other

    def descendants(self) -> Iterator[MemoryElement]:
        """Descendants in document order."""
        for child in self.children:
            yield child
            yield from child.descendants()

    def ancestors(self) -> Iterator[MemoryElement]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def flag(self, name: str) -> bool:
        value = self.attributes.get(name, False)
        return value is not False and value is not None

    @property
    def hidden(self) -> bool:
        return self.flag("hidden") or any(a.flag("hidden") for a in self.ancestors())

    @property
    def input_type(self) -> str:
        return str(self.attributes.get("type", "text")).lower()

    def __repr__(self) -> str:
        attrs = "".join(f" {k}={v!r}" for k, v in self.attributes.items())
        return f"<MemoryElement {self.tag}{attrs}>"


def _collect_text(element: MemoryElement, visible_only: bool) -> str:
    if visible_only and element.flag("hidden"):
        return ""
    parts = [element.text] + [_collect_text(child, visible_only) for child in element.children]
    return " ".join(" ".join(p for p in parts if p).split())


class MemoryDriver(IDriver):
    """
    Driver over an in-memory document rooted at <html><body>.

    @param extended Operations accepting extended arguments (a NodeCapabilities
           or an iterable of operation names); all of them by default
    @param supports_path Whether path() is available
    @param supports_trigger Whether trigger() is available
    @param needs_waiting Whether synchronize retries transient failures
    """

    name = "memory"

    def __init__(
        self,
        extended: Union[NodeCapabilities, Iterable[str]] = FULL,
        supports_path: bool = True,
        supports_trigger: bool = True,
        needs_waiting: bool = True,
    ):
        if isinstance(extended, NodeCapabilities):
            self.capabilities = extended
        else:
            self.capabilities = NodeCapabilities.of(extended)
        self.supports_path = supports_path
        self.supports_trigger = supports_trigger
        self._needs_waiting = needs_waiting
        self.history: List[NodeCall] = []
        self._failures: Deque[Callable[[], BaseException]] = deque()
        self.root = self._new_root()

    @staticmethod
    def _new_root() -> MemoryElement:
        return MemoryElement("html", children=[MemoryElement("body")])

    @property
    def needs_waiting(self) -> bool:
        return self._needs_waiting

    @property
    def body(self) -> MemoryElement:
        return self.root.children[0]

    def load(self, *elements: MemoryElement) -> MemoryDriver:
        """Append elements to <body>."""
        for element in elements:
            self.body.append(element)
        return self

    def reset(self) -> None:
        self.root = self._new_root()
        self.history.clear()
        self._failures.clear()

    def inject_failures(self, factory: Callable[[], BaseException], times: int = 1) -> None:
        """Make the next `times` binding calls raise factory()."""
        for _ in range(times):
            self._failures.append(factory)

    def calls(self, operation: Optional[str] = None) -> List[NodeCall]:
        if operation is None:
            return list(self.history)
        return [call for call in self.history if call.operation == operation]

    def find_first(self, query: Query) -> Optional[INode]:
        element = _search(self.root, query)
        return MemoryNode(self, element) if element is not None else None

    def is_attached(self, element: MemoryElement) -> bool:
        if element is self.root:
            return True
        return any(a is self.root for a in element.ancestors())

    def _enter(self, operation: str, element: MemoryElement, args: tuple = ()) -> None:
        self.history.append(NodeCall(operation, element, args))
        if self._failures:
            raise self._failures.popleft()()
        if not self.is_attached(element):
            raise StaleElementError(f"{element!r} is no longer attached to the document")


def _matches(element: MemoryElement, query: Query) -> bool:
    selector, locator = query.selector, query.locator
    if selector == "id":
        found = element.attributes.get("id") == locator
    elif selector == "tag":
        found = element.tag == str(locator).lower()
    elif selector == "name":
        found = element.attributes.get("name") == locator
    elif selector == "text":
        found = str(locator) in element.text
    else:
        name, value = locator
        found = element.attributes.get(name) == value
    if found and query.option("visible"):
        found = not element.hidden
    return found


def _search(scope: MemoryElement, query: Query) -> Optional[MemoryElement]:
    if query.selector not in SELECTORS:
        raise ValueError(f"Unknown selector: {query.selector}. Use one of {list(SELECTORS)}")
    if query.selector == "attribute" and not (isinstance(query.locator, tuple) and len(query.locator) == 2):
        raise ValueError("The attribute selector takes a (name, value) pair")
    unknown = set(query.as_kwargs()) - set(QUERY_OPTIONS)
    if unknown:
        raise ValueError(f"Unknown query options: {sorted(unknown)}")
    for element in scope.descendants():
        if _matches(element, query):
            return element
    return None


class MemoryNode(INode):
    """Binding to one MemoryElement."""

    def __init__(self, driver: MemoryDriver, element: MemoryElement):
        self._driver = driver
        self._element = element

    @property
    def native(self) -> MemoryElement:
        return self._element

    def capabilities(self) -> NodeCapabilities:
        return self._driver.capabilities

    def _enter(self, operation: str, *args: Any) -> MemoryElement:
        self._driver._enter(operation, self._element, args)
        return self._element

    def _editable(self, element: MemoryElement) -> bool:
        return not self._disabled(element) and not element.flag("readonly")

    @staticmethod
    def _disabled(element: MemoryElement) -> bool:
        if element.flag("disabled"):
            return True
        if element.tag in ("option", "optgroup"):
            return any(a.tag in ("select", "optgroup") and a.flag("disabled") for a in element.ancestors())
        return False

    @staticmethod
    def _select_of(element: MemoryElement) -> Optional[MemoryElement]:
        return next((a for a in element.ancestors() if a.tag == "select"), None)

    # --- Queries ---

    def all_text(self) -> str:
        return _collect_text(self._enter("all_text"), visible_only=False)

    def visible_text(self) -> str:
        element = self._enter("visible_text")
        if element.hidden:
            return ""
        return _collect_text(element, visible_only=True)

    def attribute(self, name: str) -> Optional[str]:
        value = self._enter("attribute", name).attributes.get(name)
        if value is None or value is False:
            return None
        if value is True:
            return name
        return str(value)

    def value(self) -> Any:
        element = self._enter("value")
        if element.tag == "select":
            selected = [o for o in element.descendants() if o.tag == "option" and o.flag("selected")]
            if element.flag("multiple"):
                return [_option_value(o) for o in selected]
            if selected:
                return _option_value(selected[0])
            options = [o for o in element.descendants() if o.tag == "option"]
            return _option_value(options[0]) if options else None
        if element.tag == "option":
            return _option_value(element)
        if element.tag == "textarea":
            return str(element.attributes.get("value", element.text))
        if element.tag == "input":
            if element.input_type in ("checkbox", "radio"):
                return str(element.attributes.get("value", "on"))
            return str(element.attributes.get("value", ""))
        value = element.attributes.get("value")
        return None if value is None else str(value)

    def tag_name(self) -> str:
        return self._enter("tag_name").tag

    def is_visible(self) -> bool:
        return not self._enter("is_visible").hidden

    def is_checked(self) -> bool:
        return self._enter("is_checked").flag("checked")

    def is_selected(self) -> bool:
        return self._enter("is_selected").flag("selected")

    def is_disabled(self) -> bool:
        return self._disabled(self._enter("is_disabled"))

    def is_readonly(self) -> bool:
        return self._enter("is_readonly").flag("readonly")

    def is_multiple(self) -> bool:
        return self._enter("is_multiple").flag("multiple")

    def path(self) -> str:
        element = self._enter("path")
        if not self._driver.supports_path:
            raise NotSupportedByDriverError("path", self._driver.name)
        segments = []
        node = element
        while node is not None:
            segment = node.tag
            if node.parent is not None:
                same = [c for c in node.parent.children if c.tag == node.tag]
                if len(same) > 1:
                    segment += f"[{same.index(node) + 1}]"
            segments.append(segment)
            node = node.parent
        return "/" + "/".join(reversed(segments))

    def find_first(self, query: Query) -> Optional[INode]:
        element = _search(self._enter("find_first", query), query)
        return MemoryNode(self._driver, element) if element is not None else None

    # --- Actions ---

    def set(self, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        args = (value,) if options is None else (value, options)
        element = self._enter("set", *args)
        if element.tag not in TEXT_INPUT_TAGS:
            raise NotSupportedByDriverError(f"set on <{element.tag}>", self._driver.name)
        if not self._editable(element):
            return
        if element.tag == "input" and element.input_type == "checkbox":
            element.attributes["checked"] = bool(value)
        elif element.tag == "input" and element.input_type == "radio":
            if value:
                self._check_radio(element)
        else:
            element.attributes["value"] = "" if value is None else str(value)

    def select_option(self) -> None:
        element = self._enter("select_option")
        self._select(element)

    def unselect_option(self) -> None:
        element = self._enter("unselect_option")
        select = self._select_of(element)
        if select is None or not select.flag("multiple"):
            raise UnselectNotAllowedError("Cannot unselect option from single select box.")
        element.attributes["selected"] = False

    def click(self, keys: Optional[Sequence[str]] = None, offset: Optional[Dict[str, Any]] = None) -> None:
        element = self._enter("click", *self._click_args(keys, offset))
        if self._disabled(element):
            return
        if element.tag == "input" and element.input_type == "checkbox":
            element.attributes["checked"] = not element.flag("checked")
        elif element.tag == "input" and element.input_type == "radio":
            self._check_radio(element)
        elif element.tag == "option":
            self._select(element)

    def right_click(self, keys: Optional[Sequence[str]] = None, offset: Optional[Dict[str, Any]] = None) -> None:
        self._enter("right_click", *self._click_args(keys, offset))

    def double_click(self, keys: Optional[Sequence[str]] = None, offset: Optional[Dict[str, Any]] = None) -> None:
        self._enter("double_click", *self._click_args(keys, offset))

    def send_keys(self, *keys: Any) -> None:
        element = self._enter("send_keys", *keys)
        if element.tag not in TEXT_INPUT_TAGS or not self._editable(element):
            return
        text = str(element.attributes.get("value", ""))
        for key in keys:
            if isinstance(key, str):
                text += key
            elif key is Key.BACKSPACE:
                text = text[:-1]
            elif key is Key.SPACE:
                text += " "
        element.attributes["value"] = text

    def hover(self) -> None:
        self._enter("hover")

    def drag_to(self, other: INode) -> None:
        if not isinstance(other, MemoryNode):
            raise TypeError(f"Cannot drag to a {type(other).__name__}")
        self._enter("drag_to", other._element)
        if not self._driver.is_attached(other._element):
            raise StaleElementError(f"{other._element!r} is no longer attached to the document")

    def trigger(self, event: str) -> None:
        self._enter("trigger", event)
        if not self._driver.supports_trigger:
            raise NotSupportedByDriverError("trigger", self._driver.name)

    # --- Helpers ---

    @staticmethod
    def _click_args(keys: Optional[Sequence[str]], offset: Optional[Dict[str, Any]]) -> tuple:
        if keys is None and offset is None:
            return ()
        return (tuple(keys or ()), dict(offset or {}))

    def _select(self, element: MemoryElement) -> None:
        if element.tag != "option":
            raise DriverError(f"Cannot select a <{element.tag}> element")
        if self._disabled(element):
            return
        select = self._select_of(element)
        if select is not None and not select.flag("multiple"):
            for option in select.descendants():
                if option.tag == "option":
                    option.attributes["selected"] = False
        element.attributes["selected"] = True

    def _check_radio(self, element: MemoryElement) -> None:
        name = element.attributes.get("name")
        if name is not None:
            root = element
            while root.parent is not None:
                root = root.parent
            for other in root.descendants():
                if other.tag == "input" and other.input_type == "radio" and other.attributes.get("name") == name:
                    other.attributes["checked"] = False
        element.attributes["checked"] = True


def _option_value(option: MemoryElement) -> str:
    return str(option.attributes.get("value", option.text))
