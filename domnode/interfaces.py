"""
@file interfaces.py
@brief Abstract base classes for driver backends and query scopes.

Defines what a driver backend must implement so that a single Element
handle can work across backends with differing capability sets.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

from .capabilities import NodeCapabilities
from .exceptions import DriverError, ErrorKind
from .query import Query

if TYPE_CHECKING:
    from .element import Element


class INode(ABC):
    """
    Driver-specific binding to one remote node.

    Extended forms of click/right_click/double_click/set are only invoked
    when capabilities() lists the operation.
    """

    @property
    def native(self) -> Any:
        """The raw object of the underlying driver."""
        return self

    @abstractmethod
    def capabilities(self) -> NodeCapabilities:
        """Operations accepting extended arguments."""
        pass

    @abstractmethod
    def all_text(self) -> str:
        pass

    @abstractmethod
    def visible_text(self) -> str:
        pass

    @abstractmethod
    def attribute(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def value(self) -> Any:
        pass

    @abstractmethod
    def set(self, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Set the node value.

        Args:
            value: New value
            options: Driver options; only passed when "set" is extended
        """
        pass

    @abstractmethod
    def select_option(self) -> None:
        pass

    @abstractmethod
    def unselect_option(self) -> None:
        pass

    @abstractmethod
    def click(self, keys: Optional[Sequence[str]] = None, offset: Optional[Dict[str, Any]] = None) -> None:
        """
        Click the node.

        Args:
            keys: Modifier keys held during the click
            offset: {"x": .., "y": ..} from the top left corner
        """
        pass

    @abstractmethod
    def right_click(self, keys: Optional[Sequence[str]] = None, offset: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def double_click(self, keys: Optional[Sequence[str]] = None, offset: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def send_keys(self, *keys: Any) -> None:
        pass

    @abstractmethod
    def hover(self) -> None:
        pass

    @abstractmethod
    def drag_to(self, other: "INode") -> None:
        pass

    @abstractmethod
    def trigger(self, event: str) -> None:
        pass

    @abstractmethod
    def tag_name(self) -> str:
        pass

    @abstractmethod
    def is_visible(self) -> bool:
        pass

    @abstractmethod
    def is_checked(self) -> bool:
        pass

    @abstractmethod
    def is_selected(self) -> bool:
        pass

    @abstractmethod
    def is_disabled(self) -> bool:
        pass

    @abstractmethod
    def is_readonly(self) -> bool:
        pass

    @abstractmethod
    def is_multiple(self) -> bool:
        pass

    @abstractmethod
    def path(self) -> str:
        """
        Location path of the node.

        Raises NotSupportedByDriverError when the backend cannot compute it.
        """
        pass

    @abstractmethod
    def find_first(self, query: Query) -> Optional["INode"]:
        """First descendant matching query, or None."""
        pass


class IDriver(ABC):
    """
    Driver backend owning the document and its error taxonomy.
    """

    name = "driver"

    @property
    def needs_waiting(self) -> bool:
        """Whether the document changes asynchronously and operations should be retried."""
        return True

    @abstractmethod
    def find_first(self, query: Query) -> Optional[INode]:
        """First node in the document matching query, or None."""
        pass

    def error_kind(self, error: BaseException) -> ErrorKind:
        """
        Classify an error raised by this driver.

        Backends wrapping a third-party client override this to map the
        client's exception classes onto kinds.
        """
        if isinstance(error, DriverError):
            return error.kind
        return ErrorKind.UNKNOWN

    def reset(self) -> None:
        """Forget document state between runs."""
        pass


class IQueryScope(ABC):
    """
    A context against which queries are resolved (the document or an element).
    """

    @abstractmethod
    def reload(self) -> "IQueryScope":
        """Refresh the scope itself and return it."""
        pass

    @abstractmethod
    def first(self, selector: str, locator: Any, **options: Any) -> Optional["Element"]:
        """First element matching the query within this scope, or None."""
        pass
