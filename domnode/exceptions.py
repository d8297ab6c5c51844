# domnode/exceptions.py
"""
@file exceptions.py
@brief Exception classes and error kinds for element handles and drivers.
"""

from __future__ import annotations
from enum import Enum
from typing import FrozenSet, Optional


class ErrorKind(Enum):
    """Tag attached to errors crossing the driver boundary."""
    STALE_REFERENCE = "stale_reference"
    NOT_READY = "not_ready"
    NOT_FOUND = "not_found"
    NOT_SUPPORTED = "not_supported"
    UNKNOWN = "unknown"


# Kinds the retry wrapper re-attempts.
RETRYABLE_KINDS: FrozenSet[ErrorKind] = frozenset({
    ErrorKind.STALE_REFERENCE,
    ErrorKind.NOT_READY,
    ErrorKind.NOT_FOUND,
})

# Kinds a reload treats as "element is gone".
RELOAD_EXPECTED_KINDS: FrozenSet[ErrorKind] = frozenset({
    ErrorKind.NOT_FOUND,
    ErrorKind.STALE_REFERENCE,
})

# Kinds meaning the handle points at a node that no longer exists.
INVALID_ELEMENT_KINDS: FrozenSet[ErrorKind] = frozenset({
    ErrorKind.STALE_REFERENCE,
})


class DomNodeError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(DomNodeError):
    """Raised when a session options file is invalid."""
    pass


class TimeoutError(DomNodeError):
    """
    Raised when a wait/retry times out.

    This exception preserves the original exception that caused the timeout,
    making debugging significantly easier.

    Attributes:
        original_exception: The last exception that was raised before timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of attempts made (if applicable)
        elapsed_time: Actual elapsed time in seconds (if applicable)
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None
        self.stage: Optional[str] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")
        if self.stage is not None:
            details.append(f"Stage: {self.stage}")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            if getattr(current, 'original_exception', None) is not None:
                current = current.original_exception
            else:
                return current
        return None

    def get_traceback_str(self) -> str:
        """
        Get a formatted traceback string from the original exception.

        @return Formatted traceback string or empty string if no original exception
        """
        if self.original_exception is None:
            return ""

        import traceback
        return "".join(traceback.format_exception(
            type(self.original_exception),
            self.original_exception,
            self.original_exception.__traceback__
        ))


class ObsoleteElementError(TimeoutError):
    """
    Raised when a handle keeps pointing at a detached node.

    The retry budget ran out with the driver still reporting the node as
    stale and reload (if allowed) did not find a replacement.
    """

    def __init__(self, element_description: str, message: str):
        self.element_description = element_description
        super().__init__(f"Element {element_description} is obsolete: {message}")

    @classmethod
    def from_timeout(cls, error: TimeoutError, element_description: str) -> ObsoleteElementError:
        obsolete = cls(element_description, str(error.original_exception))
        obsolete.original_exception = error.original_exception
        obsolete.description = error.description
        obsolete.timeout = error.timeout
        obsolete.attempt_count = error.attempt_count
        obsolete.elapsed_time = error.elapsed_time
        obsolete.stage = error.stage
        return obsolete


class DriverError(DomNodeError):
    """
    Error raised by a driver binding, tagged with an ErrorKind.

    Drivers raise these (or map their own exceptions onto kinds through
    IDriver.error_kind) so the core can match on kind instead of class.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class StaleElementError(DriverError):
    """Raised when a binding refers to a node no longer attached to the document."""

    kind = ErrorKind.STALE_REFERENCE


class ElementNotReadyError(DriverError):
    """Raised when the driver cannot act on the node yet (animating, loading)."""

    kind = ErrorKind.NOT_READY


class ElementNotFoundError(DriverError):
    """
    Raised when a query finds nothing within its scope.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, query_description: str, scope_description: Optional[str] = None):
        self.query_description = query_description
        self.scope_description = scope_description
        msg = f"Unable to find {query_description}"
        if scope_description:
            msg += f" within {scope_description}"
        super().__init__(msg)


class NotSupportedByDriverError(DriverError):
    """Raised when the current driver does not implement an operation at all."""

    kind = ErrorKind.NOT_SUPPORTED

    def __init__(self, operation: str, driver_name: Optional[str] = None):
        self.operation = operation
        self.driver_name = driver_name
        msg = f"Operation '{operation}' is not supported"
        if driver_name:
            msg += f" by driver '{driver_name}'"
        super().__init__(msg)


class CapabilityError(DomNodeError):
    """Raised when extended arguments are passed to a binding that does not accept them."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        msg = f"The current driver does not support {operation} options"
        if message:
            msg += f": {message}"
        super().__init__(msg)


class ReadOnlyElementError(DomNodeError):
    """Raised when setting the value of a read-only element."""

    def __init__(self, element_description: str, value: object):
        self.element_description = element_description
        self.value = value
        super().__init__(
            f"Attempt to set readonly element {element_description} with value: {value}"
        )


class UnselectNotAllowedError(DomNodeError):
    """Raised when unselecting an option outside a multiple select."""
    pass


class ElementWarning(UserWarning):
    """Base category for advisory element warnings."""
    pass


class DisabledOptionWarning(ElementWarning):
    """Emitted when selecting an option that is disabled."""
    pass


class RedundantSelectionWarning(ElementWarning):
    """Emitted when selecting an option that is already selected."""
    pass
