"""
domnode - stable element handles over volatile remote UI nodes.

This package provides:
- Element: handle with retry (synchronize), stale reference recovery
  (reload) and capability-checked actions
- Session / Document: options, timings and the root query scope
- Capabilities: per-driver descriptors of extended argument support
- Drivers: an in-memory document driver for tests and simulations
"""

from .capabilities import FULL, MINIMAL, NodeCapabilities, supports_extended
from .config import TimeConfig, TimeoutSettings
from .document import Document
from .element import Element
from .exceptions import (CapabilityError, ConfigError, DisabledOptionWarning,
                         DomNodeError, DriverError, ElementNotFoundError,
                         ElementNotReadyError, ElementWarning, ErrorKind,
                         NotSupportedByDriverError, ObsoleteElementError,
                         ReadOnlyElementError, RedundantSelectionWarning,
                         StaleElementError, TimeoutError,
                         UnselectNotAllowedError)
from .interfaces import IDriver, INode, IQueryScope
from .options import SessionOptions, load_options
from .query import Query
from .session import Session

__all__ = [
    "FULL",
    "MINIMAL",
    "NodeCapabilities",
    "supports_extended",
    "TimeConfig",
    "TimeoutSettings",
    "Document",
    "Element",
    "CapabilityError",
    "ConfigError",
    "DisabledOptionWarning",
    "DomNodeError",
    "DriverError",
    "ElementNotFoundError",
    "ElementNotReadyError",
    "ElementWarning",
    "ErrorKind",
    "NotSupportedByDriverError",
    "ObsoleteElementError",
    "ReadOnlyElementError",
    "RedundantSelectionWarning",
    "StaleElementError",
    "TimeoutError",
    "UnselectNotAllowedError",
    "IDriver",
    "INode",
    "IQueryScope",
    "SessionOptions",
    "load_options",
    "Query",
    "Session",
]

__version__ = "1.0.0"
