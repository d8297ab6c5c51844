# domnode/capabilities.py
"""
@file capabilities.py
@brief Driver capability descriptors and the extended-argument probe.

Every driver binding declares up front which operations accept the extended
argument form (modifier keys and offsets for clicks, driver options for set).
The element facade consults the descriptor before dispatching an extended
call and never tries the call speculatively.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, Optional, Tuple

from .exceptions import CapabilityError

if TYPE_CHECKING:
    from .interfaces import INode


EXTENDED_OPERATIONS: FrozenSet[str] = frozenset({"click", "right_click", "double_click", "set"})

MODIFIER_KEYS: Dict[str, str] = {
    "alt": "alt",
    "control": "control",
    "ctrl": "control",
    "meta": "meta",
    "command": "meta",
    "shift": "shift",
}


def _check_operation(operation: str) -> None:
    if operation not in EXTENDED_OPERATIONS:
        raise ValueError(
            f"Unknown extended operation: {operation}. "
            f"Use one of {sorted(EXTENDED_OPERATIONS)}"
        )


@dataclass(frozen=True)
class NodeCapabilities:
    """Statically declared set of operations that take extended arguments."""
    extended: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        for operation in self.extended:
            _check_operation(operation)

    @classmethod
    def of(cls, operations: Iterable[str]) -> NodeCapabilities:
        return cls(extended=frozenset(operations))

    def supports_extended(self, operation: str) -> bool:
        _check_operation(operation)
        return operation in self.extended


MINIMAL = NodeCapabilities()
FULL = NodeCapabilities(extended=EXTENDED_OPERATIONS)


def supports_extended(operation: str, binding: INode) -> bool:
    """Report whether the binding accepts the extended form of operation."""
    return binding.capabilities().supports_extended(operation)


def verify_extended_support(operation: str, binding: INode) -> None:
    """
    @throws CapabilityError if the binding only takes the minimal form
    """
    if not supports_extended(operation, binding):
        raise CapabilityError(operation)


def normalize_click_arguments(
    keys: Iterable[str],
    x: Optional[float] = None,
    y: Optional[float] = None,
) -> Tuple[Tuple[str, ...], Dict[str, Any]]:
    """
    Validate click modifiers and offset.

    @return (modifier keys, offset dict); both empty means a plain click
    @throws ValueError for unknown modifiers or a half-specified offset
    """
    modifiers = []
    for key in keys:
        name = str(key).lower()
        if name not in MODIFIER_KEYS:
            raise ValueError(f"Unknown modifier key: {key}. Use one of {sorted(MODIFIER_KEYS)}")
        canonical = MODIFIER_KEYS[name]
        if canonical not in modifiers:
            modifiers.append(canonical)

    if (x is None) != (y is None):
        raise ValueError("Click offset needs both x and y")

    offset: Dict[str, Any] = {}
    if x is not None:
        offset = {"x": x, "y": y}
    return tuple(modifiers), offset
