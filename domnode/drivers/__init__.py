"""Driver backends shipped with domnode."""

from .memory import Key, MemoryDriver, MemoryElement, MemoryNode, NodeCall

__all__ = ["Key", "MemoryDriver", "MemoryElement", "MemoryNode", "NodeCall"]
