# domnode/context.py
"""
@file context.py
@brief Per-thread stack of running element actions.

Facade methods decorated with @tracked_action push an ActionContext while they
run. Nested actions (set() checking is_readonly() first, select_option()
reading the option label) stack on top of their caller, so retry loops and
log events can name what is going on.
"""

from __future__ import annotations
import functools
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Generator, List, Optional, TypeVar
from uuid import uuid4

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class ActionContext:
    """One running action on one element."""
    action_name: str
    element_name: Optional[str] = None
    action_id: str = field(default_factory=lambda: uuid4().hex[:8])
    started: float = field(default_factory=time.monotonic)
    parent: Optional[ActionContext] = None

    @property
    def description(self) -> str:
        if self.element_name:
            return f"{self.action_name} on {self.element_name}"
        return self.action_name

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)

    def trace(self) -> List[str]:
        """Descriptions from this action out to the outermost one."""
        chain = []
        ctx: Optional[ActionContext] = self
        while ctx is not None:
            chain.append(ctx.description)
            ctx = ctx.parent
        return chain


class ActionContextManager:
    """Thread-local action stack."""

    _local = threading.local()

    @classmethod
    def _stack(cls) -> List[ActionContext]:
        if not hasattr(cls._local, "stack"):
            cls._local.stack = []
        return cls._local.stack

    @classmethod
    def current(cls) -> Optional[ActionContext]:
        stack = cls._stack()
        return stack[-1] if stack else None

    @classmethod
    @contextmanager
    def action(cls, action_name: str, element_name: Optional[str] = None) -> Generator[ActionContext, None, None]:
        """Run a block as an action nested in the current one, if any."""
        stack = cls._stack()
        context = ActionContext(action_name, element_name, parent=stack[-1] if stack else None)
        stack.append(context)
        try:
            yield context
        finally:
            stack.pop()

    @classmethod
    def get_current_description(cls) -> str:
        """Description of the innermost action, "operation" outside any."""
        current = cls.current()
        return current.description if current else "operation"

    @classmethod
    def clear(cls) -> None:
        cls._local.stack = []


def tracked_action(action_name: Optional[str] = None) -> Callable[[F], F]:
    """
    Decorator tracking an Element method as an action.

    The element is named by its ``description``; keyword arguments go to the
    action_finish event as metadata, plus the action trace when the call fails
    inside another action.
    """
    def decorator(func: F) -> F:
        name = action_name or func.__name__

        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            from .actionlogger import ACTION_LOGGER

            element_name = getattr(self, "description", None)
            with ActionContextManager.action(name, element_name) as context:
                try:
                    result = func(self, *args, **kwargs)
                except Exception as exc:
                    metadata = dict(kwargs)
                    if context.parent is not None:
                        metadata["trace"] = " <- ".join(context.trace())
                    ACTION_LOGGER.log(
                        action=name,
                        element=element_name,
                        status="error",
                        duration_ms=context.elapsed_ms,
                        metadata=metadata,
                        exception=exc,
                        action_id=context.action_id,
                        phase="execute",
                        event="action_finish",
                    )
                    raise
                ACTION_LOGGER.log(
                    action=name,
                    element=element_name,
                    status="ok",
                    duration_ms=context.elapsed_ms,
                    metadata=kwargs,
                    action_id=context.action_id,
                    phase="execute",
                    event="action_finish",
                )
                return result

        return wrapper  # type: ignore[return-value]

    return decorator
