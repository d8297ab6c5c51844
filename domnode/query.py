# domnode/query.py

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Query:
    """
    Immutable description of how an element was looked up.

    Captured when a handle is created and replayed by Element.reload.
    """
    selector: str
    locator: Any
    options: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def create(cls, selector: str, locator: Any, **options: Any) -> "Query":
        return cls(selector=selector, locator=locator, options=tuple(sorted(options.items())))

    def as_kwargs(self) -> Dict[str, Any]:
        return dict(self.options)

    def option(self, name: str, default: Any = None) -> Any:
        return self.as_kwargs().get(name, default)

    @property
    def description(self) -> str:
        text = f"{self.selector} {self.locator!r}"
        if self.options:
            opts = ", ".join(f"{k}={v!r}" for k, v in self.options)
            text += f" ({opts})"
        return text
