# domnode/document.py
"""
@file document.py
@brief Root query scope of a session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .element import Element
from .query import Query
from .scope import Scope

if TYPE_CHECKING:
    from .session import Session


class Document(Scope):
    """The whole page; resolves queries through the session's driver."""

    def __init__(self, session: Session):
        self.session = session

    @property
    def description(self) -> str:
        return "document"

    def reload(self) -> Document:
        return self

    def first(self, selector: str, locator: Any, **options: Any) -> Optional[Element]:
        query = Query.create(selector, locator, **options)
        node = self.session.driver.find_first(query)
        if node is None:
            return None
        return Element(self.session, node, self, query)

    def __repr__(self) -> str:
        return f"<domnode.Document driver={self.session.driver.name!r}>"
