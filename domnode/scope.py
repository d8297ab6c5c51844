# domnode/scope.py
"""
@file scope.py
@brief Shared find() behaviour for the document and element scopes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import RETRYABLE_KINDS, ElementNotFoundError, TimeoutError
from .interfaces import IQueryScope
from .query import Query
from .waits import wait_until_passes

if TYPE_CHECKING:
    from .element import Element
    from .session import Session


class Scope(IQueryScope):
    """
    Base for query scopes. Subclasses provide first(), session and description.
    """

    session: Session

    @property
    def description(self) -> str:
        return "scope"

    def _before_retry(self, error: BaseException) -> None:
        """Hook run between find attempts; element scopes reload here."""

    def find(self, selector: str, locator: Any, **options: Any) -> Element:
        """
        Find the first element matching the query, waiting for it to appear.

        The returned handle is reloadable.

        @throws ElementNotFoundError if nothing matches before the find timeout
        """
        query = Query.create(selector, locator, **options)
        session = self.session

        def attempt() -> Element:
            element = self.first(selector, locator, **options)
            if element is None:
                raise ElementNotFoundError(query.description, self.description)
            return element

        if session.synchronized:
            return attempt().allow_reload()

        settings = session.time_config.find
        timeout = settings.timeout if session.driver.needs_waiting else 0.0
        session.synchronized = True
        try:
            element = wait_until_passes(
                attempt,
                timeout=timeout,
                interval=settings.interval,
                description=f"find {query.description}",
                stage="find",
                retry_if=lambda e: session.error_kind(e) in RETRYABLE_KINDS,
                before_retry=self._before_retry,
            )
        except TimeoutError as e:
            if isinstance(e.original_exception, ElementNotFoundError):
                raise ElementNotFoundError(query.description, self.description) from e
            raise
        finally:
            session.synchronized = False
        return element.allow_reload()
