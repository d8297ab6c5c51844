# domnode/session.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional

from .config import TimeConfig
from .document import Document
from .element import Element
from .exceptions import ErrorKind
from .interfaces import IDriver
from .options import SessionOptions, load_options


class Session:
    """
    Owns the driver, the session options and the timing snapshot used by
    every element handle found through it.

    Handles are not thread-safe: a session and its handles belong to one
    logical flow at a time.
    """

    def __init__(
        self,
        driver: IDriver,
        options: Optional[SessionOptions] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.driver = driver
        self.options = options or SessionOptions()
        self.time_config: TimeConfig = self.options.build_time_config()
        self.log = logger or logging.getLogger("domnode")
        # True while a synchronize/find loop is running; nested calls run once.
        self.synchronized = False
        self.document = Document(self)
        self.log.debug(
            "Session on driver %s (preset=%s, synchronize=%ss)",
            driver.name, self.options.preset, self.time_config.synchronize.timeout,
        )

    @classmethod
    def from_options_file(cls, driver: IDriver, path: str) -> Session:
        """Create a session with options loaded from a YAML file."""
        return cls(driver, load_options(path))

    def error_kind(self, error: BaseException) -> ErrorKind:
        return self.driver.error_kind(error)

    @contextmanager
    def using_wait_time(self, seconds: float) -> Generator[TimeConfig, None, None]:
        """Temporarily change the synchronize and find deadlines."""
        previous = self.time_config
        self.time_config = previous.with_overrides({
            "synchronize": {"timeout": seconds},
            "find": {"timeout": seconds},
        })
        try:
            yield self.time_config
        finally:
            self.time_config = previous

    def find(self, selector: str, locator: Any, **options: Any) -> Element:
        return self.document.find(selector, locator, **options)

    def first(self, selector: str, locator: Any, **options: Any) -> Optional[Element]:
        return self.document.first(selector, locator, **options)

    def reset(self) -> None:
        self.log.info("Resetting driver %s", self.driver.name)
        self.driver.reset()
