"""
Shared fixtures: an in-memory signup form and fast sessions over it.
"""

import pytest

from domnode import MINIMAL, Session, SessionOptions
from domnode.actionlogger import ACTION_LOGGER
from domnode.context import ActionContextManager
from domnode.drivers import MemoryDriver, MemoryElement
from domnode.timinglogger import TIMING_LOGGER

FAST_TIMINGS = {
    "synchronize": {"timeout": 0.3, "interval": 0.01},
    "find": {"timeout": 0.3, "interval": 0.01},
}


def build_form():
    return MemoryElement("form", id="signup", children=[
        MemoryElement("input", id="name", name="name", type="text"),
        MemoryElement("input", id="locked", type="text", value="fixed", readonly=True),
        MemoryElement("input", id="agree", name="agree", type="checkbox"),
        MemoryElement("select", id="color", name="color", children=[
            MemoryElement("option", "Red", value="red"),
            MemoryElement("option", "Green", value="green", selected=True),
            MemoryElement("option", "Blue", value="blue", disabled=True),
        ]),
        MemoryElement("select", id="tags", name="tags", multiple=True, children=[
            MemoryElement("option", "Alpha", value="a", selected=True),
            MemoryElement("option", "Beta", value="b"),
        ]),
        MemoryElement("p", "Visible text", id="intro", children=[
            MemoryElement("span", "secret", hidden=True),
        ]),
        MemoryElement("button", "Submit", id="submit"),
        MemoryElement("div", "Drop here", id="target"),
    ])


def make_session(driver, **options):
    options.setdefault("timings", FAST_TIMINGS)
    return Session(driver, SessionOptions(**options))


@pytest.fixture
def form_factory():
    return build_form


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def driver():
    return MemoryDriver().load(build_form())


@pytest.fixture
def minimal_driver():
    return MemoryDriver(extended=MINIMAL).load(build_form())


@pytest.fixture
def session(driver):
    return make_session(driver)


@pytest.fixture
def minimal_session(minimal_driver):
    return make_session(minimal_driver)


@pytest.fixture(autouse=True)
def _reset_global_state():
    yield
    ActionContextManager.clear()
    ACTION_LOGGER.disable()
    TIMING_LOGGER.disable()
