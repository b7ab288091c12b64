"""
Shared fixtures: an in-memory backend registered under the "fake"
environment, and a console that records output instead of printing it.
"""

import asyncio
import io
from typing import Optional

import pytest
from rich.console import Console

from nick import BrowserDriver, Environment, Nick, TabDriver
from nick.environment import register_backend, unregister_backend
from nick.tui import NickConsole, TUIConfig, set_console


class FakeTabDriver(TabDriver):
    """Tab driver that only records whether it was closed."""

    def __init__(self, tab_id, options):
        super().__init__(tab_id, options)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


class FakeBrowserDriver(BrowserDriver):
    """
    Backend double.

    Attributes:
        init_calls: Number of initialize_once() invocations
        init_delay: Seconds initialize_once() suspends for
        init_error: Raised by initialize_once() when set
        tab_error: Raised by create_tab_driver() when set
        tab_ids: Ids passed to create_tab_driver(), in call order
        terminate_mode: "exit" (SystemExit), "raise" (RuntimeError) or "return"
    """

    def __init__(self, options):
        super().__init__(options)
        self.init_calls = 0
        self.init_delay = 0.01
        self.init_error: Optional[Exception] = None
        self.tab_error: Optional[Exception] = None
        self.tab_ids: list[int] = []
        self.exit_codes: list[int] = []
        self.terminate_mode = "exit"

    def terminate(self, code):
        self.exit_codes.append(code)
        if self.terminate_mode == "exit":
            raise SystemExit(code)
        if self.terminate_mode == "raise":
            raise RuntimeError("driver crashed while exiting")

    async def initialize_once(self) -> None:
        self.init_calls += 1
        await asyncio.sleep(self.init_delay)
        if self.init_error is not None:
            raise self.init_error

    async def create_tab_driver(self, tab_id):
        self.tab_ids.append(tab_id)
        # Let concurrent callers interleave
        await asyncio.sleep(0)
        if self.tab_error is not None:
            raise self.tab_error
        return FakeTabDriver(tab_id, self.options)


FAKE_CAPABILITY = "fake-runtime"


@pytest.fixture
def fake_environment():
    """Register the fake backend for the duration of a test."""
    register_backend("fake", FakeBrowserDriver, requires=(FAKE_CAPABILITY,))
    yield Environment("fake", frozenset({FAKE_CAPABILITY}))
    unregister_backend("fake")


@pytest.fixture
def nick(fake_environment):
    """A fresh, uninitialized session on the fake backend."""
    return Nick(environment=fake_environment)


@pytest.fixture
def recording_console():
    """Install a console writing to memory as the global console."""
    console = NickConsole(
        TUIConfig(show_timestamps=False),
        console=Console(file=io.StringIO(), width=120),
    )
    set_console(console)
    yield console
    set_console(None)


def console_output(console: NickConsole) -> str:
    return console.console.file.getvalue()


@pytest.fixture
def read_console():
    return console_output
