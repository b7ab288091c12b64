"""
Driver Contracts

Abstract base classes every nick backend implements:
- BrowserDriver: one per session; starts the browser once and builds tab drivers
- TabDriver: one controllable browsing context handed back by a BrowserDriver

Nick guarantees initialize_once() runs at most once per session no matter how
many callers race on it, and only calls create_tab_driver() after it succeeded,
so drivers need no re-entrancy guard of their own.
"""

from abc import ABC, abstractmethod
from typing import NoReturn

from ..options import NickOptions


class TabDriver(ABC):
    """Backend handle to a single tab."""

    def __init__(self, tab_id: int, options: NickOptions):
        """
        Initialize tab driver.

        Args:
            tab_id: Session-unique id, used for log correlation only
            options: Normalized session options
        """
        self._tab_id = tab_id
        self._options = options

    @property
    def tab_id(self) -> int:
        return self._tab_id

    @property
    def options(self) -> NickOptions:
        return self._options

    @abstractmethod
    async def close(self) -> None:
        """Close the browsing context behind this tab."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} tab_id={self._tab_id}>"


class BrowserDriver(ABC):
    """Backend handle to the browser process shared by a session's tabs."""

    def __init__(self, options: NickOptions):
        """
        Initialize browser driver.

        No I/O happens here; the browser starts in initialize_once().

        Args:
            options: Normalized session options (already a private copy)
        """
        self._options = options

    @property
    def options(self) -> NickOptions:
        return self._options

    @abstractmethod
    def terminate(self, code: int) -> NoReturn:
        """End the whole host process with the given exit status."""

    @abstractmethod
    async def initialize_once(self) -> None:
        """
        Start or attach to the browser.

        Raises:
            Exception: Any backend-specific startup failure
        """

    @abstractmethod
    async def create_tab_driver(self, tab_id: int) -> TabDriver:
        """
        Open a new tab.

        Args:
            tab_id: Strictly increasing id assigned by the session

        Returns:
            TabDriver bound to this browser

        Raises:
            Exception: Any backend-specific tab creation failure
        """
