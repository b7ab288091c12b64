"""
Tab Handle

Caller-facing wrapper pairing a TabDriver with the Nick session that
created it. Returned by Nick.new_tab().
"""

from typing import TYPE_CHECKING

from .drivers.base import TabDriver

if TYPE_CHECKING:
    from .session import Nick


class Tab:
    """A tab opened in a Nick session."""

    def __init__(self, nick: "Nick", driver: TabDriver):
        self._nick = nick
        self._driver = driver

    @property
    def nick(self) -> "Nick":
        return self._nick

    @property
    def driver(self) -> TabDriver:
        return self._driver

    @property
    def id(self) -> int:
        return self._driver.tab_id

    async def close(self) -> None:
        """Close the tab's browsing context."""
        await self._driver.close()

    def __repr__(self) -> str:
        return f"<Tab id={self.id}>"
