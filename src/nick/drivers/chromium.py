"""
Chromium Driver

Playwright-backed implementation of the driver contracts. Drives Chromium
over its remote debugging protocol; each tab gets its own browser context
so viewport, user agent and request filtering are per tab.
"""

import os
import sys
from typing import NoReturn, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Frame,
    Page,
    Playwright,
    Request,
    Route,
    async_playwright,
)

from ..config import get_logger
from ..filtering import is_url_allowed
from ..options import NickOptions
from ..tui import (
    NickConsole,
    print_abort,
    print_navigation,
    print_page_error,
    print_resource_error,
)
from .base import BrowserDriver, TabDriver

logger = get_logger(__name__)

# Failure text Chromium reports for requests aborted by our route handler
BLOCKED_BY_CLIENT = "net::ERR_BLOCKED_BY_CLIENT"


class ChromiumTabDriver(TabDriver):
    """One Chromium tab: a browser context holding a single page."""

    def __init__(
        self,
        tab_id: int,
        options: NickOptions,
        context: BrowserContext,
        page: Page,
    ):
        super().__init__(tab_id, options)
        self._context = context
        self._page = page

    @property
    def context(self) -> BrowserContext:
        return self._context

    @property
    def page(self) -> Page:
        return self._page

    async def close(self) -> None:
        """Close the tab's context (and its page)."""
        await self._context.close()


class ChromiumBrowserDriver(BrowserDriver):
    """
    Controls a Chromium instance through Playwright.

    Provides:
    - Headless launch, with images disabled only when loadImages is False
    - Per-tab contexts sized and identified from the session options
    - Whitelist/blacklist request filtering
    - Navigation/page error/resource error/abort output per the print options
    """

    def __init__(
        self,
        options: NickOptions,
        *,
        headless: bool = True,
        console: Optional[NickConsole] = None,
    ):
        """
        Initialize Chromium driver.

        Args:
            options: Normalized session options
            headless: Launch without a visible window
            console: Console for event output (defaults to global console)
        """
        super().__init__(options)
        self._headless = headless
        self._console = console

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    def terminate(self, code: int) -> NoReturn:
        logger.debug(f"Exiting with code {code}")
        sys.stdout.flush()
        sys.stderr.flush()
        os._exit(code)

    def launch_args(self) -> list[str]:
        """Chromium command line flags derived from the options."""
        args = []
        # An unset loadImages keeps Chromium's own default
        if self._options.load_images is False:
            args.append("--blink-settings=imagesEnabled=false")
        return args

    async def initialize_once(self) -> None:
        """Start Playwright and launch Chromium."""
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self._headless,
                args=self.launch_args(),
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

        logger.debug(f"Chromium {self._browser.version} launched")

    async def shutdown(self) -> None:
        """Close Chromium and stop Playwright without ending the process."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def create_tab_driver(self, tab_id: int) -> ChromiumTabDriver:
        """
        Open a new context and page for a tab.

        Args:
            tab_id: Session-assigned tab id

        Returns:
            ChromiumTabDriver for the new page
        """
        if self._browser is None:
            raise RuntimeError("Chromium not initialized")

        options = self._options
        context = await self._browser.new_context(
            viewport={"width": int(options.width), "height": int(options.height)},
            user_agent=options.user_agent,
        )
        context.set_default_timeout(options.timeout)
        context.set_default_navigation_timeout(options.timeout)

        if options.whitelist or options.blacklist:
            await context.route("**/*", self._make_route_filter(tab_id))

        page = await context.new_page()
        self._attach_listeners(page, tab_id)

        logger.debug(f"Tab #{tab_id} opened")
        return ChromiumTabDriver(tab_id, options, context, page)

    def _make_route_filter(self, tab_id: int):
        options = self._options

        async def filter_route(route: Route) -> None:
            url = route.request.url
            if is_url_allowed(url, options.whitelist, options.blacklist):
                await route.continue_()
                return

            logger.debug(f"[tab #{tab_id}] aborted {url}")
            if options.print_aborts:
                print_abort(url, tab_id=tab_id, console=self._console)
            await route.abort("blockedbyclient")

        return filter_route

    def _attach_listeners(self, page: Page, tab_id: int) -> None:
        options = self._options

        def on_navigation(frame: Frame) -> None:
            if frame.parent_frame is not None:
                return
            logger.debug(f"[tab #{tab_id}] navigated to {frame.url}")
            if options.print_navigation:
                print_navigation(frame.url, tab_id=tab_id, console=self._console)

        def on_page_error(error) -> None:
            logger.debug(f"[tab #{tab_id}] page error: {error}")
            if options.print_page_errors:
                print_page_error(str(error), tab_id=tab_id, console=self._console)

        def on_request_failed(request: Request) -> None:
            failure = request.failure
            # Our own aborts are reported by the route filter
            if failure == BLOCKED_BY_CLIENT:
                return
            logger.debug(f"[tab #{tab_id}] resource failed: {request.url} ({failure})")
            if options.print_resource_errors:
                print_resource_error(
                    request.url, failure, tab_id=tab_id, console=self._console
                )

        page.on("framenavigated", on_navigation)
        page.on("pageerror", on_page_error)
        page.on("requestfailed", on_request_failed)
