"""
Nick Session

The facade over a browser backend. Owns the normalized options, the one
BrowserDriver of the session, and the lifecycle state that guarantees the
driver starts exactly once however many callers race on it.

Usage:
    >>> nick = Nick({"timeout": 5000, "whitelist": ["example.com"]})
    >>> tab = await nick.new_tab()   # starts the browser on first use
    >>> nick.exit()
"""

import asyncio
from typing import Any, NoReturn, Optional

from .config import enable_debug_logging, get_logger
from .drivers.base import BrowserDriver
from .environment import Environment, create_driver, detect_environment
from .errors import InitializationFailed, NickError
from .options import NickOptions, normalize_options
from .tab import Tab

logger = get_logger(__name__)


class Nick:
    """
    Browser session facade.

    State machine: uninitialized -> initializing -> initialized. A failed
    initialization falls back to uninitialized so a later call can retry.

    All concurrent initialize()/new_tab() callers share a single startup
    attempt: the first caller starts it as a task and everybody (the first
    caller included) awaits that task through asyncio.shield(), so a caller
    being cancelled never cancels the startup for the others.
    """

    def __init__(
        self,
        options: Any = None,
        *,
        environment: Optional[Environment] = None,
    ):
        """
        Initialize the session.

        Args:
            options: Raw options mapping (see NickOptions), or None for defaults
            environment: Host description; detect_environment() if None

        Raises:
            InvalidConfiguration: If an option is malformed
            UnsupportedEnvironment: If no backend serves the environment
        """
        options = normalize_options(options)
        driver = create_driver(environment or detect_environment(), options)

        self._options = options
        self._browser_driver = driver
        self._initialized = False
        self._init_task: Optional[asyncio.Task] = None
        self._init_waiters = 0
        self._tab_id_counter = 0

        if options.debug:
            enable_debug_logging()

    # Read-only members

    @property
    def driver(self) -> BrowserDriver:
        """Shorter alias of browser_driver."""
        return self._browser_driver

    @property
    def browser_driver(self) -> BrowserDriver:
        return self._browser_driver

    @property
    def options(self) -> NickOptions:
        return self._options

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_initializing(self) -> bool:
        return self._init_task is not None and not self._init_task.done()

    def exit(self, code: int = 0) -> NoReturn:
        """
        End the process through the driver.

        Args:
            code: Process exit status

        Raises:
            NickError: If the driver returned from terminate()
        """
        self._browser_driver.terminate(code)
        raise NickError(
            f"{type(self._browser_driver).__name__}.terminate() returned "
            f"instead of ending the process"
        )

    async def initialize(self) -> None:
        """
        Start the browser driver if it is not started yet.

        Called automatically by new_tab(); call it directly only when the
        browser should be up before any tab is opened.

        Raises:
            InitializationFailed: If the driver failed to start, for the
                caller that started the attempt and every caller that joined it
        """
        if self._initialized:
            return

        task = self._init_task
        if task is None or task.done():
            logger.debug("Initializing browser driver")
            task = self._init_task = asyncio.ensure_future(self._initialize_driver())
            task.add_done_callback(self._report_abandoned_failure)
        else:
            logger.debug("Browser initialization in progress, waiting for it")

        self._init_waiters += 1
        try:
            await asyncio.shield(task)
        finally:
            self._init_waiters -= 1

    def _report_abandoned_failure(self, task: asyncio.Task) -> None:
        """
        Hand a startup failure nobody is waiting for to the loop's exception
        handler, where FailureSupervisor turns it into an UnobservedFailure.
        """
        if task.cancelled():
            return
        error = task.exception()
        if error is None or self._init_waiters:
            return
        task.get_loop().call_exception_handler(
            {
                "message": "Browser initialization failed with no caller awaiting it",
                "exception": error,
                "task": task,
            }
        )

    async def _initialize_driver(self) -> None:
        try:
            await self._browser_driver.initialize_once()
        except InitializationFailed as e:
            logger.error(f"Browser initialization failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Browser initialization failed: {e}")
            raise InitializationFailed(f"browser initialization failed: {e}") from e

        self._initialized = True
        logger.debug("Browser driver initialized")

    async def new_tab(self) -> Tab:
        """
        Open a new tab, starting the browser first if needed.

        Returns:
            Tab wrapping the driver's new TabDriver

        Raises:
            InitializationFailed: If the browser could not be started
            Exception: Whatever the driver raised while creating the tab
        """
        await self.initialize()

        self._tab_id_counter += 1
        tab_id = self._tab_id_counter
        logger.debug(f"Opening tab #{tab_id}")

        tab_driver = await self._browser_driver.create_tab_driver(tab_id)
        return Tab(self, tab_driver)

    def __repr__(self) -> str:
        if self._initialized:
            state = "initialized"
        elif self.is_initializing:
            state = "initializing"
        else:
            state = "uninitialized"
        return f"<Nick driver={type(self._browser_driver).__name__} state={state}>"
