"""
Unobserved Failure Supervisor

An async failure nobody awaits (a task or future whose exception is never
retrieved) must not disappear into a log line. The supervisor installs an
event loop exception handler that records such failures, prints them and
escalates them to the top-level coroutine as UnobservedFailure.

Usage:
    >>> async def main():
    ...     nick = Nick()
    ...     tab = await nick.new_tab()
    ...
    >>> nick.run(main())
"""

import asyncio
from collections.abc import Awaitable
from typing import Any, Callable, Optional, TypeVar

from .config import get_logger
from .errors import UnobservedFailure
from .tui import print_unobserved_failure

logger = get_logger(__name__)

T = TypeVar("T")

ExceptionHandler = Callable[[asyncio.AbstractEventLoop, dict[str, Any]], Any]


class FailureSupervisor:
    """
    Event loop exception handler that treats unobserved failures as fatal.

    Contexts without an exception (slow callback warnings, pending task
    destroyed...) are passed on to the previously installed handler.
    """

    def __init__(self, on_failure: Optional[Callable[[BaseException], None]] = None):
        """
        Initialize supervisor.

        Args:
            on_failure: Called with each recorded failure (e.g., to cancel
                the main task)
        """
        self._on_failure = on_failure
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_handler: Optional[ExceptionHandler] = None
        self._failures: list[BaseException] = []

    @property
    def failures(self) -> tuple[BaseException, ...]:
        return tuple(self._failures)

    @property
    def installed(self) -> bool:
        return self._loop is not None

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Install on a loop (the running loop if None).

        Raises:
            RuntimeError: If already installed
        """
        if self._loop is not None:
            raise RuntimeError("FailureSupervisor is already installed")

        loop = loop or asyncio.get_running_loop()
        self._previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._handle)
        self._loop = loop

    def uninstall(self) -> None:
        """Restore the loop's previous exception handler."""
        if self._loop is None:
            return
        self._loop.set_exception_handler(self._previous_handler)
        self._loop = None
        self._previous_handler = None

    def raise_if_failed(self) -> None:
        """
        Raises:
            UnobservedFailure: Chained from the first recorded failure
        """
        if self._failures:
            first = self._failures[0]
            raise UnobservedFailure(f"unobserved async failure: {first!r}") from first

    def _handle(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        error = context.get("exception")
        if error is None:
            if self._previous_handler is not None:
                self._previous_handler(loop, context)
            else:
                loop.default_exception_handler(context)
            return

        message = context.get("message") or "Unhandled exception in event loop"
        logger.critical(f"Unobserved async failure: {message}", exc_info=error)
        print_unobserved_failure(message, error)

        self._failures.append(error)
        if self._on_failure is not None:
            self._on_failure(error)


async def supervise(main: Awaitable[T]) -> T:
    """
    Await main with a FailureSupervisor installed on the running loop.

    The first unobserved failure cancels main and is re-raised as
    UnobservedFailure.
    """
    main_task = asyncio.current_task()

    def cancel_main(error: BaseException) -> None:
        if main_task is not None:
            main_task.cancel()

    supervisor = FailureSupervisor(on_failure=cancel_main)
    supervisor.install()
    try:
        result = await main
    except asyncio.CancelledError:
        supervisor.raise_if_failed()
        raise
    finally:
        supervisor.uninstall()

    supervisor.raise_if_failed()
    return result


def run(main: Awaitable[T], *, debug: Optional[bool] = None) -> T:
    """
    Run a coroutine like asyncio.run(), with unobserved failures made fatal.

    Args:
        main: Top-level coroutine
        debug: Event loop debug mode

    Returns:
        Whatever main returns

    Raises:
        UnobservedFailure: If an async failure was never awaited
    """
    return asyncio.run(supervise(main), debug=debug)
