"""
Browser event blocks.

One printer per print* option: navigation, page errors, resource errors
and aborted requests. Also the fatal block shown for unobserved async
failures.
"""

import traceback
from typing import Optional

from rich.text import Text

from .console import NickConsole, get_console


def _tab_label(tab_id: Optional[int]) -> str:
    return f"tab #{tab_id}" if tab_id is not None else "browser"


def print_navigation(
    url: str,
    *,
    tab_id: Optional[int] = None,
    console: Optional[NickConsole] = None,
) -> None:
    """
    Print a navigation block.

    Args:
        url: URL the frame navigated to
        tab_id: Tab the navigation happened in
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("🌐 ", style="bold")
    content.append(_tab_label(tab_id), style="bold green")
    content.append("\n\n")
    content.append("URL: ", style="dim")
    content.append(url, style="underline")

    console.print_block(content, "navigation")


def print_page_error(
    message: str,
    *,
    tab_id: Optional[int] = None,
    console: Optional[NickConsole] = None,
) -> None:
    """
    Print an uncaught page error (JavaScript exception inside the page).

    Args:
        message: Error message reported by the page
        tab_id: Tab the error happened in
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("Page error", style="bold red")
    content.append(f" ({_tab_label(tab_id)})", style="dim red")
    content.append("\n\n")
    content.append(message)

    console.print_block(content, "error")


def print_resource_error(
    url: str,
    reason: Optional[str] = None,
    *,
    tab_id: Optional[int] = None,
    console: Optional[NickConsole] = None,
) -> None:
    """
    Print a failed resource load.

    Args:
        url: Resource URL
        reason: Failure text reported by the browser
        tab_id: Tab the request came from
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("Resource error", style="bold red")
    content.append(f" ({_tab_label(tab_id)})", style="dim red")
    content.append("\n\n")
    content.append("URL: ", style="dim")
    content.append(url)
    if reason:
        content.append("\n")
        content.append("Reason: ", style="dim")
        content.append(reason)

    console.print_block(content, "error")


def print_abort(
    url: str,
    *,
    tab_id: Optional[int] = None,
    console: Optional[NickConsole] = None,
) -> None:
    """
    Print a request aborted by the whitelist/blacklist.

    Args:
        url: Aborted request URL
        tab_id: Tab the request came from
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("⛔ ", style="bold")
    content.append(f"Aborted ({_tab_label(tab_id)})", style="bold yellow")
    content.append("\n\n")
    content.append("URL: ", style="dim")
    content.append(url)

    console.print_block(content, "abort")


def print_unobserved_failure(
    message: str,
    error: Optional[BaseException] = None,
    *,
    console: Optional[NickConsole] = None,
) -> None:
    """
    Print the fatal block for an async failure nobody awaited.

    Args:
        message: Context message from the event loop
        error: The exception, if the loop reported one
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("Unobserved async failure", style="bold red")
    content.append("\n\n")
    content.append(message)
    if error is not None:
        content.append("\n\n")
        content.append(
            "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            style="dim",
        )

    console.print_block(content, "error", title="[FATAL]")
