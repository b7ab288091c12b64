"""
Rich TUI Interface Module

Terminal output for browser events, using the Rich library.

Components:
- NickConsole: Console wrapper with themed output
- TUIConfig: Configuration for colors and display options
- Event printers used by drivers for the print* options
"""

from nick.tui.console import (
    BlockType,
    NickConsole,
    TUIConfig,
    create_console,
    get_console,
    set_console,
)
from nick.tui.events import (
    print_abort,
    print_navigation,
    print_page_error,
    print_resource_error,
    print_unobserved_failure,
)

__all__ = [
    # Console infrastructure
    "BlockType",
    "NickConsole",
    "TUIConfig",
    "create_console",
    "get_console",
    "set_console",
    # Event blocks
    "print_abort",
    "print_navigation",
    "print_page_error",
    "print_resource_error",
    "print_unobserved_failure",
]
