"""
Rich TUI Console Setup

Provides the console used for browser event output (navigation, page
errors, failed resources, aborted requests). Configured via environment
variables for customizable appearance.
"""

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.theme import Theme


# Block types for browser event output
BlockType = Literal["navigation", "error", "abort"]


@dataclass
class TUIConfig:
    """
    TUI configuration loaded from environment variables.

    Attributes:
        color_navigation: Color for NAVIGATION blocks
        color_error: Color for page/resource ERROR blocks
        color_abort: Color for ABORT blocks (filtered requests)
        show_timestamps: Whether to display timestamps
    """

    color_navigation: str = "green"
    color_error: str = "red"
    color_abort: str = "yellow"
    show_timestamps: bool = True

    @classmethod
    def from_env(cls) -> "TUIConfig":
        """Load configuration from environment variables."""
        return cls(
            color_navigation=os.getenv("NICK_COLOR_NAVIGATION", "green"),
            color_error=os.getenv("NICK_COLOR_ERROR", "red"),
            color_abort=os.getenv("NICK_COLOR_ABORT", "yellow"),
            show_timestamps=os.getenv("NICK_SHOW_TIMESTAMPS", "true").lower() == "true",
        )


def create_theme(config: TUIConfig) -> Theme:
    """Create a Rich theme from TUI configuration."""
    return Theme(
        {
            "navigation": Style(color=config.color_navigation, bold=True),
            "error": Style(color=config.color_error, bold=True),
            "abort": Style(color=config.color_abort, bold=True),
            "timestamp": Style(dim=True),
            "label": Style(bold=True),
        }
    )


class NickConsole:
    """
    Rich console wrapper for browser event output.

    Writes to stderr so scripts can keep stdout for their own results.
    """

    def __init__(self, config: Optional[TUIConfig] = None, console: Optional[Console] = None):
        """
        Initialize the console.

        Args:
            config: TUI configuration. If None, loads from environment.
            console: Rich console to write to (defaults to stderr)
        """
        self.config = config or TUIConfig.from_env()
        self._theme = create_theme(self.config)
        self.console = console or Console(theme=self._theme, file=sys.stderr)

    def _get_timestamp(self) -> str:
        """Get formatted timestamp if enabled."""
        if self.config.show_timestamps:
            return datetime.now().strftime("%H:%M:%S")
        return ""

    def _get_block_style(self, block_type: BlockType) -> tuple[str, str]:
        """Get the style and label for a block type."""
        styles = {
            "navigation": (self.config.color_navigation, "NAVIGATION"),
            "error": (self.config.color_error, "ERROR"),
            "abort": (self.config.color_abort, "ABORT"),
        }
        return styles[block_type]

    def print_block(
        self,
        content,
        block_type: BlockType,
        title: Optional[str] = None,
    ) -> None:
        """
        Print a styled block to the console.

        Args:
            content: Text or renderable to display
            block_type: Type of block (navigation, error, abort)
            title: Optional title to override default label
        """
        color, label = self._get_block_style(block_type)
        block_title = title or f"[{label}]"

        timestamp = self._get_timestamp()
        if timestamp:
            block_title = f"{timestamp} {block_title}"

        panel = Panel(
            content,
            title=block_title,
            title_align="left",
            border_style=color,
            padding=(0, 1),
        )
        self.console.print(panel)

    def print(self, *args, **kwargs) -> None:
        """Passthrough to underlying Rich console."""
        self.console.print(*args, **kwargs)


# Global console instance
_console: Optional[NickConsole] = None


def get_console() -> NickConsole:
    """Get or create the global console instance."""
    global _console
    if _console is None:
        _console = create_console()
    return _console


def set_console(console: Optional[NickConsole]) -> None:
    """Replace the global console (None resets to a fresh default)."""
    global _console
    _console = console


def create_console(config: Optional[TUIConfig] = None) -> NickConsole:
    """
    Create a new console instance with optional configuration.

    Args:
        config: TUI configuration. If None, loads from environment.
    """
    return NickConsole(config)
