"""
Browser Drivers

Driver contracts implemented by every backend. The Playwright-backed
Chromium driver lives in nick.drivers.chromium and is imported on demand,
so nick itself imports without Playwright installed.
"""

from .base import BrowserDriver, TabDriver

__all__ = [
    "BrowserDriver",
    "TabDriver",
]
