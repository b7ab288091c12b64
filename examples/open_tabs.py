#!/usr/bin/env python
"""
Open Tabs Example

Opens two tabs concurrently in one headless Chromium (the browser starts
once, on first use), loads a page in each and prints the titles.

Usage:
    python examples/open_tabs.py

Requirements:
    - pip install -e .
    - playwright install chromium
"""

import asyncio

import nick
from nick.config import configure_logging


async def main():
    """Open two tabs and read their titles."""
    session = nick.Nick(
        {
            "timeout": 15000,
            "blacklist": ["doubleclick.net"],
            "printResourceErrors": False,
        }
    )

    first, second = await asyncio.gather(session.new_tab(), session.new_tab())

    await first.driver.page.goto("https://example.com")
    await second.driver.page.goto("https://www.python.org")

    for tab in (first, second):
        print(f"Tab #{tab.id}: {await tab.driver.page.title()}")

    session.exit(0)


if __name__ == "__main__":
    configure_logging()
    nick.run(main())
