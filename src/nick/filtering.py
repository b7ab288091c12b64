"""
URL Filtering

Applies the whitelist/blacklist options to request URLs.

String matchers are already lower-cased by the options normalizer. A string
matches a URL when the URL starts with it, or when it names the URL's host
or one of the host's parent domains. Regex matchers match via search().
"""

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from .options import UrlMatcher

# Schemes that never hit the network
ALWAYS_ALLOWED_SCHEMES = ("data", "about", "blob")


def url_matches(matcher: UrlMatcher, url: str) -> bool:
    """
    Check a single whitelist/blacklist entry against a URL.

    Args:
        matcher: Lower-cased string or compiled regex
        url: Request URL

    Returns:
        True if the entry matches
    """
    if isinstance(matcher, re.Pattern):
        return matcher.search(url) is not None

    lowered = url.lower()
    if lowered.startswith(matcher):
        return True

    host = (urlsplit(lowered).hostname or "").rstrip(".")
    return host == matcher or host.endswith("." + matcher)


def is_url_allowed(
    url: str,
    whitelist: Iterable[UrlMatcher] = (),
    blacklist: Iterable[UrlMatcher] = (),
) -> bool:
    """
    Decide whether a request may load.

    Blacklisted URLs are always refused. When the whitelist is non-empty
    a URL must match one of its entries.

    Args:
        url: Request URL
        whitelist: Entries of which at least one must match (if any)
        blacklist: Entries none of which may match

    Returns:
        True if the request should continue, False if it should be aborted
    """
    if urlsplit(url).scheme.lower() in ALWAYS_ALLOWED_SCHEMES:
        return True

    if any(url_matches(black, url) for black in blacklist):
        return False

    whitelist = tuple(whitelist)
    if whitelist:
        return any(url_matches(white, url) for white in whitelist)
    return True
