"""
Configuration and Logging Setup

Provides centralized logging and environment configuration for nick.
Reads LOG_LEVEL and NICK_* variables from the environment (and .env).

Usage:
    from nick.config import configure_logging, get_logger

    # Configure at application startup
    configure_logging()

    # Get logger in any module
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import InvalidConfiguration

# Load environment variables
load_dotenv()

# Default configuration
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s: %(message)s"

ENV_PREFIX = "NICK_"

# Valid log levels
VALID_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Raw option key -> (environment suffix, kind)
_ENV_OPTIONS = {
    "debug": ("DEBUG", "bool"),
    "loadImages": ("LOAD_IMAGES", "bool"),
    "userAgent": ("USER_AGENT", "str"),
    "timeout": ("TIMEOUT", "number"),
    "width": ("WIDTH", "number"),
    "height": ("HEIGHT", "number"),
    "printNavigation": ("PRINT_NAVIGATION", "bool"),
    "printPageErrors": ("PRINT_PAGE_ERRORS", "bool"),
    "printResourceErrors": ("PRINT_RESOURCE_ERRORS", "bool"),
    "printAborts": ("PRINT_ABORTS", "bool"),
    "whitelist": ("WHITELIST", "list"),
    "blacklist": ("BLACKLIST", "list"),
}


def get_log_level() -> int:
    """
    Get the log level from LOG_LEVEL environment variable.

    Returns:
        Logging level constant (e.g., logging.INFO)

    Supported values:
        DEBUG, INFO, WARNING, ERROR, CRITICAL
    """
    level_str = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    if level_str not in VALID_LEVELS:
        # Warn about invalid level and use default
        print(
            f"Warning: Invalid LOG_LEVEL '{level_str}'. "
            f"Valid values: {', '.join(VALID_LEVELS.keys())}. "
            f"Using {DEFAULT_LOG_LEVEL}.",
            file=sys.stderr,
        )
        return VALID_LEVELS[DEFAULT_LOG_LEVEL]

    return VALID_LEVELS[level_str]


def configure_logging(
    level: Optional[int] = None,
    verbose: bool = False,
) -> None:
    """
    Configure logging for nick.

    Should be called once at application startup, before other modules
    import their loggers.

    Args:
        level: Override log level (default: from LOG_LEVEL env var)
        verbose: Use detailed format with timestamps (default: simple format)

    Environment Variables:
        LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL
    """
    if level is None:
        level = get_log_level()

    log_format = LOG_FORMAT if verbose else LOG_FORMAT_SIMPLE

    logging.basicConfig(
        level=level,
        format=log_format,
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger("nick").setLevel(level)

    # Quiet noisy third-party loggers in non-debug mode
    if level > logging.DEBUG:
        logging.getLogger("playwright").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def enable_debug_logging() -> None:
    """Lower the nick logger to DEBUG (used by sessions created with debug=True)."""
    logging.getLogger("nick").setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def _parse_env_value(key: str, env_name: str, kind: str, value: str) -> Any:
    if kind == "bool":
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
        raise InvalidConfiguration(
            f"{env_name} must be a boolean (true/false), got {value!r}", field=key
        )
    if kind == "number":
        try:
            number = float(value)
        except ValueError:
            raise InvalidConfiguration(
                f"{env_name} must be a number, got {value!r}", field=key
            ) from None
        return int(number) if number.is_integer() else number
    if kind == "list":
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def options_from_env(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Build a raw options mapping from environment variables.

    Only variables that are set produce keys, so absent variables fall back
    to the normalizer's defaults (and NICK_LOAD_IMAGES stays unset).

    Environment variables:
        NICK_DEBUG, NICK_LOAD_IMAGES, NICK_PRINT_*: true/false
        NICK_USER_AGENT: string
        NICK_TIMEOUT, NICK_WIDTH, NICK_HEIGHT: numbers
        NICK_WHITELIST, NICK_BLACKLIST: comma separated strings

    Returns:
        Raw options dict suitable for normalize_options()
    """
    raw: dict[str, Any] = {}
    for key, (suffix, kind) in _ENV_OPTIONS.items():
        env_name = f"{prefix}{suffix}"
        value = os.getenv(env_name)
        if value is None:
            continue
        raw[key] = _parse_env_value(key, env_name, kind, value)
    return raw
