"""
nick - Browser Automation Session Facade

One API for opening a browser session and spawning tabs in it, whatever
backend drives the browser:
- Nick: session facade (options, lifecycle, tab creation)
- NickOptions / normalize_options: validated session options
- Environment / register_backend: backend selection
- run: asyncio.run() with unobserved async failures made fatal
"""

from .drivers.base import BrowserDriver, TabDriver
from .environment import (
    Environment,
    create_driver,
    detect_environment,
    register_backend,
    registered_backends,
    unregister_backend,
)
from .errors import (
    IncompatibleEnvironment,
    InitializationFailed,
    InvalidConfiguration,
    NickError,
    UnobservedFailure,
    UnsupportedEnvironment,
)
from .options import NickOptions, normalize_options
from .session import Nick
from .supervisor import FailureSupervisor, run, supervise
from .tab import Tab

__all__ = [
    # Session
    "Nick",
    "Tab",
    # Options
    "NickOptions",
    "normalize_options",
    # Backends
    "BrowserDriver",
    "TabDriver",
    "Environment",
    "create_driver",
    "detect_environment",
    "register_backend",
    "registered_backends",
    "unregister_backend",
    # Supervision
    "FailureSupervisor",
    "run",
    "supervise",
    # Errors
    "NickError",
    "InvalidConfiguration",
    "UnsupportedEnvironment",
    "IncompatibleEnvironment",
    "InitializationFailed",
    "UnobservedFailure",
]
