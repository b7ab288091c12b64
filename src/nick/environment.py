"""
Environment Descriptor and Backend Registry

Nick never sniffs its host. The embedding application passes an Environment
describing the runtime it resolved (or calls detect_environment()), and the
registry maps that description to a BrowserDriver factory.

Usage:
    >>> register_backend("fake", FakeBrowserDriver, requires=("fake-runtime",))
    >>> nick = Nick(environment=Environment("fake", frozenset({"fake-runtime"})))
"""

import importlib.util
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Callable

from .config import get_logger
from .drivers.base import BrowserDriver
from .errors import IncompatibleEnvironment, UnsupportedEnvironment
from .options import NickOptions

logger = get_logger(__name__)

DriverFactory = Callable[[NickOptions], BrowserDriver]

CHROMIUM_BACKEND = "chromium"
PLAYWRIGHT_CAPABILITY = "playwright"


@dataclass(frozen=True)
class Environment:
    """
    Description of the host a session runs in.

    Attributes:
        name: Backend runtime name (e.g., "chromium")
        capabilities: Tools available in that runtime (e.g., {"playwright"})
    """

    name: str
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of capability names
        if not isinstance(self.capabilities, frozenset):
            object.__setattr__(self, "capabilities", frozenset(self.capabilities))


@dataclass(frozen=True)
class BackendSpec:
    """Registered backend: how to build its driver and what it needs."""

    name: str
    factory: DriverFactory
    requires: frozenset[str] = field(default_factory=frozenset)


# Backend registry, keyed by environment name
_BACKENDS: dict[str, BackendSpec] = {}


def register_backend(
    name: str,
    factory: DriverFactory,
    requires: Iterable[str] = (),
) -> None:
    """
    Register a backend for an environment name.

    Args:
        name: Environment name the backend serves
        factory: Callable building the BrowserDriver from NickOptions
        requires: Capabilities the environment must provide
    """
    _BACKENDS[name] = BackendSpec(name=name, factory=factory, requires=frozenset(requires))


def unregister_backend(name: str) -> None:
    """Remove a backend registration (no-op if absent)."""
    _BACKENDS.pop(name, None)


def registered_backends() -> dict[str, BackendSpec]:
    """Get all registered backends."""
    return _BACKENDS.copy()


def create_driver(environment: Environment, options: NickOptions) -> BrowserDriver:
    """
    Build the BrowserDriver serving an environment.

    Args:
        environment: Host description
        options: Normalized session options

    Returns:
        Driver instance (not yet initialized)

    Raises:
        IncompatibleEnvironment: Runtime recognized but a required capability is missing
        UnsupportedEnvironment: No backend registered for the runtime
    """
    spec = _BACKENDS.get(environment.name)
    if spec is None:
        raise UnsupportedEnvironment(
            f"Cannot initialize nick: could not determine the environment "
            f"(got {environment.name!r}, known backends: "
            f"{', '.join(sorted(_BACKENDS)) or 'none'})"
        )

    missing = spec.requires - environment.capabilities
    if missing:
        raise IncompatibleEnvironment(
            f"Cannot initialize nick: the {environment.name!r} runtime is missing "
            f"{', '.join(sorted(missing))}",
            missing=frozenset(missing),
        )

    driver = spec.factory(options)
    logger.debug(f"Selected {type(driver).__name__} for environment {environment.name!r}")
    return driver


def detect_environment() -> Environment:
    """
    Resolve the environment for the built-in Chromium backend.

    Returns a chromium Environment that only advertises the playwright
    capability when the package can be imported, so a missing install
    surfaces as IncompatibleEnvironment.
    """
    capabilities = set()
    if importlib.util.find_spec("playwright") is not None:
        capabilities.add(PLAYWRIGHT_CAPABILITY)
    return Environment(CHROMIUM_BACKEND, frozenset(capabilities))


def _chromium_factory(options: NickOptions) -> BrowserDriver:
    from .drivers.chromium import ChromiumBrowserDriver

    return ChromiumBrowserDriver(options)


register_backend(CHROMIUM_BACKEND, _chromium_factory, requires=(PLAYWRIGHT_CAPABILITY,))
