import logging
import threading
from typing import Dict

from ...errors import (
    DuplicateRegistration,
    InvalidProvider,
    ProviderNotFound,
    RegistryFrozen,
)
from ...interfaces import Provider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Write-once table of session providers keyed by backend name."""

    def __init__(self):
        self._providers: Dict[str, Provider] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def register(self, name: str, provider: Provider) -> None:
        """
        Bind a provider to a name for the rest of the process lifetime.

        Args:
            name: Backend name (e.g. "memory", "redis")
            provider: Provider implementation

        Raises:
            InvalidProvider: If provider is missing or incomplete
            DuplicateRegistration: If name is already bound
            RegistryFrozen: If the registry no longer accepts bindings
        """
        if not name:
            raise InvalidProvider("Provider name must be a non-empty string")
        if provider is None:
            raise InvalidProvider(f"Provider for {name!r} is None")
        if not isinstance(provider, Provider):
            raise InvalidProvider(
                f"{type(provider).__name__} registered as {name!r} does not implement the provider contract"
            )

        with self._lock:
            if self._frozen:
                raise RegistryFrozen(f"Cannot register {name!r}: registry is frozen")
            if name in self._providers:
                raise DuplicateRegistration(f"Provider {name!r} is already registered")
            self._providers[name] = provider

        logger.info(f"Registered session provider {name!r} ({type(provider).__name__})")

    def lookup(self, name: str) -> Provider:
        """
        Return the provider bound to name.

        Raises:
            ProviderNotFound: If nothing is registered under name
        """
        try:
            return self._providers[name]
        except KeyError:
            raise ProviderNotFound(name) from None

    def freeze(self) -> None:
        """Reject any further registrations."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: str) -> bool:
        return name in self._providers


# Process-wide table used when a manager is not given one explicitly
default_registry = ProviderRegistry()


def register(name: str, provider: Provider) -> None:
    """Register a provider in the default registry."""
    default_registry.register(name, provider)


def lookup(name: str) -> Provider:
    """Look up a provider in the default registry."""
    return default_registry.lookup(name)
