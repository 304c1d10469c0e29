"""Session subsystem error taxonomy."""


class SessionError(Exception):
    """Base class for all session subsystem errors."""


class ConfigurationError(SessionError):
    """Manager configuration references something that does not exist."""


class ProviderNotFound(SessionError, LookupError):
    """No provider is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"No session provider registered under {name!r}")
        self.name = name


class RegistryError(SessionError):
    """
    Broken provider registration.

    Raised only at startup. Callers must not catch and continue: the
    process is misconfigured and should not serve requests.
    """


class DuplicateRegistration(RegistryError):
    """A provider name was registered twice."""


class InvalidProvider(RegistryError):
    """The provider is empty or does not implement the provider contract."""


class RegistryFrozen(RegistryError):
    """Registration attempted after the registry was frozen."""


class StorageError(SessionError):
    """A provider failed to read, write or persist session state."""


class EntropyError(SessionError):
    """The system random source could not produce a token."""


__all__ = [
    "SessionError",
    "ConfigurationError",
    "ProviderNotFound",
    "RegistryError",
    "DuplicateRegistration",
    "InvalidProvider",
    "RegistryFrozen",
    "StorageError",
    "EntropyError",
]
