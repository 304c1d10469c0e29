"""Session and provider contracts following Black Box Design principles."""
from typing import Any, Hashable, List, Protocol, runtime_checkable


class _Absent:
    """Marker for a key with no stored value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@runtime_checkable
class Session(Protocol):
    """Per-client key/value store with an immutable identity."""

    @property
    def session_id(self) -> str:
        """Token identifying this session."""
        ...

    @property
    def last_accessed(self) -> float:
        """Epoch seconds of the most recent read or write."""
        ...

    async def set(self, key: Hashable, value: Any) -> None:
        """
        Store or overwrite a value.

        Raises:
            StorageError: If the backend cannot persist the value
        """
        ...

    async def get(self, key: Hashable, default: Any = ABSENT) -> Any:
        """
        Return the stored value.

        Returns:
            The value, or ``default`` (``ABSENT`` unless given) if the key
            has never been set or was deleted
        """
        ...

    async def delete(self, key: Hashable) -> None:
        """Remove a key. Removing a missing key is not an error."""
        ...

    async def keys(self) -> List[Hashable]:
        """Return the keys currently stored."""
        ...


@runtime_checkable
class Provider(Protocol):
    """Storage backend for sessions."""

    async def init(self, session_id: str) -> Session:
        """
        Create a new, empty session.

        Raises:
            StorageError: If a session already exists under ``session_id``
        """
        ...

    async def read(self, session_id: str) -> Session:
        """
        Return the session for ``session_id``.

        An unknown token yields a fresh empty session rather than an error.
        """
        ...

    async def destroy(self, session_id: str) -> None:
        """Remove a session; no-op if it does not exist."""
        ...

    async def sweep(self, max_lifetime: float) -> int:
        """
        Remove sessions idle longer than ``max_lifetime`` seconds.

        Returns:
            Number of sessions removed
        """
        ...

    async def exists(self, session_id: str) -> bool:
        """Check whether a session is stored under ``session_id``."""
        ...

    async def count(self) -> int:
        """Number of live sessions."""
        ...
