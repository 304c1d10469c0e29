import asyncio
import logging
import time
from typing import Any, Callable, Dict, Hashable, List

from ...errors import StorageError
from ...interfaces import ABSENT

logger = logging.getLogger(__name__)


class MemorySession:
    """Session whose values live in a process-local dict."""

    def __init__(self, session_id: str, clock: Callable[[], float]):
        self._session_id = session_id
        self._clock = clock
        self._values: Dict[Hashable, Any] = {}
        self._last_accessed = clock()

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def last_accessed(self) -> float:
        return self._last_accessed

    def touch(self) -> None:
        # Never move backwards, even if the clock does
        self._last_accessed = max(self._last_accessed, self._clock())

    async def set(self, key: Hashable, value: Any) -> None:
        self._values[key] = value
        self.touch()

    async def get(self, key: Hashable, default: Any = ABSENT) -> Any:
        self.touch()
        return self._values.get(key, default)

    async def delete(self, key: Hashable) -> None:
        self._values.pop(key, None)
        self.touch()

    async def keys(self) -> List[Hashable]:
        self.touch()
        return list(self._values)


class MemoryProvider:
    """
    In-process session provider.

    Suitable for development, testing and single-process deployments.
    Sessions are lost on restart.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize memory provider.

        Args:
            clock: Source of epoch seconds (injectable for tests)
        """
        self._clock = clock
        self._sessions: Dict[str, MemorySession] = {}
        self._lock = asyncio.Lock()

    async def init(self, session_id: str) -> MemorySession:
        async with self._lock:
            if session_id in self._sessions:
                raise StorageError(f"Session {session_id[:8]}... already exists")
            session = MemorySession(session_id, self._clock)
            self._sessions[session_id] = session
            return session

    async def read(self, session_id: str) -> MemorySession:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.warning(f"Unknown session token {session_id[:8]}..., creating empty session")
                session = MemorySession(session_id, self._clock)
                self._sessions[session_id] = session
            else:
                session.touch()
            return session

    async def destroy(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    async def sweep(self, max_lifetime: float) -> int:
        async with self._lock:
            threshold = self._clock() - max_lifetime
            expired = [
                sid for sid, session in self._sessions.items() if session.last_accessed < threshold
            ]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.debug(f"Swept {len(expired)} idle sessions from memory")
        return len(expired)

    async def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def count(self) -> int:
        return len(self._sessions)
