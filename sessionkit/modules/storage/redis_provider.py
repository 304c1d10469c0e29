import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List

from redis.exceptions import RedisError

from ...errors import StorageError
from ...interfaces import ABSENT
from .codec import decode_value, encode_value

logger = logging.getLogger(__name__)

# Drops every member of KEYS[1] scored strictly below ARGV[1] together with
# its value hash (ARGV[2] .. token).
_SWEEP_SCRIPT = """
local expired = redis.call('ZRANGEBYSCORE', KEYS[1], '-inf', '(' .. ARGV[1])
for _, token in ipairs(expired) do
    redis.call('DEL', ARGV[2] .. token)
    redis.call('ZREM', KEYS[1], token)
end
return #expired
"""

# Touches a live token and returns {1, stored score}; an unknown token is
# indexed at ARGV[2] with any leftover values dropped, returning {0, ARGV[2]}.
_READ_SCRIPT = """
local score = redis.call('ZSCORE', KEYS[1], ARGV[1])
if score then
    redis.call('ZADD', KEYS[1], 'GT', ARGV[2], ARGV[1])
    return {1, score}
end
redis.call('DEL', KEYS[2])
redis.call('ZADD', KEYS[1], ARGV[2], ARGV[1])
return {0, ARGV[2]}
"""

# Applies HSET (ARGV[3] == 'set') or HDEL to KEYS[2] and touches the token,
# but only while the token is still indexed. Returns 0 for a removed session.
_WRITE_SCRIPT = """
if not redis.call('ZSCORE', KEYS[1], ARGV[1]) then
    return 0
end
if ARGV[3] == 'set' then
    redis.call('HSET', KEYS[2], ARGV[4], ARGV[5])
else
    redis.call('HDEL', KEYS[2], ARGV[4])
end
redis.call('ZADD', KEYS[1], 'GT', ARGV[2], ARGV[1])
return 1
"""


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except RedisError as e:
        logger.error(f"Redis failure during {action}: {e}")
        raise StorageError(f"Session storage failed during {action}") from e


class RedisSession:
    """
    Session whose values live in a Redis hash.

    Once the token is destroyed or swept, writes through this object raise
    StorageError and reads see no values; neither brings the session back.
    """

    def __init__(self, provider: "RedisProvider", session_id: str, last_accessed: float):
        self._provider = provider
        self._session_id = session_id
        self._last_accessed = last_accessed

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def last_accessed(self) -> float:
        return self._last_accessed

    @staticmethod
    def _field(key: Any) -> str:
        if not isinstance(key, str):
            raise StorageError(f"Redis session keys must be strings, got {type(key).__name__}")
        return key

    async def set(self, key: str, value: Any) -> None:
        field = self._field(key)
        encoded = encode_value(value)
        applied = await self._provider.write(self._session_id, "set", field, encoded)
        if not applied:
            raise StorageError(f"Session {self._session_id[:8]}... no longer exists")
        self._refresh()

    async def get(self, key: str, default: Any = ABSENT) -> Any:
        field = self._field(key)
        with _storage_errors("get"):
            data = await self._provider.redis.hget(self._provider.values_key(self._session_id), field)
        await self._touch()
        if data is None:
            return default
        return decode_value(data)

    async def delete(self, key: str) -> None:
        field = self._field(key)
        # Deleting from a removed session has nothing left to delete
        if await self._provider.write(self._session_id, "delete", field):
            self._refresh()

    async def keys(self) -> List[str]:
        with _storage_errors("keys"):
            fields = await self._provider.redis.hkeys(self._provider.values_key(self._session_id))
        await self._touch()
        return list(fields)

    def _refresh(self) -> None:
        self._last_accessed = max(self._last_accessed, self._provider.now())

    async def _touch(self) -> None:
        if await self._provider.touch(self._session_id):
            self._refresh()


class RedisProvider:
    """
    Redis-backed session provider.

    Layout:
    - {prefix}:session:{token}     hash of encoded values
    - {prefix}:sessions:last_access sorted set, token scored by last access

    The sorted set is the source of truth for liveness. Every write checks
    membership and updates the hash in one script, so a session removed by
    destroy() or sweep() stays removed.
    """

    def __init__(
        self,
        redis_client,
        prefix: str = "sessionkit",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize Redis provider.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            prefix: Key namespace
            clock: Source of epoch seconds
        """
        self.redis = redis_client
        self.prefix = prefix
        self._clock = clock
        self._index_key = f"{prefix}:sessions:last_access"
        self._scripts: Dict[str, Any] = {}

    def now(self) -> float:
        return self._clock()

    def values_key(self, session_id: str) -> str:
        return f"{self.prefix}:session:{session_id}"

    def _script(self, source: str):
        script = self._scripts.get(source)
        if script is None:
            script = self.redis.register_script(source)
            self._scripts[source] = script
        return script

    async def touch(self, session_id: str) -> bool:
        """
        Record an access to a live session.

        Returns:
            False if the session is no longer indexed
        """
        with _storage_errors("touch"):
            # XX: never re-add a removed token; GT: never move backwards
            await self.redis.zadd(self._index_key, {session_id: self.now()}, xx=True, gt=True)
            return await self.redis.zscore(self._index_key, session_id) is not None

    async def write(self, session_id: str, op: str, field: str, value: str = "") -> bool:
        """
        Set or delete one field of a live session and touch it.

        Returns:
            False if the session no longer exists (nothing was written)
        """
        with _storage_errors(op):
            applied = await self._script(_WRITE_SCRIPT)(
                keys=[self._index_key, self.values_key(session_id)],
                args=[session_id, repr(self.now()), op, field, value],
            )
        return bool(int(applied or 0))

    async def init(self, session_id: str) -> RedisSession:
        now = self.now()
        with _storage_errors("init"):
            added = await self.redis.zadd(self._index_key, {session_id: now}, nx=True)
            if not added:
                raise StorageError(f"Session {session_id[:8]}... already exists")
            # Drop values orphaned by an interrupted destroy
            await self.redis.delete(self.values_key(session_id))
        return RedisSession(self, session_id, now)

    async def read(self, session_id: str) -> RedisSession:
        now = self.now()
        with _storage_errors("read"):
            existed, score = await self._script(_READ_SCRIPT)(
                keys=[self._index_key, self.values_key(session_id)],
                args=[session_id, repr(now)],
            )
        if not int(existed):
            logger.warning(f"Unknown session token {session_id[:8]}..., creating empty session")
        return RedisSession(self, session_id, max(float(score), now))

    async def destroy(self, session_id: str) -> None:
        with _storage_errors("destroy"):
            await self.redis.zrem(self._index_key, session_id)
            await self.redis.delete(self.values_key(session_id))

    async def sweep(self, max_lifetime: float) -> int:
        threshold = self.now() - max_lifetime
        with _storage_errors("sweep"):
            removed = await self._script(_SWEEP_SCRIPT)(
                keys=[self._index_key],
                args=[repr(threshold), f"{self.prefix}:session:"],
            )
        removed = int(removed or 0)
        if removed:
            logger.debug(f"Swept {removed} idle sessions from Redis")
        return removed

    async def exists(self, session_id: str) -> bool:
        with _storage_errors("exists"):
            return await self.redis.zscore(self._index_key, session_id) is not None

    async def count(self) -> int:
        with _storage_errors("count"):
            return int(await self.redis.zcard(self._index_key))
