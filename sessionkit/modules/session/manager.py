import asyncio
import logging
import weakref
from typing import Callable, Optional

from fastapi import Request, Response

from ...config.provider import SessionConfig
from ...errors import ConfigurationError, ProviderNotFound
from ...interfaces import Provider, Session
from ..idgen import generate_token, is_well_formed
from ..registry import ProviderRegistry, default_registry
from ..transport import expire_token, extract_token, stage_token

logger = logging.getLogger(__name__)


class SessionManager:
    """Resolves request tokens to provider sessions and drives expiration."""

    def __init__(
        self,
        config: SessionConfig,
        registry: Optional[ProviderRegistry] = None,
        token_factory: Callable[[], str] = generate_token,
    ):
        """
        Initialize session manager.

        Args:
            config: Session configuration
            registry: Provider table (defaults to the process-wide registry)
            token_factory: Source of new session tokens

        Raises:
            ConfigurationError: If config.provider_name is not registered
        """
        self.config = config
        self._new_token = token_factory
        try:
            self.provider: Provider = (registry or default_registry).lookup(config.provider_name)
        except ProviderNotFound as e:
            raise ConfigurationError(
                f"Session provider {config.provider_name!r} is not registered"
            ) from e

        # Same-token operations never interleave; unrelated tokens run concurrently
        self._token_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._sweep_lock = asyncio.Lock()
        self._no_sweep = asyncio.Event()
        self._no_sweep.set()

    def _lock_for(self, token: str) -> asyncio.Lock:
        lock = self._token_locks.get(token)
        if lock is None:
            lock = asyncio.Lock()
            self._token_locks[token] = lock
        return lock

    def _request_token(self, request: Request) -> Optional[str]:
        token = extract_token(request, self.config.cookie_name)
        if token is None:
            return None
        if not is_well_formed(token):
            logger.warning(f"Ignoring malformed session token from {_client(request)}")
            return None
        return token

    async def start(self, request: Request, response: Response) -> Session:
        """
        Return the session for this request, creating one if needed.

        Args:
            request: Incoming request carrying the token (cookie or query param)
            response: Outgoing response; receives a cookie when a session is created

        Returns:
            The client's session

        Raises:
            EntropyError: If a new token cannot be generated
            StorageError: If the provider fails
        """
        token = self._request_token(request)

        if token is not None:
            async with self._lock_for(token):
                if self.config.strict_tokens and not await self.provider.exists(token):
                    logger.info(f"Rejecting unknown session token from {_client(request)}")
                else:
                    session = await self.provider.read(token)
                    request.state.session_token = token
                    return session

        token = self._new_token()
        await self._no_sweep.wait()
        async with self._lock_for(token):
            session = await self.provider.init(token)

        stage_token(response, self.config.cookie_name, token, self.config.cookie_max_age)
        request.state.session_token = token
        logger.debug(f"Created session {token[:8]}... for {_client(request)}")
        return session

    async def destroy(self, request: Request, response: Response) -> bool:
        """
        End the client's session (logout).

        A request without a usable token is left alone and the response is
        not touched.

        Returns:
            True if a session token was found and destroyed

        Raises:
            StorageError: If the provider fails
        """
        token = self._request_token(request)
        if token is None:
            return False

        async with self._lock_for(token):
            await self.provider.destroy(token)

        expire_token(response, self.config.cookie_name)
        logger.debug(f"Destroyed session {token[:8]}...")
        return True

    async def run_sweep(self) -> int:
        """
        Remove sessions idle longer than the configured lifetime.

        Returns:
            Number of sessions removed
        """
        async with self._sweep_lock:
            self._no_sweep.clear()
            try:
                removed = await self.provider.sweep(self.config.max_lifetime)
            finally:
                self._no_sweep.set()

        if removed:
            logger.info(f"Session sweep removed {removed} idle sessions")
        return removed

    async def session_count(self) -> int:
        """Number of live sessions in the provider."""
        return await self.provider.count()


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown"
