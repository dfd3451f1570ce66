"""
Per-user session context

Replaces a process-wide auth store: each browser session gets its own
context holding the bearer tokens and the in-progress review, quiz and
generation state. Tokens are persisted in the token store so a context can
be rebuilt after a restart (init), and logout clears both the persisted and
in-memory state.
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

import redis

from studyaid.config import settings
from studyaid.exceptions import NotAuthenticated, RemoteAPIError
from studyaid.schemas.ai import GenerationPreview
from studyaid.services.api_client import StudyApiClient
from studyaid.services.quiz_flow import QuizAttemptSession
from studyaid.services.review_flow import ReviewSession
from studyaid.utils.cache import QueryCache, query_cache
from studyaid.utils.tokens import is_expired

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
ADMIN_TOKEN_KEY = "admin_token"

ClientFactory = Callable[..., StudyApiClient]


class TokenStore:
    """Persisted token storage, Redis when reachable, otherwise in-memory"""

    def __init__(self, redis_url: str = None, ttl: int = None):
        self.ttl = ttl or settings.SESSION_TTL
        self._in_memory: Dict[str, str] = {}
        try:
            self._client = redis.from_url(
                redis_url or settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5
            )
            self._client.ping()
            logger.info("TokenStore using Redis")
        except Exception as e:
            logger.warning(f"Redis not available for TokenStore, using in-memory store: {str(e)}")
            self._client = None

    def _key(self, session_id: str, name: str) -> str:
        return f"session:{session_id}:{name}"

    def get(self, session_id: str, name: str) -> Optional[str]:
        key = self._key(session_id, name)
        if self._client is None:
            return self._in_memory.get(key)
        return self._client.get(key)

    def set(self, session_id: str, name: str, value: str) -> None:
        key = self._key(session_id, name)
        if self._client is None:
            self._in_memory[key] = value
            return
        self._client.setex(key, self.ttl, value)

    def delete(self, session_id: str, name: str) -> None:
        key = self._key(session_id, name)
        if self._client is None:
            self._in_memory.pop(key, None)
            return
        self._client.delete(key)


class SessionContext:
    """Authentication state and client-side view state for one session"""

    def __init__(
        self,
        session_id: str,
        token_store: TokenStore,
        cache: QueryCache = None,
        client_factory: ClientFactory = StudyApiClient
    ):
        self.session_id = session_id
        self.token_store = token_store
        self.cache = cache or query_cache
        self.client_factory = client_factory

        self.token: Optional[str] = None
        self.admin_token: Optional[str] = None
        self.is_authenticated = False
        self.is_loading = True
        self.user: Optional[Dict[str, Any]] = None

        self.review_sessions: Dict[str, ReviewSession] = {}
        self.quiz_sessions: Dict[str, QuizAttemptSession] = {}
        self.generation: Optional[GenerationPreview] = None

    @property
    def cache_scope(self) -> str:
        return self.cache.generate_scope(self.session_id)

    def init(self) -> "SessionContext":
        """Load persisted tokens; the user token still needs check_auth()"""
        self.token = self.token_store.get(self.session_id, TOKEN_KEY)
        self.admin_token = self.token_store.get(self.session_id, ADMIN_TOKEN_KEY)
        return self

    @property
    def client(self) -> StudyApiClient:
        """Client bound to the user token; raises when there is none"""
        if not self.token:
            raise NotAuthenticated()
        return self.client_factory(token=self.token)

    @property
    def admin_client(self) -> StudyApiClient:
        if not self.is_admin:
            raise NotAuthenticated("Admin login required")
        return self.client_factory(token=self.admin_token)

    def _store_token(self, response: Optional[Dict[str, Any]]) -> None:
        if response and response.get("token"):
            self.token = response["token"]
            self.token_store.set(self.session_id, TOKEN_KEY, self.token)
            self.is_authenticated = True
            self.user = response.get("user")
        self.is_loading = False

    def login(self, email: str, password: str) -> None:
        response = self.client_factory().login(email, password)
        self._store_token(response)
        logger.info(f"Session {self.session_id[:8]} logged in")

    def signup(self, name: str, email: str, password: str) -> None:
        response = self.client_factory().signup(name, email, password)
        self._store_token(response)
        logger.info(f"Session {self.session_id[:8]} signed up")

    def check_auth(self) -> bool:
        """Verify the persisted token; an invalid or unverifiable token is dropped"""
        if not self.token:
            self.is_authenticated = False
            self.is_loading = False
            return False

        try:
            response = self.client.verify() or {}
        except RemoteAPIError as e:
            logger.error(f"An error occurred verifying session: {e.message}")
            response = {}

        if response.get("valid"):
            self.is_authenticated = True
            self.user = response.get("user")
        else:
            self.token_store.delete(self.session_id, TOKEN_KEY)
            self.token = None
            self.is_authenticated = False
            self.user = None
        self.is_loading = False
        return self.is_authenticated

    def logout(self) -> None:
        """Clear persisted token, in-memory state and cached queries"""
        self.token_store.delete(self.session_id, TOKEN_KEY)
        self.token = None
        self.is_authenticated = False
        self.user = None
        self.review_sessions.clear()
        self.quiz_sessions.clear()
        self.generation = None
        self.cache.clear_scope(self.cache_scope)
        logger.info(f"Session {self.session_id[:8]} logged out")

    def admin_login(self, token: str) -> None:
        self.admin_token = token
        self.token_store.set(self.session_id, ADMIN_TOKEN_KEY, token)

    def admin_logout(self) -> None:
        self.token_store.delete(self.session_id, ADMIN_TOKEN_KEY)
        self.admin_token = None
        self.cache.invalidate(self.cache_scope, ("admin",))

    @property
    def is_admin(self) -> bool:
        """True while an unexpired admin token is held; expired tokens log out"""
        if not self.admin_token:
            return False
        try:
            expired = is_expired(self.admin_token)
        except ValueError as e:
            logger.error(f"Error parsing admin token: {str(e)}")
            expired = True
        if expired:
            self.admin_logout()
            return False
        return True


class SessionRegistry:
    """
    Maps session ids to live contexts, rebuilding them from the token store

    Contexts idle for longer than idle_ttl seconds are dropped on the next
    lookup; a returning session is rebuilt through init().
    """

    def __init__(
        self,
        token_store: TokenStore = None,
        client_factory: ClientFactory = StudyApiClient,
        idle_ttl: int = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.token_store = token_store or TokenStore()
        self.client_factory = client_factory
        self.idle_ttl = idle_ttl or settings.SESSION_IDLE_TTL
        self.clock = clock
        self._sessions: Dict[str, SessionContext] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_idle(self, now: float) -> None:
        expired = [
            session_id for session_id, seen in self._last_seen.items()
            if now - seen > self.idle_ttl
        ]
        for session_id in expired:
            self._drop(session_id)
        if expired:
            logger.info(f"Evicted {len(expired)} idle sessions")

    def get_or_create(self, session_id: str) -> SessionContext:
        with self._lock:
            now = self.clock()
            self._evict_idle(now)
            session = self._sessions.get(session_id)
            if session is None:
                session = SessionContext(
                    session_id,
                    self.token_store,
                    client_factory=self.client_factory
                ).init()
                self._sessions[session_id] = session
            self._last_seen[session_id] = now
            return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._drop(session_id)

    def _drop(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)


# Global instance
session_registry = SessionRegistry()
