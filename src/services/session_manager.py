"""
Session manager for in-memory discover sessions.

Each session owns one DiscoverEngine and the CatalogDispatcher that serves
its intents. Sessions expire after a period without activity.

In production, this should be backed by a shared store for horizontal scaling.
"""

import random
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from config.settings import Settings, get_settings
from core.errors import SessionNotFoundError
from core.logging import LoggerMixin
from discover import DiscoverEngine, ReplenishmentPolicy
from services.catalog import CandidateCatalog, load_catalog
from services.discover_dispatcher import CatalogDispatcher


@dataclass
class DiscoverSession:
    """One user's engine plus its dispatcher, with expiry metadata."""

    session_id: str
    engine: DiscoverEngine
    dispatcher: CatalogDispatcher
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    ttl_seconds: int = 86400

    def is_expired(self) -> bool:
        """A session expires ttl_seconds after its last access."""
        expiry = self.updated_at + timedelta(seconds=self.ttl_seconds)
        return datetime.utcnow() > expiry

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> Dict[str, object]:
        state = self.engine.snapshot().to_dict()
        state["session_id"] = self.session_id
        state["params"] = self.dispatcher.params.to_dict()
        return state


class DiscoverSessionManager(LoggerMixin):
    """
    Thread-safe registry of discover sessions.

    Usage:
        manager = DiscoverSessionManager(catalog)

        session = manager.create_session()   # engine started, first fetch queued
        session.engine.gesture_end("left")

        manager.delete_session(session.session_id)
    """

    def __init__(
        self,
        catalog: CandidateCatalog,
        low_water_mark: int = 10,
        page_size: int = 20,
        fetch_workers: int = 2,
        ttl_seconds: int = 86400,
        seed: Optional[int] = None,
    ):
        self.catalog = catalog
        self._policy = ReplenishmentPolicy(low_water_mark=low_water_mark)
        self._page_size = page_size
        self._fetch_workers = fetch_workers
        self._ttl_seconds = ttl_seconds
        self._seeds = random.Random(seed)
        self._seeded = seed is not None
        self._lock = threading.RLock()
        self._sessions: Dict[str, DiscoverSession] = {}

    @classmethod
    def from_settings(
        cls, settings: Settings, catalog: Optional[CandidateCatalog] = None
    ) -> "DiscoverSessionManager":
        if catalog is None:
            catalog = load_catalog(settings.catalog_path)
        return cls(
            catalog,
            low_water_mark=settings.low_water_mark,
            page_size=settings.fetch_page_size,
            fetch_workers=settings.fetch_workers,
            ttl_seconds=settings.session_ttl_seconds,
            seed=settings.random_seed,
        )

    # =========================================================================
    # Session Lifecycle
    # =========================================================================

    def create_session(self) -> DiscoverSession:
        """Create and start a new session."""
        with self._lock:
            session_id = uuid.uuid4().hex
            seed = self._seeds.randrange(2 ** 32) if self._seeded else None

        dispatcher = CatalogDispatcher(
            self.catalog,
            page_size=self._page_size,
            max_workers=self._fetch_workers,
            seed=seed,
        )
        engine = DiscoverEngine(dispatcher, self._policy)
        dispatcher.attach(engine.append_candidates)

        session = DiscoverSession(
            session_id=session_id,
            engine=engine,
            dispatcher=dispatcher,
            ttl_seconds=self._ttl_seconds,
        )
        with self._lock:
            self._sessions[session_id] = session

        self.logger.info("Discover session created", session_id=session_id)
        engine.start()
        return session

    def get_session(self, session_id: str) -> Optional[DiscoverSession]:
        """
        Get a live session.

        Returns:
            The session, or None if not found/expired
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired():
                del self._sessions[session_id]
                expired = session
            else:
                session.touch()
                return session

        expired.dispatcher.shutdown(wait=False)
        self.logger.info("Discover session expired", session_id=session_id)
        return None

    def require_session(self, session_id: str) -> DiscoverSession:
        """Like get_session, but raises SessionNotFoundError."""
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete_session(self, session_id: str) -> bool:
        """
        Delete a session and stop its fetch workers.

        Returns:
            True if a session was removed
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.dispatcher.shutdown(wait=False)
        self.logger.info("Discover session deleted", session_id=session_id)
        return True

    def clear_expired(self) -> int:
        """
        Clear all expired sessions.

        Returns:
            Number of sessions cleared
        """
        with self._lock:
            expired = [s for s in self._sessions.values() if s.is_expired()]
            for session in expired:
                del self._sessions[session.session_id]

        for session in expired:
            session.dispatcher.shutdown(wait=False)

        if expired:
            self.logger.info("Cleared expired sessions", count=len(expired))
        return len(expired)

    def shutdown(self) -> None:
        """Stop every session's workers and forget all sessions."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.dispatcher.shutdown(wait=False)

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "sessions": len(self._sessions),
                "catalog_items": len(self.catalog),
                "low_water_mark": self._policy.low_water_mark,
            }


# Global session manager, built lazily from settings

_discover_sessions: Optional[DiscoverSessionManager] = None
_discover_sessions_lock = threading.Lock()


def get_discover_session_manager() -> DiscoverSessionManager:
    """Get the discover session manager singleton."""
    global _discover_sessions
    with _discover_sessions_lock:
        if _discover_sessions is None:
            _discover_sessions = DiscoverSessionManager.from_settings(get_settings())
        return _discover_sessions


def reset_discover_session_manager() -> None:
    """Shut down and forget the singleton. Useful for testing."""
    global _discover_sessions
    with _discover_sessions_lock:
        if _discover_sessions is not None:
            _discover_sessions.shutdown()
        _discover_sessions = None
