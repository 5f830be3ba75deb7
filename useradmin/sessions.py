"""In-memory ownership of view state for each browser session."""

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from .client import UsersAPIClient
from .navigation import NavigationHistory
from .views import UserDetailView, UserListView

_MAX_SESSIONS = 1000


@dataclass
class ViewSession:
    """The screens owned by a single browser."""

    list_view: UserListView
    detail_view: UserDetailView
    history: NavigationHistory = field(default_factory=NavigationHistory)


@dataclass
class _SessionRecord:
    session: ViewSession
    expires_at: datetime


class ViewSessionManager:
    """Create, resolve, and expire per-browser view sessions."""

    def __init__(
        self,
        client: UsersAPIClient,
        *,
        ttl: timedelta = timedelta(hours=8),
        max_sessions: int = _MAX_SESSIONS,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._client = client
        self._ttl = ttl
        self._max_sessions = max_sessions
        self._sessions: Dict[str, _SessionRecord] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self) -> Tuple[str, ViewSession]:
        token = secrets.token_urlsafe(32)
        session = ViewSession(
            list_view=UserListView(self._client),
            detail_view=UserDetailView(self._client),
        )
        record = _SessionRecord(session=session, expires_at=self._now() + self._ttl)
        with self._lock:
            self._purge_expired()
            self._evict_oldest()
            self._sessions[token] = record
        return token, session

    def resolve(self, token: Optional[str]) -> Optional[ViewSession]:
        if not token:
            return None
        now = self._now()
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if record.expires_at <= now:
                self._sessions.pop(token, None)
                return None
            record.expires_at = now + self._ttl
            return record.session

    def resolve_or_create(self, token: Optional[str]) -> Tuple[str, ViewSession]:
        session = self.resolve(token)
        if session is not None and token:
            return token, session
        return self.create()

    def destroy(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def _purge_expired(self) -> None:
        now = self._now()
        expired = [token for token, record in self._sessions.items() if record.expires_at <= now]
        for token in expired:
            del self._sessions[token]

    def _evict_oldest(self) -> None:
        # Idle sessions expire first, so the soonest expiry is the least recently used.
        while len(self._sessions) >= self._max_sessions:
            oldest = min(self._sessions, key=lambda token: self._sessions[token].expires_at)
            del self._sessions[oldest]

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["ViewSession", "ViewSessionManager"]
