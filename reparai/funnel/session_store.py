"""In-memory store of live funnel controllers."""

import logging
import time
from dataclasses import dataclass, field

from reparai.exceptions import SessionNotFoundError
from reparai.funnel.controller import FunnelController

logger = logging.getLogger(__name__)


@dataclass
class StoredFunnel:
    """A funnel controller plus access bookkeeping."""

    controller: FunnelController
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)


class FunnelSessionStore:
    """Funnel controllers keyed by session id, expired on idle time."""

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self._ttl = ttl_seconds
        self._sessions: dict[str, StoredFunnel] = {}

    def add(self, controller: FunnelController) -> str:
        session_id = controller.session.session_id
        now = time.time()
        self._sessions[session_id] = StoredFunnel(controller=controller, created_at=now, last_access=now)
        return session_id

    def get(self, session_id: str) -> FunnelController:
        """Return the controller for *session_id*.

        Raises:
            SessionNotFoundError: when the id is unknown or has expired.
        """
        stored = self._sessions.get(session_id)
        if stored is None:
            raise SessionNotFoundError(f"Funnel session {session_id} not found")
        now = time.time()
        if now - stored.last_access > self._ttl:
            self._drop(session_id)
            raise SessionNotFoundError(f"Funnel session {session_id} expired")
        stored.last_access = now
        return stored.controller

    def delete(self, session_id: str) -> bool:
        if session_id not in self._sessions:
            return False
        self._drop(session_id)
        return True

    def cleanup_expired(self) -> int:
        """Remove expired sessions and return the count removed."""
        now = time.time()
        expired = [
            k for k, v in self._sessions.items() if now - v.last_access > self._ttl
        ]
        for k in expired:
            self._drop(k)
        if expired:
            logger.info("Removed %d expired funnel session(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    def _drop(self, session_id: str) -> None:
        stored = self._sessions.pop(session_id)
        stored.controller.close()
