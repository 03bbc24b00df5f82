from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from src.app.errors import SessionNotFoundError
from src.core.clock import monotonic
from src.session.models import HiddenFacts, Session, Turn

logger = logging.getLogger(__name__)


@dataclass
class _LockEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0  # threads holding or waiting on `lock`


class SessionStore:
    """
    In-memory map of session id -> Session.

    Mutations for one id must happen inside `session_lock(id)`. Different ids
    never contend beyond the short registry lock.
    """

    def __init__(self, facts_factory: Optional[Callable[[str], HiddenFacts]] = None):
        self.facts_factory = facts_factory
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, _LockEntry] = {}
        self._registry_lock = threading.Lock()

    # ---------- Per-id serialization ----------
    @contextmanager
    def session_lock(self, session_id: str) -> Iterator[None]:
        with self._registry_lock:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = _LockEntry()
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._registry_lock:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[session_id]

    # ---------- Sessions ----------
    def get_or_create(self, session_id: str) -> Session:
        with self._registry_lock:
            session = self._sessions.get(session_id)
            if session is not None:
                return session
            facts = self.facts_factory(session_id) if self.facts_factory else None
            session = Session(session_id=session_id, hidden_facts=facts)
            self._sessions[session_id] = session
        logger.info("session created", extra={"session_id": session_id, "hidden_facts": facts is not None})
        return session

    def peek(self, session_id: str) -> Optional[Session]:
        """Read-only lookup; returns a copy and never creates a session."""
        with self._registry_lock:
            session = self._sessions.get(session_id)
            return session.snapshot() if session is not None else None

    def record_turn(self, session_id: str, user_message: str, assistant_reply: str) -> Turn:
        with self._registry_lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session.add_turn(user_message, assistant_reply)

    def remove(self, session_id: str) -> bool:
        with self._registry_lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("session evicted", extra={"session_id": session_id})
        return removed

    def idle_session_ids(self, max_idle_s: float, now: Optional[float] = None) -> List[str]:
        now = monotonic() if now is None else now
        with self._registry_lock:
            return [sid for sid, s in self._sessions.items() if now - s.last_active >= max_idle_s]

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._registry_lock:
            return session_id in self._sessions
