from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from src.app.errors import ArchiveError, InvalidRequestError, ProviderError
from src.core.clock import monotonic
from src.llms.gateway import CompletionGateway
from src.session.archiver import TranscriptArchiver
from src.session.models import Session
from src.session.session_store import SessionStore
from src.session.turn_builder import build_prompt

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, the AI had an issue responding."
SERVER_ERROR_REPLY = "Sorry, something went wrong."


@dataclass(frozen=True)
class ChatResult:
    session_id: str
    reply: str
    turn: int
    ok: bool


@dataclass(frozen=True)
class EndResult:
    session_id: str
    turns: int
    archived: bool
    archive_id: Optional[str] = None


def _require(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidRequestError(f"{field} is required")
    return value


class SessionManager:
    def __init__(self, store: SessionStore, gateway: CompletionGateway, archiver: TranscriptArchiver):
        self.store = store
        self.gateway = gateway
        self.archiver = archiver

    # ---------- Turns ----------
    def chat(self, session_id: str, message: str) -> ChatResult:
        """
        Run one turn: build the prompt from the recorded history, call the
        provider once, record the turn. A provider failure records the
        fallback reply so turn_count and transcript stay in step.
        """
        _require(session_id, "sessionId")
        _require(message, "message")

        with self.store.session_lock(session_id):
            session = self.store.get_or_create(session_id)
            turn = session.next_turn
            messages = build_prompt(session, message)

            ok = True
            try:
                reply = self.gateway.complete(messages)
            except ProviderError as e:
                ok = False
                reply = FALLBACK_REPLY
                logger.warning(
                    "provider call failed: %s",
                    e,
                    extra={
                        "session_id": session_id,
                        "turn": turn,
                        "status": e.status,
                        "payload": str(e.payload)[:500] if e.payload is not None else None,
                    },
                )

            self.store.record_turn(session_id, message, reply)

        logger.info("turn recorded", extra={"session_id": session_id, "turn": turn, "ok": ok})
        return ChatResult(session_id=session_id, reply=reply, turn=turn, ok=ok)

    # ---------- End of session ----------
    def end_session(self, session_id: str) -> EndResult:
        """
        Archive then evict. ArchiveError propagates and the session stays in memory.

        With no active session, append mode still writes an empty record;
        document mode writes nothing so an earlier archive under the same id
        is not overwritten.
        """
        _require(session_id, "sessionId")
        with self.store.session_lock(session_id):
            session = self.store.peek(session_id)
            if session is not None:
                return self._archive_and_evict(session)

            logger.info("end-of-session with no active session", extra={"session_id": session_id})
            if self.archiver.mode != "append":
                return EndResult(session_id=session_id, turns=0, archived=False)
            archive_id = self.archiver.archive(Session(session_id=session_id))
        return EndResult(session_id=session_id, turns=0, archived=True, archive_id=archive_id)

    def expire_idle(self, max_idle_s: float, now: Optional[float] = None) -> List[str]:
        """Archive and evict sessions idle for at least `max_idle_s` seconds."""
        now = monotonic() if now is None else now
        cutoff = now - max_idle_s
        expired: List[str] = []
        for session_id in self.store.idle_session_ids(max_idle_s, now=now):
            with self.store.session_lock(session_id):
                session = self.store.peek(session_id)
                # ended meanwhile, or a turn landed after the idle scan
                if session is None or session.last_active > cutoff:
                    continue
                try:
                    self._archive_and_evict(session)
                except ArchiveError:
                    logger.exception("idle archive failed; session retained", extra={"session_id": session_id})
                    continue
            expired.append(session_id)
        return expired

    def _archive_and_evict(self, session: Session) -> EndResult:
        # caller holds the session lock
        archive_id = self.archiver.archive(session)
        self.store.remove(session.session_id)
        logger.info(
            "session archived",
            extra={"session_id": session.session_id, "turns": session.turn_count, "archive_id": archive_id},
        )
        return EndResult(session_id=session.session_id, turns=session.turn_count, archived=True, archive_id=archive_id)

    @property
    def active_sessions(self) -> int:
        return len(self.store)
