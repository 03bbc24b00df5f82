from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from src.app.errors import ArchiveError, DatabaseError
from src.core.clock import utcnow
from src.core.ids import new_archive_id
from src.db.repositories import TranscriptRepo
from src.db.schemas import TranscriptDocument, TranscriptEntry
from src.session.models import Session


def build_transcript_doc(
    session: Session,
    *,
    doc_id: str,
    persona_mode: str,
    ended_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the Mongo document for an ended session.
    """
    doc = TranscriptDocument(
        _id=doc_id,
        session_id=session.session_id,
        transcript=[TranscriptEntry(user=t.user_message, ai=t.assistant_reply) for t in session.transcript],
        turn_count=session.turn_count,
        persona_mode=persona_mode,
        hidden_facts=session.hidden_facts.model_dump() if session.hidden_facts else None,
        started_at=session.created_at,
        ended_at=ended_at or utcnow(),
    )
    return doc.to_mongo()


class TranscriptArchiver:
    """
    mode="document": one document per session id, overwritten on each end.
    mode="append":   a new record per end-of-session.
    """

    def __init__(self, repo: TranscriptRepo, *, mode: str = "document", persona_mode: str = "standard"):
        if mode not in ("document", "append"):
            raise ValueError(f"Unknown archive mode: {mode}")
        self.repo = repo
        self.mode = mode
        self.persona_mode = persona_mode

    def archive(self, session: Session) -> str:
        doc_id = session.session_id if self.mode == "document" else new_archive_id()
        doc = build_transcript_doc(session, doc_id=doc_id, persona_mode=self.persona_mode)
        try:
            if self.mode == "document":
                return self.repo.upsert_transcript(doc)
            return self.repo.insert_transcript(doc)
        except DatabaseError as e:
            raise ArchiveError(f"Failed to archive session {session.session_id}: {e}") from e
