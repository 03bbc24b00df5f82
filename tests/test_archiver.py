from unittest.mock import MagicMock

import pytest
from pymongo.errors import PyMongoError

from src.app.errors import ArchiveError
from src.db.repositories import TranscriptRepo
from src.session.archiver import TranscriptArchiver, build_transcript_doc
from src.session.models import Session
from tests.conftest import FIXED_FACTS


def _session() -> Session:
    s = Session(session_id="s1", hidden_facts=FIXED_FACTS)
    s.add_turn("hello?", "Could I get your tracking number?")
    s.add_turn("739182645", "I'm sorry, I didn't catch that.")
    return s


def test_transcript_doc_layout():
    doc = build_transcript_doc(_session(), doc_id="s1", persona_mode="hidden_facts")

    assert doc["_id"] == "s1"
    assert doc["session_id"] == "s1"
    assert doc["turn_count"] == 2
    assert doc["persona_mode"] == "hidden_facts"
    assert doc["transcript"][0] == {"user": "hello?", "ai": "Could I get your tracking number?"}
    assert doc["hidden_facts"]["tracking_number"] == "739182645"
    assert doc["started_at"] <= doc["ended_at"]


def test_document_mode_overwrites_by_session_id():
    col = MagicMock()
    archive_id = TranscriptArchiver(TranscriptRepo(col), mode="document").archive(_session())

    assert archive_id == "s1"
    col.replace_one.assert_called_once()
    assert col.replace_one.call_args.kwargs == {"upsert": True}
    col.insert_one.assert_not_called()


def test_append_mode_inserts_new_record_each_time():
    col = MagicMock()
    archiver = TranscriptArchiver(TranscriptRepo(col), mode="append")

    first = archiver.archive(_session())
    second = archiver.archive(_session())

    assert first != second
    assert first.startswith("arc_")
    assert col.insert_one.call_count == 2
    assert col.insert_one.call_args.args[0]["session_id"] == "s1"


def test_write_failure_becomes_archive_error():
    col = MagicMock()
    col.insert_one.side_effect = PyMongoError("write concern failed")

    with pytest.raises(ArchiveError):
        TranscriptArchiver(TranscriptRepo(col), mode="append").archive(_session())


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        TranscriptArchiver(TranscriptRepo(MagicMock()), mode="overwrite-ish")
