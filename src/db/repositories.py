from __future__ import annotations
from typing import Any, Dict
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.app.errors import DatabaseError

class TranscriptRepo:
    def __init__(self, transcripts: Collection):
        self.transcripts = transcripts

    def upsert_transcript(self, doc: Dict[str, Any]) -> str:
        """Overwrite the single document kept for a session."""
        try:
            self.transcripts.replace_one({"_id": doc["_id"]}, doc, upsert=True)
        except PyMongoError as e:
            raise DatabaseError(str(e)) from e
        return doc["_id"]

    def insert_transcript(self, doc: Dict[str, Any]) -> str:
        """Add one record per ended session."""
        try:
            self.transcripts.insert_one(doc)
        except PyMongoError as e:
            raise DatabaseError(str(e)) from e
        return doc["_id"]

