from __future__ import annotations
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from typing import TypedDict

class MongoHandles(TypedDict):
    client: MongoClient
    db: Database
    transcripts: Collection

def connect_mongo(mongo_uri: str, db_name: str, *, collection: str = "chat_transcripts", tls: bool = True) -> MongoHandles:
    client = MongoClient(
        mongo_uri,
        tls=tls,
        serverSelectionTimeoutMS=30000,
        connectTimeoutMS=20000,
        socketTimeoutMS=20000,
    )
    db = client[db_name]
    return {
        "client": client,
        "db": db,
        "transcripts": db[collection],
    }

def ensure_indexes(handles: MongoHandles) -> None:
    transcripts = handles["transcripts"]

    # append mode stores many records per session id
    transcripts.create_index([("session_id", 1), ("ended_at", -1)])
    transcripts.create_index([("ended_at", -1)])
