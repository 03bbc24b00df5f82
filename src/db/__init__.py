from __future__ import annotations

"""
Database layer:
- Mongo connection + indexes for archived transcripts
- Transcript document schema
- Transcript repository
"""

from src.db import mongo, repositories, schemas

__all__ = [
    "mongo",
    "repositories",
    "schemas"
]
