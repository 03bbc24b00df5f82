from __future__ import annotations

"""
Session layer:
- in-memory session store with per-id locking
- prompt construction from transcript + persona band
- chat/end-of-session orchestration and transcript archiving
"""

from src.session import archiver, facts, models, session_manager, session_store, turn_builder

__all__ = [
    "archiver",
    "facts",
    "models",
    "session_manager",
    "session_store",
    "turn_builder",
]
