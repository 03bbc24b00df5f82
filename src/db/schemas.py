from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Literal, Optional, List, Dict
from datetime import datetime

PersonaMode = Literal["standard", "hidden_facts"]

class TranscriptEntry(BaseModel):
    user: str
    ai: str

class TranscriptDocument(BaseModel):
    """
    Archived conversation. In `document` mode `_id` is the session id;
    in `append` mode each end-of-session gets its own id.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    session_id: str
    transcript: List[TranscriptEntry] = Field(default_factory=list)
    turn_count: int = 0
    persona_mode: PersonaMode = "standard"
    hidden_facts: Optional[Dict[str, Any]] = None
    started_at: Optional[datetime] = None
    ended_at: datetime

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
