from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.clock import monotonic, utcnow


class HiddenFacts(BaseModel):
    """
    Scenario facts the representative secretly knows.
    Generated once when the session is created; never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    customer_name: str
    product: str
    tracking_number: str
    final_location: str


class Turn(BaseModel):
    """
    One user message paired with the reply shown for it.
    """
    model_config = ConfigDict(frozen=True)

    user_message: str
    assistant_reply: str


class Session(BaseModel):
    """
    In-memory conversation state for one session id.
    `turn_count` and `transcript` only move together via `add_turn`.
    """

    session_id: str
    turn_count: int = 0
    transcript: List[Turn] = Field(default_factory=list)
    hidden_facts: Optional[HiddenFacts] = None

    created_at: datetime = Field(default_factory=utcnow)
    last_active: float = Field(default_factory=monotonic)

    @property
    def next_turn(self) -> int:
        return self.turn_count + 1

    def add_turn(self, user_message: str, assistant_reply: str) -> Turn:
        turn = Turn(user_message=user_message, assistant_reply=assistant_reply)
        self.transcript.append(turn)
        self.turn_count += 1
        self.last_active = monotonic()
        return turn

    def snapshot(self) -> "Session":
        """Deep copy safe to hand out while the live session keeps changing."""
        return self.model_copy(deep=True)
