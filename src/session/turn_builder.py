from __future__ import annotations

from typing import Dict, List

from src.llms.personas import render_system_prompt, select_persona
from src.session.models import Session

Message = Dict[str, str]


def build_history(session: Session) -> List[Message]:
    """
    Replay recorded turns oldest->newest as alternating user/assistant messages.
    """
    out: List[Message] = []
    for t in session.transcript:
        out.append({"role": "user", "content": t.user_message})
        out.append({"role": "assistant", "content": t.assistant_reply})
    return out


def build_prompt(session: Session, new_user_message: str) -> List[Message]:
    """
    Build the provider message list for the session's next turn:
    system persona for turn `turn_count + 1`, full history, then the new message.
    """
    persona = select_persona(session.next_turn, reveal_enabled=session.hidden_facts is not None)
    system = render_system_prompt(persona, session.hidden_facts)

    return [
        {"role": "system", "content": system},
        *build_history(session),
        {"role": "user", "content": new_user_message},
    ]
