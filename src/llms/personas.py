from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from src.session.models import HiddenFacts


class PersonaBand(str, Enum):
    BASELINE = "baseline"
    REPEAT = "repeat"
    STALL = "stall"
    MAX_FRUSTRATION = "max_frustration"
    REVEAL = "reveal"


@dataclass(frozen=True)
class Persona:
    band: PersonaBand
    first_turn: int
    last_turn: Optional[int]  # None = open-ended
    directive: str
    requires_hidden_facts: bool = False

    def covers(self, turn: int) -> bool:
        if turn < self.first_turn:
            return False
        return self.last_turn is None or turn <= self.last_turn


# Location stays hidden through this turn in the hidden-facts scenario.
REVEAL_AFTER_TURN = 10

# Escalation table, ordered by first_turn. The open-ended MAX_FRUSTRATION row
# serves turns past REVEAL_AFTER_TURN when there is nothing to reveal.
PERSONAS: Tuple[Persona, ...] = (
    Persona(
        band=PersonaBand.BASELINE,
        first_turn=1,
        last_turn=2,
        directive=(
            "Be polite but vague. Ask for the obvious information: the customer's name, "
            "the product they ordered, and the tracking number. Do not solve the issue."
        ),
    ),
    Persona(
        band=PersonaBand.REPEAT,
        first_turn=3,
        last_turn=4,
        directive=(
            "Ask for the same details again. Over-apologize, claim you didn't catch their "
            "previous answers or that the system needs them to confirm everything once more."
        ),
    ),
    Persona(
        band=PersonaBand.STALL,
        first_turn=5,
        last_turn=6,
        directive=(
            "Stall harder with stock excuses such as \"the system is running slow today\" or "
            "\"please allow 24 hours for the tracking to update\". Still offer no resolution."
        ),
    ),
    Persona(
        band=PersonaBand.MAX_FRUSTRATION,
        first_turn=7,
        last_turn=None,
        directive=(
            "Be maximally frustrating: repeat your apologies, deflect responsibility to other "
            "departments, offer to escalate without doing so, and send the customer in circles."
        ),
    ),
    Persona(
        band=PersonaBand.REVEAL,
        first_turn=REVEAL_AFTER_TURN + 1,
        last_turn=None,
        directive="Finally resolve the inquiry by telling the customer where their package is.",
        requires_hidden_facts=True,
    ),
)

_ROLE = (
    "You are roleplaying as a frustrating customer service representative at a shipping company.\n"
    "The customer is contacting you about their package.\n"
)

_RULES = (
    "Rules:\n"
    "- Never greet the customer by name until they have given it to you.\n"
    "- If the customer gives partial info, ask again for the missing pieces.\n"
    "- Frequently repeat requests or pretend there is confusion about the product or tracking number.\n"
    "- Sometimes ask for unnecessary details like their address.\n"
    "- Keep responses 2-5 sentences, like a real support chat.\n"
)


def select_persona(turn: int, *, reveal_enabled: bool = False) -> Persona:
    """
    Pure mapping from turn number (1-based) to its escalation band.
    """
    if turn < 1:
        raise ValueError(f"turn must be >= 1, got {turn}")
    match: Optional[Persona] = None
    for p in PERSONAS:
        if p.requires_hidden_facts and not reveal_enabled:
            continue
        if p.covers(turn):
            match = p  # later rows win, so REVEAL overrides the open-ended row
    if match is None:
        raise LookupError(f"no persona covers turn {turn}")
    return match


def _facts_block(facts: HiddenFacts, persona: Persona) -> str:
    lines = [
        "IMPORTANT:",
        "- You secretly know the following customer info but must NOT reveal it until the customer provides it:",
        f"  - Name: {facts.customer_name}",
        f"  - Product: {facts.product}",
        f"  - Tracking Number: {facts.tracking_number}",
        f"  - Final Location: {facts.final_location}",
        "- Always ask the customer for their name, product, and tracking number as if you don't already know them.",
    ]
    if persona.band is PersonaBand.REVEAL:
        lines.append(f'- Reveal the location now, saying exactly: "Your package is currently in {facts.final_location}."')
    else:
        lines.append("- Do NOT reveal the package location under any circumstances, even if asked directly.")
    return "\n".join(lines) + "\n"


def render_system_prompt(persona: Persona, hidden_facts: Optional[HiddenFacts] = None) -> str:
    """
    Build the system instruction for one turn. Output depends only on the
    persona band and the session's fixed facts.
    """
    parts = [_ROLE]
    if hidden_facts is not None:
        parts.append(_facts_block(hidden_facts, persona))
    parts.append(_RULES)
    parts.append(f"Current behavior ({persona.band.value}):\n- {persona.directive}\n")
    return "\n".join(parts)
