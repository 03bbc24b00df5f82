from __future__ import annotations

import hashlib
import random
from typing import Sequence

from src.core.ids import new_tracking_number
from src.session.models import HiddenFacts

CUSTOMER_NAMES: Sequence[str] = (
    "Alex Johnson",
    "Jordan Patel",
    "Sam Rivera",
    "Taylor Nguyen",
    "Morgan Clarke",
    "Casey Okafor",
)

PRODUCTS: Sequence[str] = (
    "Smart Fitness Watch",
    "Wireless Noise-Cancelling Headphones",
    "Espresso Machine",
    "Robot Vacuum",
    "Mechanical Keyboard",
    "Electric Toothbrush",
)

LOCATIONS: Sequence[str] = (
    "Springfield, IL",
    "Dayton, OH",
    "Boise, ID",
    "Tulsa, OK",
    "Albany, NY",
    "Fresno, CA",
)


def generate_hidden_facts(session_id: str) -> HiddenFacts:
    """
    Scenario for a session id. Seeded from the id, so the same id always
    gets the same facts, even after the session was ended and evicted.
    """
    rng = random.Random(hashlib.sha256(session_id.encode("utf-8")).digest())
    return HiddenFacts(
        customer_name=rng.choice(CUSTOMER_NAMES),
        product=rng.choice(PRODUCTS),
        tracking_number=new_tracking_number(rng),
        final_location=rng.choice(LOCATIONS),
    )
