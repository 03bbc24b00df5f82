from __future__ import annotations
import random
import secrets

def _tok(nbytes: int = 12) -> str:
    return secrets.token_urlsafe(nbytes)

def new_archive_id() -> str:
    return f"arc_{_tok()}"

def new_tracking_number(rng: random.Random, digits: int = 9) -> str:
    """Numeric parcel tracking number drawn from `rng`, never starting with 0."""
    first = str(rng.randint(1, 9))
    rest = "".join(str(rng.randrange(10)) for _ in range(digits - 1))
    return first + rest
