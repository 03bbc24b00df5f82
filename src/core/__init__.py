from __future__ import annotations

"""
Core helpers shared across layers: clock access and ID generation.
"""

from src.core import clock, ids

__all__ = [
    "clock",
    "ids",
]
