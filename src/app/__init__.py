from __future__ import annotations

"""
Application-level utilities:
- env-driven settings (.env aware)
- JSON line logging
- error hierarchy shared by the gateway, archiver and HTTP layer
"""

from src.app import errors, logging, settings

__all__ = [
    "errors",
    "logging",
    "settings",
]
