from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base application error"""


class ConfigError(AppError):
    """Missing or invalid configuration"""


class DatabaseError(AppError):
    """MongoDB connection or query failure"""


class SessionNotFoundError(AppError):
    """Session ID has no active in-memory session"""


class ArchiveError(DatabaseError):
    """Failed to persist a transcript at end of session"""


class InvalidRequestError(AppError):
    """Request is missing a required field"""


class ProviderError(AppError):
    """
    Completion provider failed: transport error, non-2xx status,
    or a response with no usable content.
    """

    def __init__(self, message: str, *, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload
