"""Error taxonomy for bee-sync."""

from __future__ import annotations
from typing import Optional


class SyncError(Exception):
    pass

class ConfigurationError(SyncError):
    """Missing API key or unusable settings; raised before any network call."""

class NetworkError(SyncError):
    def __init__(self, message: str, status_code: Optional[int]=None):
        super().__init__(message)
        self.status_code = status_code

class FormatError(SyncError):
    """Response body (or a record in it) lacks the expected shape."""
