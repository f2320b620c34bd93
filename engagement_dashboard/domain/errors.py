"""Recoverable sync failures.

None of these ever escape the sync loop; they are turned into a status the
dashboard shows to the user.
"""

from typing import Optional


class SyncError(Exception):
    kind = "error"


class NotConfigured(SyncError):
    """No endpoint is registered for the requested source."""

    kind = "not_configured"

    def __init__(self, source: str):
        super().__init__(f"no URL configured for source '{source}'")
        self.source = source


class TransportError(SyncError):
    """Network failure or a non-success HTTP status."""

    kind = "transport_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyOrInvalidPayload(SyncError):
    """The request succeeded but the body holds no usable CSV rows."""

    kind = "invalid_payload"
