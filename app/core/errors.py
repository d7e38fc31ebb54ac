# app/core/errors.py
"""
Domain errors for calls to the managed database.

Repositories wrap SQLAlchemy failures in these so services can decide,
at the call site, whether a failure becomes a fallback value, a notice
attached to the response, or an HTTP error.
"""


class RemoteStoreError(Exception):
    """Base class for failures talking to the remote (Supabase) store."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class FetchError(RemoteStoreError):
    """A read from the remote store failed (network, auth, query)."""


class WriteError(RemoteStoreError):
    """An insert/update/delete against the remote store failed."""
