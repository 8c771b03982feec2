"""Typed exception hierarchy for Notion-related errors.

This module defines all custom exceptions used by the Notion client layer.
Errors are split by retry behaviour: ClientError subclasses are terminal and
never retried, TransientError subclasses are retried by the retry policy, and
SyncFailure is what callers see once retries are exhausted.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all notion-blog-sync errors.

    Use this to catch any application-level error from the sync engine.
    """
    pass


class NotionError(SyncError):
    """Base exception for all Notion API errors."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ClientError(NotionError):
    """Raised for malformed, unauthorized or not-found requests.

    Client errors are terminal: the request would fail the same way again,
    so they are surfaced immediately without retrying.
    """
    pass


class BadRequestError(ClientError):
    """Raised when the API rejects a request as malformed (HTTP 400)."""

    def __init__(self, operation: str, reason: str = ""):
        message = f"Bad request during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(message, status=400)
        self.operation = operation
        self.reason = reason


class InvalidCredentialsError(ClientError):
    """Raised when the integration token is missing, invalid or lacks access."""

    def __init__(self, detail: str = "integration token is invalid", status: int = 401):
        super().__init__(f"Notion authentication failed ({detail})", status=status)
        self.detail = detail


class ObjectNotFoundError(ClientError):
    """Raised when a page, database or block does not exist or is not shared."""

    def __init__(self, object_id: str):
        super().__init__(f"Object {object_id} not found", status=404)
        self.object_id = object_id


class TransientError(NotionError):
    """Raised for failures that may succeed on a later attempt.

    Covers server-side faults (5xx) and any otherwise unclassified failure.
    """
    pass


class APIUnreachableError(TransientError):
    """Raised on timeouts and connection faults."""

    def __init__(self, endpoint: str, reason: str = ""):
        message = f"Notion API is not reachable at {endpoint}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.endpoint = endpoint


class RateLimitedError(TransientError):
    """Raised when the API answers 429 Too Many Requests."""

    def __init__(self, operation: str):
        super().__init__(f"Rate limited during {operation}", status=429)
        self.operation = operation


class SyncFailure(SyncError):
    """Raised when a transient failure persists after all retries.

    The failure is scoped to the unit that was being fetched (one listing
    page, one block subtree, one database query).
    """

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts
