"""Notion client layer for read-only content sync.

This package wraps the Notion REST API with typed errors, a uniform retry
policy and cursor pagination.
"""

from .errors import (
    SyncError,
    NotionError,
    ClientError,
    BadRequestError,
    InvalidCredentialsError,
    ObjectNotFoundError,
    TransientError,
    APIUnreachableError,
    RateLimitedError,
    SyncFailure,
)
from .auth import Authenticator, Credentials
from .retry_logic import RetryPolicy, is_transient_error
from .pagination import iter_pages, list_all
from .api_wrapper import APIWrapper

__all__ = [
    "SyncError",
    "NotionError",
    "ClientError",
    "BadRequestError",
    "InvalidCredentialsError",
    "ObjectNotFoundError",
    "TransientError",
    "APIUnreachableError",
    "RateLimitedError",
    "SyncFailure",
    "Authenticator",
    "Credentials",
    "RetryPolicy",
    "is_transient_error",
    "iter_pages",
    "list_all",
    "APIWrapper",
]
