"""Retry policy for Notion API calls.

This module provides a generic "retry unless client error" policy applied at
the transport boundary. Client errors (malformed, unauthorized, not found)
fail fast; everything else is re-invoked unchanged up to a small bound with
exponential backoff (1s, 2s, ...). It has no knowledge of pagination or
block semantics.
"""

import time
import logging
from typing import Callable, Optional, TypeVar
from functools import wraps

from .errors import ClientError, SyncFailure

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_RETRIES = 2


def is_transient_error(exception: BaseException) -> bool:
    """Check if an exception should be retried.

    Args:
        exception: The exception to check

    Returns:
        False for ClientError and its subclasses, True otherwise
    """
    return not isinstance(exception, ClientError)


class RetryPolicy:
    """Retries a callable on transient failures.

    Attributes:
        max_retries: Number of retries after the first attempt (attempts = max_retries + 1)
        is_retryable: Predicate deciding whether an exception is worth retrying
        backoff_base: Seconds to wait before the first retry, doubled each retry

    Example:
        >>> policy = RetryPolicy(max_retries=2)
        >>> result = policy.call(api.blocks.children.list, block_id="...")
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        is_retryable: Callable[[BaseException], bool] = is_transient_error,
        backoff_base: float = 1.0,
    ):
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        self.max_retries = max_retries
        self.is_retryable = is_retryable
        self.backoff_base = backoff_base

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def call(self, func: Callable[..., T], *args, **kwargs) -> T:
        """Execute func, retrying transient failures.

        Args:
            func: The function to execute with retry logic
            *args: Positional arguments to pass to the function
            **kwargs: Keyword arguments to pass to the function

        Returns:
            The return value of the function

        Raises:
            SyncFailure: If a transient failure persists after max_retries retries
            Other exceptions: Non-retryable errors are passed through immediately
        """
        last_error: Optional[BaseException] = None

        for retry_num in range(self.max_attempts):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if not self.is_retryable(e):
                    raise

                last_error = e

                if retry_num >= self.max_retries:
                    logger.error(
                        f"Transient failure persisted after {self.max_retries} retries, giving up: {e}"
                    )
                    raise SyncFailure(
                        f"Notion API failure (after {self.max_retries} retries): {e}",
                        attempts=self.max_attempts,
                    ) from e

                wait_time = self.backoff_base * (2 ** retry_num)
                logger.info(
                    f"Transient failure ({e}), retrying in {wait_time}s "
                    f"(retry {retry_num + 1}/{self.max_retries})"
                )
                if wait_time > 0:
                    time.sleep(wait_time)

        # Only reachable when max_attempts is zero, which __init__ forbids
        raise SyncFailure(f"Notion API failure: {last_error}", attempts=self.max_attempts)

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        """Decorator form of call().

        Example:
            >>> @RetryPolicy(max_retries=2)
            ... def fetch_block(block_id: str):
            ...     return client.blocks.retrieve(block_id=block_id)
        """
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return self.call(func, *args, **kwargs)

        return wrapper
