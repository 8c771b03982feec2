"""Unit tests for notion_api.retry_logic module."""

import pytest
from unittest.mock import patch, MagicMock

from src.notion_api.errors import (
    APIUnreachableError,
    BadRequestError,
    InvalidCredentialsError,
    ObjectNotFoundError,
    RateLimitedError,
    SyncFailure,
    TransientError,
)
from src.notion_api.retry_logic import RetryPolicy, is_transient_error


class TestIsTransientError:
    """Test cases for is_transient_error function."""

    def test_client_errors_are_not_retried(self):
        """Bad request, auth and not-found errors are terminal."""
        assert is_transient_error(BadRequestError("query")) is False
        assert is_transient_error(InvalidCredentialsError()) is False
        assert is_transient_error(ObjectNotFoundError("abc")) is False

    def test_transient_errors_are_retried(self):
        """Rate limits, unreachable API and server faults are retried."""
        assert is_transient_error(RateLimitedError("query")) is True
        assert is_transient_error(APIUnreachableError("https://api.notion.com")) is True
        assert is_transient_error(TransientError("500", status=500)) is True

    def test_unclassified_errors_are_retried(self):
        """Anything that is not a client error counts as transient."""
        assert is_transient_error(RuntimeError("boom")) is True


class TestRetryPolicy:
    """Test cases for RetryPolicy.call."""

    def test_success_on_first_attempt(self):
        """call should return result on first successful attempt."""
        mock_func = MagicMock(return_value="success")

        result = RetryPolicy().call(mock_func, "arg1", kwarg1="value1")

        assert result == "success"
        mock_func.assert_called_once_with("arg1", kwarg1="value1")

    @patch('time.sleep')
    def test_retries_transient_error_then_succeeds(self, mock_sleep):
        """Transient failures are retried with 1s then 2s backoff."""
        error = TransientError("server error", status=503)
        mock_func = MagicMock(side_effect=[error, error, "success"])

        result = RetryPolicy(max_retries=2).call(mock_func)

        assert result == "success"
        assert mock_func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch('time.sleep')
    def test_exhaustion_raises_sync_failure(self, mock_sleep):
        """Persistent transient failure becomes SyncFailure after max_retries + 1 attempts."""
        error = RateLimitedError("list")
        mock_func = MagicMock(side_effect=error)

        with pytest.raises(SyncFailure) as exc_info:
            RetryPolicy(max_retries=2).call(mock_func)

        assert mock_func.call_count == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.__cause__ is error

    @patch('time.sleep')
    def test_client_error_fails_fast(self, mock_sleep):
        """Client errors propagate unchanged after a single attempt."""
        error = ObjectNotFoundError("abc")
        mock_func = MagicMock(side_effect=error)

        with pytest.raises(ObjectNotFoundError):
            RetryPolicy(max_retries=2).call(mock_func)

        mock_func.assert_called_once()
        mock_sleep.assert_not_called()

    @patch('time.sleep')
    def test_zero_retries_makes_one_attempt(self, mock_sleep):
        """max_retries=0 means a single attempt and no sleep."""
        mock_func = MagicMock(side_effect=TransientError("down"))

        with pytest.raises(SyncFailure):
            RetryPolicy(max_retries=0).call(mock_func)

        mock_func.assert_called_once()
        mock_sleep.assert_not_called()

    def test_negative_retries_rejected(self):
        """A negative retry count is a programming error."""
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)

    def test_max_attempts(self):
        """max_attempts is one more than max_retries."""
        assert RetryPolicy(max_retries=2).max_attempts == 3

    @patch('time.sleep')
    def test_custom_predicate(self, mock_sleep):
        """A custom is_retryable predicate decides what is retried."""
        mock_func = MagicMock(side_effect=[KeyError("x"), "ok"])
        policy = RetryPolicy(max_retries=1, is_retryable=lambda e: isinstance(e, KeyError))

        assert policy.call(mock_func) == "ok"

    @patch('time.sleep')
    def test_decorator_form(self, mock_sleep):
        """A policy instance can decorate a function."""
        calls = []

        @RetryPolicy(max_retries=1)
        def flaky(value):
            calls.append(value)
            if len(calls) == 1:
                raise TransientError("once")
            return value * 2

        assert flaky(21) == 42
        assert calls == [21, 21]
        assert flaky.__name__ == "flaky"
