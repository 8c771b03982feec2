"""API wrapper for the Notion REST API.

This module wraps the notion-client SDK and provides error translation from
SDK/HTTP exceptions to our typed exception hierarchy. Every call goes
through the retry policy, so client errors fail fast and transient faults
are retried a bounded number of times.
"""

import logging
import re
from typing import Dict, Any, Optional, List

import httpx
from notion_client import Client
from notion_client.errors import RequestTimeoutError

from .auth import Authenticator
from .errors import (
    BadRequestError,
    InvalidCredentialsError,
    ObjectNotFoundError,
    APIUnreachableError,
    RateLimitedError,
    TransientError,
)
from .retry_logic import RetryPolicy

logger = logging.getLogger(__name__)

NOTION_API_ENDPOINT = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
MAX_PAGE_SIZE = 100

# SDK error codes that describe a request that will never succeed as sent
_BAD_REQUEST_CODES = {'invalid_json', 'invalid_request_url', 'invalid_request', 'validation_error'}
_AUTH_CODES = {'unauthorized', 'restricted_resource'}


class APIWrapper:
    """Wrapper around the notion-client SDK with error translation.

    This class provides a thin wrapper over the Notion API client that:
    1. Handles authentication using the Authenticator
    2. Translates HTTP errors to typed exceptions
    3. Applies the retry policy uniformly to every call
    4. Enforces a per-call timeout

    Example:
        >>> auth = Authenticator()
        >>> api = APIWrapper(auth)
        >>> page = api.list_block_children("0f1d...")
    """

    def __init__(
        self,
        authenticator: Authenticator,
        page_size: int = MAX_PAGE_SIZE,
        timeout_ms: int = 10000,
        retry_policy: Optional[RetryPolicy] = None,
        notion_version: str = DEFAULT_NOTION_VERSION,
    ):
        """Initialize the API wrapper with authentication credentials.

        Args:
            authenticator: Authenticator instance for loading credentials
            page_size: Items requested per listing page (1-100)
            timeout_ms: Timeout applied to every outbound call
            retry_policy: Retry policy (defaults to 2 retries)
            notion_version: Notion-Version header sent with every request
        """
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
        self._authenticator = authenticator
        self._client: Optional[Client] = None
        self.page_size = page_size
        self.timeout_ms = timeout_ms
        self.retry_policy = retry_policy or RetryPolicy()
        self.notion_version = notion_version

    def _get_client(self) -> Client:
        """Get or create the Notion API client.

        Returns:
            Client: Initialized notion-client Client

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        if self._client is None:
            creds = self._authenticator.get_credentials()
            self._client = Client(
                auth=creds.token,
                timeout_ms=self.timeout_ms,
                notion_version=self.notion_version,
            )
        return self._client

    def _validate_id(self, object_id: str) -> str:
        """Validate that an object id looks like a Notion UUID.

        Args:
            object_id: Page, database or block id, dashed or undashed

        Returns:
            str: The stripped id

        Raises:
            ValueError: If object_id is not 32 hex digits
        """
        if not object_id or not str(object_id).strip():
            raise ValueError("object id cannot be empty")

        id_str = str(object_id).strip()
        if not re.match(r'^[0-9a-fA-F]{32}$', id_str.replace('-', '')):
            raise ValueError(
                f"Invalid object id format: '{object_id}'. "
                f"Notion ids are 32 hexadecimal digits."
            )
        return id_str

    def _sanitize_credentials(self, text: str) -> str:
        """Mask integration tokens in error messages.

        Example:
            >>> api._sanitize_credentials("token secret_abc123xyz rejected")
            "token ***REDACTED*** rejected"
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Bearer\s+[^\s\n\r]+',
            'Bearer ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'\b(secret|ntn)_[A-Za-z0-9]+',
            '***REDACTED***',
            sanitized
        )
        return sanitized

    def _translate_error(self, exception: Exception, operation: str, object_id: str = "unknown") -> Exception:
        """Translate SDK and HTTP exceptions to typed Notion exceptions.

        Args:
            exception: The original exception from the API client
            operation: Description of the operation that failed (for logging)
            object_id: Id the operation targeted, used for not-found errors

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        if isinstance(exception, (RequestTimeoutError, httpx.TimeoutException)):
            return APIUnreachableError(endpoint=NOTION_API_ENDPOINT, reason="request timed out")

        if isinstance(exception, httpx.TransportError):
            return APIUnreachableError(endpoint=NOTION_API_ENDPOINT, reason=type(exception).__name__)

        status = getattr(exception, 'status', None)
        if status is None and hasattr(exception, 'response'):
            status = getattr(exception.response, 'status_code', None)
        code = getattr(exception, 'code', None)
        code = getattr(code, 'value', code)

        safe_error_msg = self._sanitize_credentials(str(exception))

        if status == 429 or code == 'rate_limited':
            return RateLimitedError(operation)

        if status in (401, 403) or code in _AUTH_CODES:
            return InvalidCredentialsError(detail=safe_error_msg or "unauthorized", status=status or 401)

        if status == 404 or code == 'object_not_found':
            return ObjectNotFoundError(object_id)

        if (status is not None and 400 <= status < 500) or code in _BAD_REQUEST_CODES:
            return BadRequestError(operation, safe_error_msg)

        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        return TransientError(f"Notion API failure during {operation}: {safe_error_msg}", status=status)

    def _call(self, operation: str, object_id: str, func, **kwargs) -> Dict[str, Any]:
        def _invoke():
            try:
                return func(**kwargs)
            except Exception as e:
                raise self._translate_error(e, operation, object_id) from e

        return self.retry_policy.call(_invoke)

    def list_block_children(
        self,
        block_id: str,
        start_cursor: Optional[str] = None
    ) -> Dict[str, Any]:
        """Fetch one page of a block's (or page's) direct children.

        Args:
            block_id: The container id (page or block)
            start_cursor: Cursor from the previous page, None for the first

        Returns:
            Dict with ``results``, ``has_more`` and ``next_cursor``

        Raises:
            ObjectNotFoundError: If the container doesn't exist
            InvalidCredentialsError: If the token is invalid
            SyncFailure: If transient failures persist after retries
        """
        block_id = self._validate_id(block_id)
        kwargs: Dict[str, Any] = {'block_id': block_id, 'page_size': self.page_size}
        if start_cursor:
            kwargs['start_cursor'] = start_cursor

        logger.debug(f"Notion API: GET /blocks/{block_id}/children cursor={start_cursor}")
        client = self._get_client()
        return self._call(
            f"list_block_children({block_id})",
            block_id,
            client.blocks.children.list,
            **kwargs
        )

    def query_database(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        start_cursor: Optional[str] = None
    ) -> Dict[str, Any]:
        """Fetch one page of a database query.

        Args:
            database_id: The database id
            filter: Notion filter object
            sorts: Notion sort objects
            start_cursor: Cursor from the previous page, None for the first

        Returns:
            Dict with ``results``, ``has_more`` and ``next_cursor``

        Raises:
            ObjectNotFoundError: If the database doesn't exist or isn't shared
            BadRequestError: If the filter references unknown properties
            SyncFailure: If transient failures persist after retries
        """
        database_id = self._validate_id(database_id)
        body: Dict[str, Any] = {'page_size': self.page_size}
        if filter:
            body['filter'] = filter
        if sorts:
            body['sorts'] = sorts
        if start_cursor:
            body['start_cursor'] = start_cursor

        logger.debug(f"Notion API: POST /databases/{database_id}/query cursor={start_cursor}")
        client = self._get_client()
        return self._call(
            f"query_database({database_id})",
            database_id,
            client.request,
            path=f"databases/{database_id}/query",
            method="POST",
            body=body,
        )

    def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        """Fetch database metadata (title, description, icon, cover)."""
        database_id = self._validate_id(database_id)
        logger.debug(f"Notion API: GET /databases/{database_id}")
        client = self._get_client()
        return self._call(
            f"retrieve_database({database_id})",
            database_id,
            client.databases.retrieve,
            database_id=database_id,
        )

    def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        """Fetch a single block by id."""
        block_id = self._validate_id(block_id)
        logger.debug(f"Notion API: GET /blocks/{block_id}")
        client = self._get_client()
        return self._call(
            f"retrieve_block({block_id})",
            block_id,
            client.blocks.retrieve,
            block_id=block_id,
        )
