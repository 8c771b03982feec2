"""Cursor-based pagination over Notion list endpoints.

Every Notion list endpoint answers with the same envelope:
``{"results": [...], "has_more": bool, "next_cursor": str | None}``.
These helpers walk that envelope page by page, strictly sequentially.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

FetchPage = Callable[..., Dict[str, Any]]


def iter_pages(fetch_page: FetchPage, **params) -> Iterator[List[Dict[str, Any]]]:
    """Yield the results of each page in response order.

    Args:
        fetch_page: Callable accepting ``start_cursor`` plus ``params`` and
            returning one response envelope
        **params: Arguments passed unchanged to every call

    Yields:
        The ``results`` list of each page
    """
    cursor: Optional[str] = None
    page_num = 0

    while True:
        response = fetch_page(start_cursor=cursor, **params)
        page_num += 1
        results = response.get('results') or []
        logger.debug(f"Fetched page {page_num} with {len(results)} items")
        yield results

        cursor = response.get('next_cursor')
        if not response.get('has_more') or not cursor:
            break


def list_all(fetch_page: FetchPage, **params) -> List[Dict[str, Any]]:
    """Fetch every page and concatenate the results.

    Items are neither reordered nor deduplicated.

    Args:
        fetch_page: Callable accepting ``start_cursor`` plus ``params``
        **params: Arguments passed unchanged to every call

    Returns:
        All items across all pages, in response order

    Example:
        >>> blocks = list_all(api.list_block_children, block_id=page_id)
    """
    items: List[Dict[str, Any]] = []
    for results in iter_pages(fetch_page, **params):
        items.extend(results)
    return items
