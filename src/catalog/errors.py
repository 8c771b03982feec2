"""Exceptions raised while building the post catalog."""

from typing import List

from ..notion_api.errors import SyncError


class CatalogError(SyncError):
    """Base exception for catalog errors."""
    pass


class InvalidPostError(CatalogError):
    """Raised when a database page lacks a title, slug or parseable date.

    Invalid pages are excluded from the catalog, never surfaced as fatal.
    """

    def __init__(self, page_id: str, missing: List[str]):
        super().__init__(
            f"Page {page_id} is not a valid post (missing {', '.join(missing)})"
        )
        self.page_id = page_id
        self.missing = missing
