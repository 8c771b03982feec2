"""Data models for CLI operations.

This module defines the settings and result records used by the CLI.
All models use dataclasses, following the patterns of src/blocks/models.py.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional

from src.blocks.models import Block, SubtreeFailure
from src.catalog.models import Database, Post


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Every post, subtree and image synced
    - GENERAL_ERROR (1): Configuration or unexpected error
    - PARTIAL (2): Sync finished but some subtrees, posts or images failed
    - AUTH_ERROR (3): Token missing/invalid or database not shared
    - NETWORK_ERROR (4): Notion API unreachable after retries

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PARTIAL = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class SyncSettings:
    """Tunables for one sync run.

    Attributes:
        notion_token: Notion integration token (NOTION_TOKEN)
        database_id: Blog database id (DATABASE_ID)
        page_size: Items per listing request, 1-100
        request_timeout_ms: Timeout for each outbound call (REQUEST_TIMEOUT_MS)
        posts_per_page: Catalog page size (NUMBER_OF_POSTS_PER_PAGE)
        max_retries: Retries after the first attempt for transient failures
        max_workers: Posts resolved / images downloaded concurrently
        image_dir: Root directory for downloaded images
        image_width: Resize images to this width (JPEG); None keeps originals
        snapshot_dir: Read block listings from this directory when present
        save_snapshots: Write every block listing to snapshot_dir
        notion_version: Notion-Version header
    """
    notion_token: Optional[str] = None
    database_id: Optional[str] = None
    page_size: int = 100
    request_timeout_ms: int = 10000
    posts_per_page: int = 10
    max_retries: int = 2
    max_workers: int = 10
    image_dir: str = "public/notion"
    image_width: Optional[int] = None
    snapshot_dir: Optional[str] = None
    save_snapshots: bool = False
    notion_version: str = "2022-06-28"


@dataclass
class PostFailure:
    """A post whose block tree could not be listed at all."""
    page_id: str
    slug: str
    error: str


@dataclass
class SyncReport:
    """Everything one run produced.

    Attributes:
        database: Catalog metadata
        posts: Posts in catalog order
        blocks: Resolved top-level blocks keyed by post page id
        subtree_failures: Failed subtrees keyed by post page id
        post_failures: Posts whose root listing failed
        images_downloaded: Number of images stored locally
        images_skipped: URLs that could not be stored
    """
    database: Optional[Database] = None
    posts: List[Post] = field(default_factory=list)
    blocks: Dict[str, List[Block]] = field(default_factory=dict)
    subtree_failures: Dict[str, List[SubtreeFailure]] = field(default_factory=dict)
    post_failures: List[PostFailure] = field(default_factory=list)
    images_downloaded: int = 0
    images_skipped: List[str] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(
            self.post_failures
            or self.images_skipped
            or any(self.subtree_failures.values())
        )
