"""Post catalog for the blog database.

This package maps database pages to Post records and serves catalog queries
from a process-lifetime, single-flight cache.
"""

from .models import Post, Tag, Database
from .errors import CatalogError, InvalidPostError
from .post_builder import build_post, build_database
from .sync_cache import SyncCache
from .post_catalog import PostCatalog

__all__ = [
    'Post',
    'Tag',
    'Database',
    'CatalogError',
    'InvalidPostError',
    'build_post',
    'build_database',
    'SyncCache',
    'PostCatalog',
]
