"""Command-line interface for Notion blog sync.

This package provides the `notion-blog-sync` CLI tool that loads the post
catalog, resolves every post's block tree, downloads referenced images and
exports the result, with progress indication and error handling.
"""

from .sync_command import SyncCommand
from .config import ConfigLoader
from .models import ExitCode, SyncSettings, SyncReport, PostFailure
from .errors import (
    CLIError,
    ConfigError,
    ConfigNotFoundError,
)

__all__ = [
    'SyncCommand',
    'ConfigLoader',
    'ExitCode',
    'SyncSettings',
    'SyncReport',
    'PostFailure',
    'CLIError',
    'ConfigError',
    'ConfigNotFoundError',
]
