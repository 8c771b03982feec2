"""Block model, builder and recursive resolver.

This package turns raw Notion block records into a typed block tree.
"""

from .models import (
    Block,
    BlockKind,
    BlockTree,
    SubtreeFailure,
    RichText,
    FileObject,
    Icon,
    Column,
    TableRow,
    TableCell,
    walk_blocks,
)
from .block_builder import build_block, build_rich_text, build_file_object, build_icon
from .snapshot import SnapshotStore, SnapshotError
from .resolver import BlockResolver

__all__ = [
    'Block',
    'BlockKind',
    'BlockTree',
    'SubtreeFailure',
    'RichText',
    'FileObject',
    'Icon',
    'Column',
    'TableRow',
    'TableCell',
    'walk_blocks',
    'build_block',
    'build_rich_text',
    'build_file_object',
    'build_icon',
    'SnapshotStore',
    'SnapshotError',
    'BlockResolver',
]
