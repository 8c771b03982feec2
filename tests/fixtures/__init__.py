"""Test fixtures for Notion sync tests.

This module provides builders for raw Notion API records (blocks, rich
text, list envelopes, database pages) and a fake block listing source.
"""

from .notion_records import (
    FakeBlockSource,
    make_block,
    make_database,
    make_envelope,
    make_image,
    make_paragraph,
    make_post_page,
    make_synced,
    make_table,
    make_table_row,
    make_text,
    new_id,
)

__all__ = [
    "FakeBlockSource",
    "make_block",
    "make_database",
    "make_envelope",
    "make_image",
    "make_paragraph",
    "make_post_page",
    "make_synced",
    "make_table",
    "make_table_row",
    "make_text",
    "new_id",
]
