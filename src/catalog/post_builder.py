"""Mapping from raw database pages to Post and Database records.

The blog database uses one fixed property set; the property names are
defined below. Icon, cover and featured image are always populated when the
source provides them.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..blocks.block_builder import build_file_object, build_icon
from .errors import InvalidPostError
from .models import Database, Post, Tag

logger = logging.getLogger(__name__)

PROP_TITLE = 'Page'
PROP_SLUG = 'Slug'
PROP_DATE = 'Date'
PROP_TAGS = 'Tags'
PROP_EXCERPT = 'Excerpt'
PROP_FEATURED_IMAGE = 'FeaturedImage'
PROP_RANK = 'Rank'
PROP_PUBLISHED = 'Published'
PROP_PAGE_TYPE = 'PageType'


def join_plain_text(rich_texts: Optional[List[Dict[str, Any]]]) -> str:
    """Concatenate the plain_text of a rich text array."""
    return ''.join(rt.get('plain_text', '') for rt in rich_texts or [])


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 date or datetime as sent by Notion.

    Returns:
        datetime, or None if value is empty or unparseable
    """
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def _property(properties: Dict[str, Any], name: str) -> Dict[str, Any]:
    return properties.get(name) or {}


def build_post(page: Dict[str, Any]) -> Post:
    """Build a Post from a database page.

    Args:
        page: Page object from a database query

    Returns:
        Post with every available property mapped

    Raises:
        InvalidPostError: If title, slug or a parseable date is missing
    """
    page_id = page.get('id', '')
    properties = page.get('properties') or {}

    title = join_plain_text(_property(properties, PROP_TITLE).get('title')).strip()
    slug = join_plain_text(_property(properties, PROP_SLUG).get('rich_text')).strip()
    date_value = (_property(properties, PROP_DATE).get('date') or {}).get('start') or ''

    missing = []
    if not title:
        missing.append('title')
    if not slug:
        missing.append('slug')
    if parse_date(date_value) is None:
        missing.append('date')
    if missing:
        raise InvalidPostError(page_id, missing)

    tags = [
        Tag(name=option.get('name', ''), id=option.get('id', ''), color=option.get('color') or 'default')
        for option in _property(properties, PROP_TAGS).get('multi_select') or []
    ]

    files = _property(properties, PROP_FEATURED_IMAGE).get('files') or []
    featured_image = build_file_object(files[0]) if files else None

    page_type = (_property(properties, PROP_PAGE_TYPE).get('select') or {}).get('name')

    return Post(
        page_id=page_id,
        title=title,
        slug=slug,
        date=date_value,
        tags=tags,
        excerpt=join_plain_text(_property(properties, PROP_EXCERPT).get('rich_text')),
        icon=build_icon(page.get('icon')),
        cover=build_file_object(page.get('cover')),
        featured_image=featured_image,
        rank=_property(properties, PROP_RANK).get('number') or 0,
        page_type=page_type,
    )


def build_database(raw: Dict[str, Any]) -> Database:
    """Build Database metadata from a retrieve-database response."""
    return Database(
        title=join_plain_text(raw.get('title')),
        description=join_plain_text(raw.get('description')),
        icon=build_icon(raw.get('icon')),
        cover=build_file_object(raw.get('cover')),
    )
