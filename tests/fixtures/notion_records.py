"""Raw Notion API records for testing.

Builders for the JSON shapes the Notion API returns: rich text runs, blocks,
list envelopes and database pages. Ids are generated as 32 hex digits so
they pass APIWrapper id validation.

Example:
    >>> page = make_post_page("hello-world", date="2024-01-02")
    >>> envelope = make_envelope([make_paragraph("Hi")])
"""

import itertools
from typing import Any, Dict, List, Optional

_counter = itertools.count(1)


def new_id() -> str:
    """Return a fresh dashed 32-hex-digit id."""
    raw = f"{next(_counter):032x}"
    return f"{raw[:8]}-{raw[8:12]}-{raw[12:16]}-{raw[16:20]}-{raw[20:]}"


def make_text(content: str, bold: bool = False, href: Optional[str] = None) -> Dict[str, Any]:
    return {
        'type': 'text',
        'text': {'content': content, 'link': {'url': href} if href else None},
        'annotations': {
            'bold': bold,
            'italic': False,
            'strikethrough': False,
            'underline': False,
            'code': False,
            'color': 'default',
        },
        'plain_text': content,
        'href': href,
    }


def make_block(
    block_type: str,
    data: Optional[Dict[str, Any]] = None,
    block_id: Optional[str] = None,
    has_children: bool = False,
) -> Dict[str, Any]:
    return {
        'object': 'block',
        'id': block_id or new_id(),
        'type': block_type,
        'has_children': has_children,
        block_type: data if data is not None else {},
    }


def make_paragraph(text: str, block_id: Optional[str] = None, has_children: bool = False) -> Dict[str, Any]:
    return make_block(
        'paragraph',
        {'rich_text': [make_text(text)], 'color': 'default'},
        block_id=block_id,
        has_children=has_children,
    )


def make_image(url: str, hosted: bool = True, block_id: Optional[str] = None) -> Dict[str, Any]:
    if hosted:
        data = {'type': 'file', 'file': {'url': url, 'expiry_time': '2030-01-01T00:00:00.000Z'}, 'caption': []}
    else:
        data = {'type': 'external', 'external': {'url': url}, 'caption': []}
    return make_block('image', data, block_id=block_id)


def make_synced(block_id: Optional[str] = None, synced_from: Optional[str] = None) -> Dict[str, Any]:
    data = {'synced_from': {'type': 'block_id', 'block_id': synced_from} if synced_from else None}
    return make_block('synced_block', data, block_id=block_id, has_children=True)


def make_table(width: int, block_id: Optional[str] = None) -> Dict[str, Any]:
    return make_block(
        'table',
        {'table_width': width, 'has_column_header': True, 'has_row_header': False},
        block_id=block_id,
        has_children=True,
    )


def make_table_row(cells: List[str], block_id: Optional[str] = None) -> Dict[str, Any]:
    return make_block(
        'table_row',
        {'cells': [[make_text(cell)] for cell in cells]},
        block_id=block_id,
    )


def make_envelope(
    results: List[Dict[str, Any]],
    next_cursor: Optional[str] = None,
) -> Dict[str, Any]:
    """Wrap results in a list response envelope."""
    return {
        'object': 'list',
        'results': results,
        'has_more': next_cursor is not None,
        'next_cursor': next_cursor,
    }


def make_post_page(
    slug: str,
    title: Optional[str] = None,
    date: str = "2024-01-01",
    tags: Optional[List[str]] = None,
    rank: Optional[float] = None,
    page_type: Optional[str] = "post",
    featured_image_url: Optional[str] = None,
    page_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a page object from the blog database query."""
    title = slug.replace('-', ' ').title() if title is None else title
    properties: Dict[str, Any] = {
        'Page': {'type': 'title', 'title': [make_text(title)] if title else []},
        'Slug': {'type': 'rich_text', 'rich_text': [make_text(slug)] if slug else []},
        'Date': {'type': 'date', 'date': {'start': date, 'end': None} if date else None},
        'Tags': {
            'type': 'multi_select',
            'multi_select': [
                {'id': f"tag-{name}", 'name': name, 'color': 'blue'} for name in tags or []
            ],
        },
        'Excerpt': {'type': 'rich_text', 'rich_text': [make_text(f"About {slug}")]},
        'Rank': {'type': 'number', 'number': rank},
        'Published': {'type': 'checkbox', 'checkbox': True},
        'PageType': {'type': 'select', 'select': {'name': page_type} if page_type else None},
        'FeaturedImage': {'type': 'files', 'files': []},
    }
    if featured_image_url:
        properties['FeaturedImage']['files'] = [
            {'name': 'cover.png', 'type': 'file', 'file': {'url': featured_image_url, 'expiry_time': None}}
        ]

    return {
        'object': 'page',
        'id': page_id or new_id(),
        'icon': {'type': 'emoji', 'emoji': '📝'},
        'cover': None,
        'properties': properties,
    }


def make_database(title: str = "Blog") -> Dict[str, Any]:
    return {
        'object': 'database',
        'id': new_id(),
        'title': [make_text(title)],
        'description': [make_text("Posts")],
        'icon': {'type': 'emoji', 'emoji': '📚'},
        'cover': None,
    }


class FakeBlockSource:
    """Stands in for APIWrapper.list_block_children.

    Serves children per container from a dict, split into pages of
    ``page_size``. Containers listed in ``failing`` raise the given error.

    Example:
        >>> source = FakeBlockSource({"page": [make_paragraph("Hi")]})
        >>> api = Mock(); api.list_block_children.side_effect = source
    """

    def __init__(self, children: Dict[str, List[Dict[str, Any]]], page_size: int = 100,
                 failing: Optional[Dict[str, Exception]] = None):
        self.children = children
        self.page_size = page_size
        self.failing = failing or {}
        self.calls: List[str] = []

    def __call__(self, block_id: str, start_cursor: Optional[str] = None) -> Dict[str, Any]:
        self.calls.append(block_id)
        if block_id in self.failing:
            raise self.failing[block_id]

        items = self.children.get(block_id, [])
        start = int(start_cursor) if start_cursor else 0
        end = start + self.page_size
        next_cursor = str(end) if end < len(items) else None
        return make_envelope(items[start:end], next_cursor)
