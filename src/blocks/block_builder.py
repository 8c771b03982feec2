"""Mapping from raw Notion block records to typed Block objects.

Pure functions, no I/O. ``build_block`` reads the ``type`` tag and
dispatches to an extractor that reads only the fields of that kind.
Unknown kinds become BlockKind.UNSUPPORTED blocks instead of failing.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .models import (
    Annotations,
    Block,
    BlockKind,
    CalloutPayload,
    CodePayload,
    EmptyPayload,
    EquationContent,
    EquationPayload,
    FileObject,
    FilePayload,
    HeadingPayload,
    Icon,
    LinkToPagePayload,
    MentionContent,
    Payload,
    RichText,
    SyncedBlockPayload,
    TableCell,
    TablePayload,
    TableRowPayload,
    TextContent,
    TextPayload,
    ToDoPayload,
    UrlPayload,
    ColumnListPayload,
)

logger = logging.getLogger(__name__)

RawBlock = Dict[str, Any]


def build_annotations(raw: Optional[Dict[str, Any]]) -> Annotations:
    raw = raw or {}
    return Annotations(
        bold=bool(raw.get('bold', False)),
        italic=bool(raw.get('italic', False)),
        strikethrough=bool(raw.get('strikethrough', False)),
        underline=bool(raw.get('underline', False)),
        code=bool(raw.get('code', False)),
        color=raw.get('color') or 'default',
    )


def _build_mention(raw: Dict[str, Any]) -> MentionContent:
    mention_type = raw.get('type', '')
    target = raw.get(mention_type) or {}
    mention = MentionContent(type=mention_type)

    if mention_type == 'page':
        mention.page_id = target.get('id')
    elif mention_type == 'database':
        mention.database_id = target.get('id')
    elif mention_type == 'user':
        mention.user_id = target.get('id')
    elif mention_type == 'date':
        mention.date_start = target.get('start')
        mention.date_end = target.get('end')
    elif mention_type == 'link_preview':
        mention.url = target.get('url')

    return mention


def build_rich_text(raw: Dict[str, Any]) -> RichText:
    """Map one rich text run.

    Exactly one of text, equation or mention is populated. A run of an
    unknown type is kept as literal text from its plain_text.

    Args:
        raw: A single element of a Notion ``rich_text`` array

    Returns:
        RichText with shared fields and one payload variant
    """
    run_type = raw.get('type', 'text')
    plain_text = raw.get('plain_text') or ''
    rich_text = RichText(
        plain_text=plain_text,
        annotations=build_annotations(raw.get('annotations')),
        href=raw.get('href'),
    )

    if run_type == 'equation':
        rich_text.equation = EquationContent(
            expression=(raw.get('equation') or {}).get('expression', '')
        )
    elif run_type == 'mention':
        rich_text.mention = _build_mention(raw.get('mention') or {})
    else:
        text = raw.get('text') or {}
        link = text.get('link') or {}
        rich_text.text = TextContent(
            content=text.get('content', plain_text),
            link=link.get('url'),
        )

    return rich_text


def build_rich_texts(raw_list: Optional[List[Dict[str, Any]]]) -> List[RichText]:
    return [build_rich_text(raw) for raw in raw_list or []]


def build_file_object(raw: Optional[Dict[str, Any]]) -> Optional[FileObject]:
    """Resolve a file reference, preferring an external URL over an uploaded file.

    Args:
        raw: Notion file object (``{"type": ..., "external": {...}, "file": {...}}``)

    Returns:
        FileObject, or None when neither variant carries a URL
    """
    if not raw:
        return None

    external = raw.get('external') or {}
    if external.get('url'):
        return FileObject(type='external', url=external['url'], name=raw.get('name'))

    hosted = raw.get('file') or {}
    if hosted.get('url'):
        return FileObject(
            type='file',
            url=hosted['url'],
            expiry_time=hosted.get('expiry_time'),
            name=raw.get('name'),
        )

    return None


def build_icon(raw: Optional[Dict[str, Any]]) -> Optional[Icon]:
    if not raw:
        return None
    if raw.get('type') == 'emoji':
        return Icon(type='emoji', emoji=raw.get('emoji'))
    file = build_file_object(raw)
    if file is None:
        return None
    return Icon(type=file.type, file=file)


def _text(data: Dict[str, Any]) -> Payload:
    return TextPayload(
        rich_texts=build_rich_texts(data.get('rich_text')),
        color=data.get('color') or 'default',
    )


def _heading(data: Dict[str, Any]) -> Payload:
    return HeadingPayload(
        rich_texts=build_rich_texts(data.get('rich_text')),
        color=data.get('color') or 'default',
        is_toggleable=bool(data.get('is_toggleable', False)),
    )


def _to_do(data: Dict[str, Any]) -> Payload:
    return ToDoPayload(
        rich_texts=build_rich_texts(data.get('rich_text')),
        checked=bool(data.get('checked', False)),
        color=data.get('color') or 'default',
    )


def _callout(data: Dict[str, Any]) -> Payload:
    return CalloutPayload(
        rich_texts=build_rich_texts(data.get('rich_text')),
        icon=build_icon(data.get('icon')),
        color=data.get('color') or 'default',
    )


def _code(data: Dict[str, Any]) -> Payload:
    return CodePayload(
        rich_texts=build_rich_texts(data.get('rich_text')),
        caption=build_rich_texts(data.get('caption')),
        language=data.get('language') or 'plain text',
    )


def _equation(data: Dict[str, Any]) -> Payload:
    return EquationPayload(expression=data.get('expression', ''))


def _file(data: Dict[str, Any]) -> Payload:
    return FilePayload(
        file=build_file_object(data),
        caption=build_rich_texts(data.get('caption')),
    )


def _url(data: Dict[str, Any]) -> Payload:
    return UrlPayload(
        url=data.get('url') or '',
        caption=build_rich_texts(data.get('caption')),
    )


def _link_to_page(data: Dict[str, Any]) -> Payload:
    return LinkToPagePayload(
        type=data.get('type', 'page_id'),
        page_id=data.get('page_id'),
        database_id=data.get('database_id'),
    )


def _synced_block(data: Dict[str, Any]) -> Payload:
    synced_from = data.get('synced_from') or {}
    return SyncedBlockPayload(synced_from=synced_from.get('block_id'))


def _table(data: Dict[str, Any]) -> Payload:
    return TablePayload(
        table_width=int(data.get('table_width') or 0),
        has_column_header=bool(data.get('has_column_header', False)),
        has_row_header=bool(data.get('has_row_header', False)),
    )


def _table_row(data: Dict[str, Any]) -> Payload:
    return TableRowPayload(
        cells=[TableCell(rich_texts=build_rich_texts(cell)) for cell in data.get('cells') or []]
    )


def _column_list(data: Dict[str, Any]) -> Payload:
    return ColumnListPayload()


def _empty(data: Dict[str, Any]) -> Payload:
    return EmptyPayload()


_EXTRACTORS: Dict[BlockKind, Callable[[Dict[str, Any]], Payload]] = {
    BlockKind.PARAGRAPH: _text,
    BlockKind.BULLETED_LIST_ITEM: _text,
    BlockKind.NUMBERED_LIST_ITEM: _text,
    BlockKind.TOGGLE: _text,
    BlockKind.QUOTE: _text,
    BlockKind.HEADING_1: _heading,
    BlockKind.HEADING_2: _heading,
    BlockKind.HEADING_3: _heading,
    BlockKind.TO_DO: _to_do,
    BlockKind.CALLOUT: _callout,
    BlockKind.CODE: _code,
    BlockKind.EQUATION: _equation,
    BlockKind.IMAGE: _file,
    BlockKind.VIDEO: _file,
    BlockKind.FILE: _file,
    BlockKind.PDF: _file,
    BlockKind.EMBED: _url,
    BlockKind.BOOKMARK: _url,
    BlockKind.LINK_PREVIEW: _url,
    BlockKind.LINK_TO_PAGE: _link_to_page,
    BlockKind.SYNCED_BLOCK: _synced_block,
    BlockKind.COLUMN_LIST: _column_list,
    BlockKind.COLUMN: _empty,
    BlockKind.TABLE: _table,
    BlockKind.TABLE_ROW: _table_row,
    BlockKind.DIVIDER: _empty,
    BlockKind.TABLE_OF_CONTENTS: _empty,
}

_KINDS_BY_TYPE = {kind.value: kind for kind in _EXTRACTORS}


def build_block(raw: RawBlock) -> Block:
    """Map one raw Notion block record to a Block.

    Args:
        raw: A block object as returned by the Notion API

    Returns:
        Block with kind and payload populated; children are left empty

    Example:
        >>> block = build_block({"id": "...", "type": "divider", "divider": {}})
        >>> block.kind
        <BlockKind.DIVIDER: 'divider'>
    """
    raw_type = raw.get('type') or ''
    kind = _KINDS_BY_TYPE.get(raw_type, BlockKind.UNSUPPORTED)

    if kind is BlockKind.UNSUPPORTED:
        logger.debug(f"Unsupported block type '{raw_type}' ({raw.get('id')})")
        payload: Payload = EmptyPayload()
    else:
        payload = _EXTRACTORS[kind](raw.get(raw_type) or {})

    return Block(
        id=raw.get('id', ''),
        kind=kind,
        has_children=bool(raw.get('has_children', False)),
        payload=payload,
        raw_type=raw_type,
    )
