"""Data models for Notion content blocks.

A Block is a tagged union: ``kind`` selects which payload variant is
populated. Kinds outside the supported set map to BlockKind.UNSUPPORTED with
an EmptyPayload, so the mapping from the remote schema is total.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union


class BlockKind(Enum):
    """Supported block kinds (values match the Notion ``type`` field)."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    EQUATION = "equation"
    DIVIDER = "divider"
    TABLE_OF_CONTENTS = "table_of_contents"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    PDF = "pdf"
    EMBED = "embed"
    BOOKMARK = "bookmark"
    LINK_PREVIEW = "link_preview"
    LINK_TO_PAGE = "link_to_page"
    SYNCED_BLOCK = "synced_block"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    TABLE = "table"
    TABLE_ROW = "table_row"

    UNSUPPORTED = "unsupported"


HEADING_KINDS = {BlockKind.HEADING_1, BlockKind.HEADING_2, BlockKind.HEADING_3}

# Kinds whose children are resolved by listing the block's own id
NESTING_KINDS = {
    BlockKind.PARAGRAPH,
    BlockKind.HEADING_1,
    BlockKind.HEADING_2,
    BlockKind.HEADING_3,
    BlockKind.BULLETED_LIST_ITEM,
    BlockKind.NUMBERED_LIST_ITEM,
    BlockKind.TO_DO,
    BlockKind.TOGGLE,
    BlockKind.QUOTE,
    BlockKind.CALLOUT,
    BlockKind.COLUMN,
}


@dataclass
class Annotations:
    """Styling applied to one rich text span."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


@dataclass
class TextContent:
    content: str
    link: Optional[str] = None


@dataclass
class EquationContent:
    expression: str


@dataclass
class MentionContent:
    """Cross-reference mention. ``type`` says which target field is set."""

    type: str
    page_id: Optional[str] = None
    database_id: Optional[str] = None
    user_id: Optional[str] = None
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    url: Optional[str] = None


@dataclass
class RichText:
    """One styled run of text.

    Exactly one of ``text``, ``equation`` or ``mention`` is populated.

    Attributes:
        plain_text: Unstyled text of the span
        annotations: Bold/italic/strikethrough/underline/code/color
        href: Hyperlink target, if any
        text: Literal text segment
        equation: Inline equation
        mention: Mention of a page, database, user, date or link
    """

    plain_text: str
    annotations: Annotations = field(default_factory=Annotations)
    href: Optional[str] = None
    text: Optional[TextContent] = None
    equation: Optional[EquationContent] = None
    mention: Optional[MentionContent] = None


@dataclass
class FileObject:
    """A Notion file reference, either externally hosted or uploaded to Notion.

    Attributes:
        type: "external" or "file"
        url: Remote URL (uploaded files carry a signed, expiring URL)
        expiry_time: Expiry of a signed URL
        name: File name, when the source provides one
        local_path: Web path of the downloaded copy, set after a successful download
    """

    type: str
    url: str
    expiry_time: Optional[str] = None
    name: Optional[str] = None
    local_path: Optional[str] = None


@dataclass
class Icon:
    """Page, database or callout icon: an emoji or an image file."""

    type: str
    emoji: Optional[str] = None
    file: Optional[FileObject] = None


@dataclass
class EmptyPayload:
    pass


@dataclass
class TextPayload:
    rich_texts: List[RichText] = field(default_factory=list)
    color: str = "default"


@dataclass
class HeadingPayload:
    rich_texts: List[RichText] = field(default_factory=list)
    color: str = "default"
    is_toggleable: bool = False


@dataclass
class ToDoPayload:
    rich_texts: List[RichText] = field(default_factory=list)
    checked: bool = False
    color: str = "default"


@dataclass
class CalloutPayload:
    rich_texts: List[RichText] = field(default_factory=list)
    icon: Optional[Icon] = None
    color: str = "default"


@dataclass
class CodePayload:
    rich_texts: List[RichText] = field(default_factory=list)
    caption: List[RichText] = field(default_factory=list)
    language: str = "plain text"


@dataclass
class EquationPayload:
    expression: str = ""


@dataclass
class FilePayload:
    """Payload of image, video, file and pdf blocks."""

    file: Optional[FileObject] = None
    caption: List[RichText] = field(default_factory=list)

    @property
    def url(self) -> Optional[str]:
        return self.file.url if self.file else None


@dataclass
class UrlPayload:
    """Payload of embed, bookmark and link_preview blocks."""

    url: str = ""
    caption: List[RichText] = field(default_factory=list)


@dataclass
class LinkToPagePayload:
    type: str = "page_id"
    page_id: Optional[str] = None
    database_id: Optional[str] = None


@dataclass
class SyncedBlockPayload:
    """A synced block is an origin (owns its children) or a reference.

    Attributes:
        synced_from: Id of the origin block when this block is a reference
    """

    synced_from: Optional[str] = None

    @property
    def is_reference(self) -> bool:
        return self.synced_from is not None


@dataclass
class Column:
    id: str
    children: List['Block'] = field(default_factory=list)


@dataclass
class ColumnListPayload:
    columns: List[Column] = field(default_factory=list)


@dataclass
class TableCell:
    rich_texts: List[RichText] = field(default_factory=list)


@dataclass
class TableRow:
    id: str
    cells: List[TableCell] = field(default_factory=list)


@dataclass
class TableRowPayload:
    cells: List[TableCell] = field(default_factory=list)


@dataclass
class TablePayload:
    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False
    rows: List[TableRow] = field(default_factory=list)


Payload = Union[
    EmptyPayload,
    TextPayload,
    HeadingPayload,
    ToDoPayload,
    CalloutPayload,
    CodePayload,
    EquationPayload,
    FilePayload,
    UrlPayload,
    LinkToPagePayload,
    SyncedBlockPayload,
    ColumnListPayload,
    TableRowPayload,
    TablePayload,
]


@dataclass
class Block:
    """One content block and its resolved subtree.

    Column lists and tables keep their subtree in the payload
    (``ColumnListPayload.columns``, ``TablePayload.rows``); every other kind
    keeps it in ``children``.

    Attributes:
        id: Block id
        kind: Block kind tag
        has_children: Whether the source reports nested content
        payload: Kind-specific payload variant
        children: Resolved child blocks, in listing order
        raw_type: The source ``type`` string (differs from kind.value for UNSUPPORTED)
        children_error: Why child resolution failed; None if it succeeded or was not needed
    """

    id: str
    kind: BlockKind
    has_children: bool = False
    payload: Payload = field(default_factory=EmptyPayload)
    children: List['Block'] = field(default_factory=list)
    raw_type: str = ""
    children_error: Optional[str] = None


def walk_blocks(blocks: List[Block]) -> Iterator[Block]:
    """Yield every block of a tree depth-first, including column contents."""
    for block in blocks:
        yield block
        payload = block.payload
        if isinstance(payload, ColumnListPayload):
            for column in payload.columns:
                yield from walk_blocks(column.children)
        yield from walk_blocks(block.children)


@dataclass
class SubtreeFailure:
    """A block subtree that could not be resolved."""

    block_id: str
    error: str


@dataclass
class BlockTree:
    """Result of resolving one container.

    Attributes:
        container_id: The page or block whose children were resolved
        blocks: Top-level blocks in listing order
        failures: Subtrees left empty because resolution failed
    """

    container_id: str
    blocks: List[Block] = field(default_factory=list)
    failures: List[SubtreeFailure] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.failures
