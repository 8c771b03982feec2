"""Data models for the post catalog.

This module defines the records served to downstream renderers: one Post per
valid database page and one Database describing the catalog as a whole.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..blocks.models import FileObject, Icon


@dataclass
class Tag:
    """A multi-select option attached to a post."""
    name: str
    id: str = ""
    color: str = "default"


@dataclass
class Post:
    """A published blog post.

    A Post always has a non-empty title, a non-empty slug and a parseable
    date; records without them never become Posts.

    Attributes:
        page_id: Notion page id (root container of the post's blocks)
        title: Post title
        slug: URL slug (not guaranteed unique by the source)
        date: Publish date as given by the source (ISO 8601)
        tags: Tags in source order
        excerpt: Optional short summary
        icon: Optional page icon
        cover: Optional page cover image
        featured_image: Optional image from the FeaturedImage property
        rank: Curated ordering weight; 0 means unranked
        page_type: Optional page type label (e.g. "post")
    """
    page_id: str
    title: str
    slug: str
    date: str
    tags: List[Tag] = field(default_factory=list)
    excerpt: str = ""
    icon: Optional[Icon] = None
    cover: Optional[FileObject] = None
    featured_image: Optional[FileObject] = None
    rank: float = 0
    page_type: Optional[str] = None

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]


@dataclass
class Database:
    """Metadata of the whole catalog."""
    title: str = ""
    description: str = ""
    icon: Optional[Icon] = None
    cover: Optional[FileObject] = None
