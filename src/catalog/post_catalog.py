"""Post catalog backed by the blog database.

This module fetches the published posts once per process and answers list,
lookup, paging and tag queries over the cached result without refetching.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from ..notion_api.api_wrapper import APIWrapper
from ..notion_api.pagination import list_all
from .errors import InvalidPostError
from .models import Database, Post, Tag
from .post_builder import PROP_DATE, PROP_PUBLISHED, build_database, build_post
from .sync_cache import SyncCache

logger = logging.getLogger(__name__)

DEFAULT_POSTS_PER_PAGE = 10

ALL_POSTS_KEY = 'all_posts'
DATABASE_KEY = 'database'
POST_PAGE_TYPE = 'post'


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


class PostCatalog:
    """Queries over the published posts of one database.

    Example:
        >>> catalog = PostCatalog(api, creds.database_id, SyncCache())
        >>> first_page = catalog.by_page(1)
        >>> post = catalog.by_slug("hello-world")
    """

    def __init__(
        self,
        api: APIWrapper,
        database_id: str,
        cache: Optional[SyncCache] = None,
        posts_per_page: int = DEFAULT_POSTS_PER_PAGE,
        clock: Callable[[], date] = _today_utc,
    ):
        """Initialize the catalog.

        Args:
            api: APIWrapper used for the database query
            database_id: Id of the blog database
            cache: Cache shared for the process lifetime (a new one if omitted)
            posts_per_page: Page size for by_page / by_tag_and_page
            clock: Returns today's date; posts dated after it are excluded
        """
        if posts_per_page < 1:
            raise ValueError(f"posts_per_page must be positive, got {posts_per_page}")
        self._api = api
        self._database_id = database_id
        self._cache = cache if cache is not None else SyncCache()
        self.posts_per_page = posts_per_page
        self._clock = clock

    def _query_filter(self) -> dict:
        return {
            'and': [
                {'property': PROP_PUBLISHED, 'checkbox': {'equals': True}},
                {'property': PROP_DATE, 'date': {'on_or_before': self._clock().isoformat()}},
            ]
        }

    def _fetch_posts(self) -> List[Post]:
        logger.info(f"Fetching posts from database {self._database_id}")
        pages = list_all(
            self._api.query_database,
            database_id=self._database_id,
            filter=self._query_filter(),
            sorts=[{'property': PROP_DATE, 'direction': 'descending'}],
        )

        posts = []
        for page in pages:
            try:
                posts.append(build_post(page))
            except InvalidPostError as e:
                logger.warning(f"Skipping page: {e}")

        logger.info(f"Catalog has {len(posts)} posts ({len(pages) - len(posts)} skipped)")
        return posts

    def all_posts(self) -> List[Post]:
        """All valid published posts, date descending. Fetched once per process."""
        return list(self._cache.get_or_compute(ALL_POSTS_KEY, self._fetch_posts))

    def database(self) -> Database:
        """Database title, description, icon and cover. Fetched once per process."""
        return self._cache.get_or_compute(
            DATABASE_KEY,
            lambda: build_database(self._api.retrieve_database(self._database_id)),
        )

    def posts(self, page_size: int = DEFAULT_POSTS_PER_PAGE) -> List[Post]:
        """The newest page_size posts."""
        return self.all_posts()[:page_size]

    def ranked_posts(self, page_size: int = DEFAULT_POSTS_PER_PAGE) -> List[Post]:
        """Posts with a non-zero rank, highest rank first (ties keep date order)."""
        ranked = [post for post in self.all_posts() if post.rank]
        ranked.sort(key=lambda post: post.rank, reverse=True)
        return ranked[:page_size]

    def by_slug(self, slug: str) -> Optional[Post]:
        """First post with this slug in date-descending order, or None."""
        for post in self.all_posts():
            if post.slug == slug:
                return post
        return None

    def by_tag(self, tag_name: str, page_size: Optional[int] = None) -> List[Post]:
        posts = [post for post in self.all_posts() if tag_name in post.tag_names]
        return posts if page_size is None else posts[:page_size]

    def by_page_type(self, page_type: str) -> List[Post]:
        return [post for post in self.all_posts() if post.page_type == page_type]

    def _page_slice(self, posts: List[Post], page: int) -> List[Post]:
        if page < 1:
            return []
        start = (page - 1) * self.posts_per_page
        return posts[start:start + self.posts_per_page]

    def by_page(self, page: int) -> List[Post]:
        """Posts on a 1-indexed page; out-of-range pages are empty."""
        return self._page_slice(self.all_posts(), page)

    def by_tag_and_page(self, tag_name: str, page: int) -> List[Post]:
        return self._page_slice(self.by_tag(tag_name), page)

    def page_count(self) -> int:
        return math.ceil(len(self.all_posts()) / self.posts_per_page)

    def page_count_for_tag(self, tag_name: str) -> int:
        return math.ceil(len(self.by_tag(tag_name)) / self.posts_per_page)

    def all_tags(self) -> List[Tag]:
        """Distinct tags across blog posts (first occurrence wins), sorted by name.

        Entries of another page type (about pages and the like) do not
        contribute tags; an entry without a page type counts as a post.
        """
        seen = {}
        for post in self.all_posts():
            if post.page_type not in (None, POST_PAGE_TYPE):
                continue
            for tag in post.tags:
                seen.setdefault(tag.name, tag)
        return sorted(seen.values(), key=lambda tag: tag.name)
