"""Unit tests for catalog.post_builder module."""

import pytest

from src.catalog.errors import InvalidPostError
from src.catalog.post_builder import build_database, build_post, join_plain_text, parse_date
from tests.fixtures.notion_records import make_database, make_post_page, make_text


class TestHelpers:
    """Test cases for join_plain_text and parse_date."""

    def test_join_plain_text(self):
        assert join_plain_text([make_text("Hello "), make_text("world")]) == "Hello world"
        assert join_plain_text(None) == ""

    def test_parse_date_and_datetime(self):
        assert parse_date("2024-03-01").year == 2024
        assert parse_date("2024-03-01T10:00:00.000Z").hour == 10

    def test_parse_date_rejects_garbage(self):
        assert parse_date("yesterday") is None
        assert parse_date("") is None


class TestBuildPost:
    """Test cases for build_post."""

    def test_maps_all_properties(self):
        page = make_post_page(
            "hello-world",
            title="Hello World",
            date="2024-02-03",
            tags=["python", "notion"],
            rank=5,
            featured_image_url="https://s3.example.com/abc/cover.png",
        )

        post = build_post(page)

        assert post.page_id == page['id']
        assert post.title == "Hello World"
        assert post.slug == "hello-world"
        assert post.date == "2024-02-03"
        assert post.tag_names == ["python", "notion"]
        assert post.tags[0].color == "blue"
        assert post.excerpt == "About hello-world"
        assert post.rank == 5
        assert post.page_type == "post"
        assert post.icon.emoji == "📝"
        assert post.cover is None
        assert post.featured_image.url == "https://s3.example.com/abc/cover.png"

    def test_missing_rank_is_zero(self):
        assert build_post(make_post_page("a", rank=None)).rank == 0

    @pytest.mark.parametrize("kwargs,missing", [
        ({'title': ''}, ['title']),
        ({'date': ''}, ['date']),
        ({'date': 'not a date'}, ['date']),
    ])
    def test_invalid_posts_raise(self, kwargs, missing):
        with pytest.raises(InvalidPostError) as exc_info:
            build_post(make_post_page("slug", **kwargs))

        assert exc_info.value.missing == missing

    def test_missing_slug_raises(self):
        with pytest.raises(InvalidPostError) as exc_info:
            build_post(make_post_page("", title="Untitled"))

        assert exc_info.value.missing == ['slug']


class TestBuildDatabase:
    """Test cases for build_database."""

    def test_maps_metadata(self):
        database = build_database(make_database("My Blog"))

        assert database.title == "My Blog"
        assert database.description == "Posts"
        assert database.icon.emoji == "📚"
        assert database.cover is None
