"""Tests for posts repository."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from modules.posts.models import Comment
from modules.posts.repository import PostRepository


def create_mock_post_data(
    post_id: str = "post-123",
    user_id: str = "user-123",
    description: str = "Hello",
    **overrides,
) -> dict:
    """Helper to create a mock post row."""
    now = datetime.now(timezone.utc).isoformat()
    data = {
        "id": post_id,
        "user_id": user_id,
        "title": None,
        "description": description,
        "files": [],
        "is_paid": False,
        "price": 0,
        "likes": [],
        "comments": [],
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return data


class TestPostRepositoryReads:
    def test_get_by_id(self):
        """Should map a row into a Post."""
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [
            create_mock_post_data(
                price="4.99",
                is_paid=True,
                files=[{"url": "https://cdn/x", "name": "x.pdf", "file_name": "u/1-x.pdf"}],
                comments=[{
                    "id": "c1",
                    "user_id": "user-9",
                    "text": "nice",
                    "date": "2024-01-01T00:00:00+00:00",
                }],
            )
        ]

        post = repo.get_by_id("post-123")

        assert post is not None
        assert post.price == Decimal("4.99")
        assert post.files[0].file_name == "u/1-x.pdf"
        assert post.comments[0].user_id == "user-9"
        mock_db.table.assert_called_with("posts")

    def test_get_by_id_not_found(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = []

        assert repo.get_by_id("missing") is None

    def test_custom_table_name(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db, "posts_v2")
        mock_db.table.return_value.select.return_value.order.return_value.execute.return_value.data = []

        repo.list_all()

        mock_db.table.assert_called_with("posts_v2")

    def test_list_by_user_orders_newest_first(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        query = mock_db.table.return_value.select.return_value.eq.return_value
        query.order.return_value.execute.return_value.data = [create_mock_post_data()]

        posts = repo.list_by_user("user-123")

        assert len(posts) == 1
        mock_db.table.return_value.select.return_value.eq.assert_called_with("user_id", "user-123")
        query.order.assert_called_with("created_at", desc=True)

    def test_find_without_filters_matches_nothing(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)

        assert repo.find() == []
        assert repo.find(post_ids=[], owner_ids=[]) == []
        mock_db.table.assert_not_called()

    def test_find_by_ids(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        select = mock_db.table.return_value.select.return_value
        select.in_.return_value.order.return_value.execute.return_value.data = [
            create_mock_post_data()
        ]

        posts = repo.find(post_ids=["post-123"])

        assert [p.id for p in posts] == ["post-123"]
        select.in_.assert_called_with("id", ["post-123"])

    def test_find_referencing_matches_likes_and_comment_authors(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        select = mock_db.table.return_value.select.return_value
        older = create_mock_post_data("a", likes=["u1"], created_at="2024-01-01T00:00:00+00:00")
        newer = create_mock_post_data("b", created_at="2024-01-02T00:00:00+00:00")
        select.filter.return_value.execute.side_effect = [
            MagicMock(data=[older]),
            MagicMock(data=[older, newer]),
        ]

        posts = repo.find_referencing(["u1", "u1"])

        assert [p.id for p in posts] == ["b", "a"]
        assert [c.args for c in select.filter.call_args_list] == [
            ("likes", "cs", '["u1"]'),
            ("comments", "cs", '[{"user_id": "u1"}]'),
        ]

    def test_search_builds_or_filter(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        select = mock_db.table.return_value.select.return_value
        select.or_.return_value.order.return_value.execute.return_value.data = []

        repo.search("graph", ["u1", "u2"])

        select.or_.assert_called_with(
            "title.ilike.*graph*,description.ilike.*graph*,user_id.in.(u1,u2)"
        )

    def test_search_strips_filter_syntax(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        select = mock_db.table.return_value.select.return_value
        select.or_.return_value.order.return_value.execute.return_value.data = []

        repo.search("a,b(c)", [])

        filter_arg = select.or_.call_args[0][0]
        assert filter_arg == "title.ilike.*a b c*,description.ilike.*a b c*"

    def test_search_with_nothing_to_match(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)

        assert repo.search("(),", []) == []
        mock_db.table.assert_not_called()


class TestPostRepositoryWrites:
    def test_create(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        mock_db.table.return_value.insert.return_value.execute.return_value.data = [
            create_mock_post_data()
        ]

        post = repo.create({"user_id": "user-123", "description": "Hello"})

        assert post.id == "post-123"
        mock_db.table.return_value.insert.assert_called_with(
            {"user_id": "user-123", "description": "Hello"}
        )

    def test_update_sets_updated_at(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        update = mock_db.table.return_value.update
        update.return_value.eq.return_value.execute.return_value.data = [create_mock_post_data()]

        repo.save_likes("post-123", ["u1"])

        payload = update.call_args[0][0]
        assert payload["likes"] == ["u1"]
        assert "updated_at" in payload

    def test_update_missing_post(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        mock_db.table.return_value.update.return_value.eq.return_value.execute.return_value.data = []

        assert repo.update("missing", {"title": "x"}) is None

    def test_save_comments_serializes(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        update = mock_db.table.return_value.update
        update.return_value.eq.return_value.execute.return_value.data = [create_mock_post_data()]
        comment = Comment(
            id="c1",
            user_id="u1",
            text="hi",
            date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        repo.save_comments("post-123", [comment])

        stored = update.call_args[0][0]["comments"]
        assert stored == [{
            "id": "c1",
            "user_id": "u1",
            "text": "hi",
            "date": "2024-01-01T00:00:00Z",
        }]

    def test_delete(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        delete = mock_db.table.return_value.delete.return_value.eq.return_value.execute
        delete.return_value.data = [create_mock_post_data()]

        assert repo.delete("post-123") is True

        delete.return_value.data = []
        assert repo.delete("post-123") is False

    def test_delete_many_counts_rows(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)
        in_ = mock_db.table.return_value.delete.return_value.in_
        in_.return_value.execute.return_value.data = [{"id": "a"}, {"id": "b"}]

        assert repo.delete_many(["a", "b", "c"]) == 2
        in_.assert_called_with("id", ["a", "b", "c"])

    def test_delete_many_empty(self):
        mock_db = MagicMock()
        repo = PostRepository(mock_db)

        assert repo.delete_many([]) == 0
        mock_db.table.assert_not_called()
