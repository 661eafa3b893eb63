"""
Unit tests for API routes
"""

import pytest
from datetime import datetime

from database.models import Category, Author, Quote
from utils.exceptions import DatabaseError


@pytest.mark.unit
class TestAPIRoutes:
    """Test cases for API routes against a mocked storage gateway"""

    def test_root_endpoint(self, mock_client):
        response = mock_client.get("/")
        assert response.status_code == 200
        assert response.text == "hello, world"
        assert response.headers["content-type"].startswith("text/plain")

    def test_health_check_healthy(self, mock_client, mock_db_ops):
        response = mock_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"msg": "system is healthy"}
        mock_db_ops.ping.assert_awaited()

    def test_health_check_unreachable(self, mock_client, mock_db_ops):
        mock_db_ops.ping.side_effect = DatabaseError("database ping failed: connection refused")

        response = mock_client.get("/health")
        assert response.status_code == 503
        assert response.json() == {"err": "database ping failed: connection refused"}

    def test_new_category_success(self, mock_client, mock_db_ops):
        response = mock_client.post("/category/new", json={"name": "stoic"})
        assert response.status_code == 200
        assert response.content == b""
        mock_db_ops.add_category.assert_awaited_once_with("stoic")

    def test_new_category_storage_failure(self, mock_client, mock_db_ops):
        mock_db_ops.add_category.side_effect = DatabaseError("add_category failed: disk full")

        response = mock_client.post("/category/new", json={"name": "stoic"})
        assert response.status_code == 500
        assert response.json() == {"err": "add_category failed: disk full"}

    @pytest.mark.parametrize("path", ["/category/new", "/author/new", "/quote/new"])
    def test_malformed_json_is_rejected_before_storage(self, mock_client, mock_db_ops, path):
        response = mock_client.post(
            path, content=b'{"name": ', headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        data = response.json()
        assert set(data) == {"err"}
        mock_db_ops.add_category.assert_not_awaited()
        mock_db_ops.add_author.assert_not_awaited()
        mock_db_ops.add_quote.assert_not_awaited()

    @pytest.mark.parametrize("path,body", [
        ("/category/new", {}),
        ("/author/new", {"name": ""}),
        ("/quote/new", {"category": {"id": 1}, "author": {"id": 1}}),
        ("/quote/new", {"category": "stoic", "author": 1, "message": "hi"}),
    ])
    def test_invalid_body_is_rejected_before_storage(self, mock_client, mock_db_ops, path, body):
        response = mock_client.post(path, json=body)
        assert response.status_code == 400
        assert "err" in response.json()
        mock_db_ops.add_category.assert_not_awaited()
        mock_db_ops.add_author.assert_not_awaited()
        mock_db_ops.add_quote.assert_not_awaited()

    def test_get_categories(self, mock_client, mock_db_ops):
        mock_db_ops.get_categories.return_value = [
            Category(id=1, name="stoic", created_at=datetime(2024, 1, 1, 8, 30))
        ]

        response = mock_client.get("/category")
        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "name": "stoic", "created_at": "2024-01-01T08:30:00"}
        ]

    def test_get_categories_empty(self, mock_client):
        response = mock_client.get("/category")
        assert response.status_code == 200
        assert response.json() == []

    def test_get_categories_failure(self, mock_client, mock_db_ops):
        mock_db_ops.get_categories.side_effect = DatabaseError("get_categories failed: no such table")

        response = mock_client.get("/category")
        assert response.status_code == 500
        assert response.json() == {"err": "get_categories failed: no such table"}

    def test_new_author_success(self, mock_client, mock_db_ops):
        response = mock_client.post("/author/new", json={"name": "Seneca"})
        assert response.status_code == 200
        assert response.content == b""
        mock_db_ops.add_author.assert_awaited_once_with("Seneca")

    def test_get_authors(self, mock_client, mock_db_ops):
        mock_db_ops.get_authors.return_value = [
            Author(id=7, name="Seneca", created_at=datetime(2024, 1, 1))
        ]

        response = mock_client.get("/author")
        assert response.status_code == 200
        assert response.json()[0]["name"] == "Seneca"

    def test_get_authors_failure(self, mock_client, mock_db_ops):
        mock_db_ops.get_authors.side_effect = DatabaseError("get_authors failed")

        response = mock_client.get("/author")
        assert response.status_code == 500
        assert response.json() == {"err": "get_authors failed"}

    def test_new_quote_success(self, mock_client, mock_db_ops):
        response = mock_client.post(
            "/quote/new",
            json={"category": {"id": 1}, "author": {"id": 2}, "message": "Memento mori"}
        )
        assert response.status_code == 200
        assert response.content == b""

        new_quote = mock_db_ops.add_quote.await_args.args[0]
        assert new_quote.category_id == 1
        assert new_quote.author_id == 2
        assert new_quote.message == "Memento mori"

    def test_new_quote_storage_failure(self, mock_client, mock_db_ops):
        mock_db_ops.add_quote.side_effect = DatabaseError("add_quote failed")

        response = mock_client.post("/quote/new", json={"category": 1, "author": 1, "message": "hi"})
        assert response.status_code == 500
        assert response.json() == {"err": "add_quote failed"}

    def test_get_quotes(self, mock_client, mock_db_ops):
        mock_db_ops.get_quotes.return_value = [
            Quote(id=1, category_id=1, author_id=2, message="hi", created_at=datetime(2024, 1, 1))
        ]

        response = mock_client.get("/quote")
        assert response.status_code == 200
        assert response.json()[0]["message"] == "hi"

    def test_unexpected_error_becomes_envelope(self, mock_client, mock_db_ops):
        mock_db_ops.get_authors.side_effect = RuntimeError("boom")

        response = mock_client.get("/author")
        assert response.status_code == 500
        assert response.json() == {"err": "internal server error"}

    def test_method_not_allowed(self, mock_client):
        response = mock_client.get("/category/new")
        assert response.status_code == 405
        assert response.json() == {"err": "Method Not Allowed"}
        assert "POST" in response.headers["allow"]

    def test_unknown_path_returns_envelope(self, mock_client):
        response = mock_client.get("/tag")
        assert response.status_code == 404
        assert response.json() == {"err": "Not Found"}

    def test_non_utf8_body_returns_envelope(self, mock_client, mock_db_ops):
        response = mock_client.post(
            "/category/new", content=b'{"name": "\xff"}', headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"err": "request body is not valid UTF-8"}
        mock_db_ops.add_category.assert_not_awaited()

    @pytest.mark.parametrize("content_type", [
        "text/plain",
        "application/x-www-form-urlencoded",
        None,
    ])
    def test_json_body_decoded_regardless_of_content_type(self, mock_client, mock_db_ops, content_type):
        headers = {"Content-Type": content_type} if content_type else {}
        response = mock_client.post("/category/new", content=b'{"name": "stoic"}', headers=headers)
        assert response.status_code == 200
        mock_db_ops.add_category.assert_awaited_once_with("stoic")

    def test_quote_body_decoded_as_text_plain(self, mock_client, mock_db_ops):
        response = mock_client.post(
            "/quote/new",
            content=b'{"category": {"id": 3}, "author": 4, "message": "Amor fati"}',
            headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 200
        new_quote = mock_db_ops.add_quote.await_args.args[0]
        assert (new_quote.category_id, new_quote.author_id) == (3, 4)

    def test_empty_body_is_rejected(self, mock_client, mock_db_ops):
        response = mock_client.post("/author/new")
        assert response.status_code == 400
        assert set(response.json()) == {"err"}
        mock_db_ops.add_author.assert_not_awaited()

    @pytest.mark.parametrize("path", ["/category/new", "/author/new"])
    def test_overlong_name_is_rejected(self, mock_client, mock_db_ops, path):
        response = mock_client.post(path, json={"name": "x" * 256})
        assert response.status_code == 400
        assert "name" in response.json()["err"]
        mock_db_ops.add_category.assert_not_awaited()
        mock_db_ops.add_author.assert_not_awaited()

    def test_process_time_header(self, mock_client):
        response = mock_client.get("/health")
        assert "x-process-time" in response.headers

    def test_openapi_schema_accessible(self, mock_client):
        response = mock_client.get("/openapi.json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        for path in ["/health", "/category/new", "/category", "/author/new", "/author", "/quote/new", "/quote"]:
            assert path in paths
