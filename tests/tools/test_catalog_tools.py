"""Tests for the search_catalog and delete_book tools."""

import pytest

from personal_library_mcp.tools.catalog import (
    SearchCatalogInput,
    delete_book_handler,
    search_catalog_handler,
)


class TestSearchCatalogInput:
    def test_defaults(self):
        params = SearchCatalogInput()
        assert params.query == ""
        assert params.status is None

    def test_query_is_trimmed(self):
        assert SearchCatalogInput(query="  dune ").query == "dune"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            SearchCatalogInput(status="Borrowed")


class TestSearchCatalog:
    @pytest.mark.asyncio
    async def test_everything(self, stocked_app):
        result = await search_catalog_handler({})

        assert result["data"]["total"] == 3
        assert result["content"][0]["text"] == "Found 3 book(s)"

    @pytest.mark.asyncio
    async def test_query_and_status(self, stocked_app):
        result = await search_catalog_handler({"query": "DUNE", "status": "Leyendo"})

        assert [b["title"] for b in result["data"]["books"]] == ["Dune"]
        assert "with status Reading" in result["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_todos_means_all(self, stocked_app):
        result = await search_catalog_handler({"status": "Todos"})
        assert result["data"]["total"] == 3

    @pytest.mark.asyncio
    async def test_no_results(self, stocked_app):
        result = await search_catalog_handler({"query": "xyz"})

        assert result["data"]["books"] == []
        assert result["content"][0]["text"] == "No books found matching your search criteria."

    @pytest.mark.asyncio
    async def test_open_to_everyone(self, app):
        result = await search_catalog_handler({"query": ""})
        assert "isError" not in result

    @pytest.mark.asyncio
    async def test_invalid_status(self, stocked_app):
        result = await search_catalog_handler({"status": "Borrowed"})
        assert result["isError"] is True


class TestDeleteBook:
    @pytest.mark.asyncio
    async def test_two_calls_delete(self, stocked_app):
        first = await delete_book_handler({"book_id": "2"})
        assert first["data"]["outcome"] == "armed"
        assert "within 3 seconds" in first["content"][0]["text"]
        assert stocked_app.store.get("2") is not None

        second = await delete_book_handler({"book_id": "2"})
        assert second["data"]["outcome"] == "deleted"
        assert stocked_app.store.get("2") is None

    @pytest.mark.asyncio
    async def test_confirmation_expires(self, stocked_app, monotonic):
        await delete_book_handler({"book_id": "2"})
        monotonic.advance(5)

        result = await delete_book_handler({"book_id": "2"})

        assert result["data"]["outcome"] == "armed"
        assert stocked_app.store.get("2") is not None

    @pytest.mark.asyncio
    async def test_needs_admin(self, app, sample_books):
        app.login("open-sesame")
        app.store.replace_all(sample_books)
        app.logout()

        result = await delete_book_handler({"book_id": "2"})

        assert result["isError"] is True
        assert "Admin session required" in result["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_unknown_book(self, stocked_app):
        result = await delete_book_handler({"book_id": "nope"})
        assert result["isError"] is True
        assert "Book not found" in result["content"][0]["text"]
