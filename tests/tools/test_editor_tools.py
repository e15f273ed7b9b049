"""Tests for the editor tools: open, change, save and cancel a draft."""

import pytest

from conftest import PLACEHOLDER
from personal_library_mcp.tools.editor import (
    add_draft_tag_handler,
    cancel_book_editor_handler,
    open_book_editor_handler,
    rate_draft_handler,
    remove_draft_tag_handler,
    save_book_draft_handler,
    update_book_draft_handler,
)


@pytest.mark.asyncio
async def test_create_flow(stocked_app):
    opened = await open_book_editor_handler({})
    assert opened["data"]["mode"] == "create"

    await update_book_draft_handler(
        {"title": "Emma", "author": "Jane Austen", "year": 1815, "status": "Read"}
    )
    await add_draft_tag_handler({"tag": "Classic"})
    await add_draft_tag_handler({"tag": " Romance "})
    await remove_draft_tag_handler({"tag": "Classic"})
    rated = await rate_draft_handler({"star": 4})
    assert rated["data"]["draft"]["rating"] == 4

    saved = await save_book_draft_handler({})

    assert saved["content"][0]["text"] == "Added 'Emma' by Jane Austen."
    book = saved["data"]["book"]
    assert book["genres"] == ["Romance"]
    assert book["status"] == "Read"
    assert book["coverUrl"] == PLACEHOLDER
    assert stocked_app.store.list_books()[0].title == "Emma"
    assert stocked_app.editor.is_open is False


@pytest.mark.asyncio
async def test_edit_flow_normalizes_drive_cover(stocked_app):
    await open_book_editor_handler({"book_id": "2"})
    await update_book_draft_handler(
        {"coverUrl": "https://drive.google.com/file/d/AbC123/view?usp=sharing"}
    )

    saved = await save_book_draft_handler({})

    assert saved["content"][0]["text"].startswith("Updated 'Dune'")
    assert stocked_app.store.get("2").cover_url == "https://lh3.googleusercontent.com/u/0/d/AbC123"


@pytest.mark.asyncio
async def test_incomplete_draft_stays_open(stocked_app):
    await open_book_editor_handler({})
    await update_book_draft_handler({"title": "No author yet"})

    result = await save_book_draft_handler({})

    assert result["isError"] is True
    assert "author" in result["content"][0]["text"]
    assert stocked_app.editor.is_open is True
    assert len(stocked_app.store) == 3


@pytest.mark.asyncio
async def test_rating_same_star_clears(stocked_app):
    await open_book_editor_handler({"book_id": "3"})
    result = await rate_draft_handler({"star": 5})
    assert result["data"]["draft"]["rating"] == 0


@pytest.mark.asyncio
async def test_rating_out_of_range(stocked_app):
    await open_book_editor_handler({})
    result = await rate_draft_handler({"star": 6})
    assert result["isError"] is True


@pytest.mark.asyncio
async def test_update_requires_a_field(stocked_app):
    await open_book_editor_handler({})
    result = await update_book_draft_handler({})
    assert result["isError"] is True


@pytest.mark.asyncio
async def test_update_rejects_unknown_status(stocked_app):
    await open_book_editor_handler({})
    result = await update_book_draft_handler({"status": "Borrowed"})
    assert result["isError"] is True


@pytest.mark.asyncio
async def test_draft_tools_need_open_editor(stocked_app):
    result = await add_draft_tag_handler({"tag": "Fantasy"})
    assert result["isError"] is True
    assert "open the editor first" in result["content"][0]["text"]


@pytest.mark.asyncio
async def test_open_unknown_book(stocked_app):
    result = await open_book_editor_handler({"book_id": "nope"})
    assert result["isError"] is True
    assert "Book not found: nope" in result["content"][0]["text"]


@pytest.mark.asyncio
async def test_open_needs_admin(app):
    result = await open_book_editor_handler({})
    assert result["isError"] is True
    assert "Admin session required" in result["content"][0]["text"]


@pytest.mark.asyncio
async def test_cancel(stocked_app):
    await open_book_editor_handler({"book_id": "2"})
    await update_book_draft_handler({"title": "Changed"})

    result = await cancel_book_editor_handler({})

    assert result["data"]["mode"] == "closed"
    assert stocked_app.store.get("2").title == "Dune"
