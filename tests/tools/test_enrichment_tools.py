"""Tests for the AI enrichment tools with mocked sampling sessions."""

import pytest

from conftest import image_result, make_context, text_result
from personal_library_mcp.enrichment import BIO_PLACEHOLDER
from personal_library_mcp.tools.enrichment import (
    generate_book_cover_handler,
    get_author_bio_handler,
    suggest_book_details_handler,
)


@pytest.mark.asyncio
async def test_suggest_details_fills_draft(admin_app):
    admin_app.editor.open_create()
    admin_app.editor.update_draft(title="Rayuela")
    context = make_context()
    context.request_context.session.create_message.return_value = text_result(
        '{"title": "Rayuela", "author": "Julio Cortázar", "year": 1963, '
        '"description": "Una novela.", "genres": ["Novela"]}'
    )

    result = await suggest_book_details_handler(context, {})

    assert result["data"]["applied"] is True
    assert result["data"]["draft"]["author"] == "Julio Cortázar"
    assert result["data"]["draft"]["year"] == 1963


@pytest.mark.asyncio
async def test_suggest_details_without_open_editor(admin_app):
    result = await suggest_book_details_handler(make_context(), {})
    assert result["isError"] is True


@pytest.mark.asyncio
async def test_suggest_details_garbage_reply_leaves_draft(admin_app):
    admin_app.editor.open_create()
    admin_app.editor.update_draft(title="Rayuela")
    context = make_context()
    context.request_context.session.create_message.return_value = text_result("no idea")

    result = await suggest_book_details_handler(context, {})

    assert result["isError"] is True
    assert admin_app.editor.draft.author == ""


@pytest.mark.asyncio
async def test_author_bio_by_book_id(stocked_app):
    context = make_context()
    context.request_context.session.create_message.return_value = text_result("An author.")

    result = await get_author_bio_handler(context, {"book_id": "2"})

    assert result["data"] == {"author": "Frank Herbert", "bio": "An author."}


@pytest.mark.asyncio
async def test_author_bio_placeholder_without_sampling(stocked_app):
    result = await get_author_bio_handler(make_context(sampling=False), {"author": "Anyone"})

    assert "isError" not in result
    assert result["data"]["bio"] == BIO_PLACEHOLDER


@pytest.mark.asyncio
async def test_author_bio_needs_subject(stocked_app):
    result = await get_author_bio_handler(make_context(), {})
    assert result["isError"] is True


@pytest.mark.asyncio
async def test_generate_cover_returns_image_block(admin_app):
    admin_app.editor.open_create()
    admin_app.editor.update_draft(title="Dune")
    context = make_context()
    context.request_context.session.create_message.return_value = image_result(data="QUJD")

    result = await generate_book_cover_handler(context, {})

    image = result["content"][1]
    assert image == {"type": "image", "data": "QUJD", "mimeType": "image/png"}
    assert result["data"]["filename"] == "Dune_cover.png"
    assert result["data"]["data_url"] == "data:image/png;base64,QUJD"


@pytest.mark.asyncio
async def test_generate_cover_needs_admin(app):
    result = await generate_book_cover_handler(make_context(), {})
    assert result["isError"] is True
