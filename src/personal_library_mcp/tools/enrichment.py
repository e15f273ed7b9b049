"""AI Enrichment Tools

Ask the client's LLM (through MCP sampling) to help fill in a book.

Tools:
- suggest_book_details: Fill the open draft from its title and author
- get_author_bio: A short biography of an author
- generate_book_cover: Generate a cover preview for the open draft

Each kind of request runs at most once at a time. A result that arrives after
the editor was closed or reopened is not applied.
"""

import logging
from typing import Any

from fastmcp import Context
from pydantic import BaseModel, Field, ValidationError, model_validator

from ..app import get_app
from ..exceptions import CatalogError
from ..observability import trace_tool
from .responses import (
    error_response,
    format_draft,
    invalid_input_response,
    success_response,
    unexpected_error_response,
)

logger = logging.getLogger(__name__)


@trace_tool("suggest_book_details")
async def suggest_book_details_handler(
    context: Context,
    arguments: dict[str, Any] | None = None,  # noqa: ARG001
) -> dict[str, Any]:
    """Fill the open draft's details using the draft title as the query."""
    try:
        app = get_app()
        try:
            suggestion, applied = await app.suggest_details(context)
        except CatalogError as e:
            return error_response("Could not get book details", str(e))

        if not applied:
            return success_response(
                "The editor was closed before the details arrived; nothing was changed.",
                suggestion=suggestion.model_dump(),
                applied=False,
            )
        return success_response(
            "Draft filled with suggested details. Review them before saving.",
            suggestion=suggestion.model_dump(),
            applied=True,
            draft=format_draft(app.editor.draft),
        )

    except Exception:
        return unexpected_error_response("suggest_book_details")


class AuthorBioInput(BaseModel):
    """Input schema for get_author_bio. Give an author name or a book id."""

    author: str | None = Field(default=None, min_length=1, max_length=300)
    book_id: str | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def needs_subject(self) -> "AuthorBioInput":
        if not self.author and not self.book_id:
            raise ValueError("Provide 'author' or 'book_id'")
        return self


@trace_tool("get_author_bio")
async def get_author_bio_handler(
    context: Context,
    arguments: dict[str, Any],
) -> dict[str, Any]:
    """Return a short author biography, or a placeholder when AI is unavailable."""
    try:
        try:
            params = AuthorBioInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        app = get_app()
        author = params.author
        if author is None:
            book = app.store.get(params.book_id or "")
            if book is None:
                return error_response("Not found", f"Book not found: {params.book_id}")
            author = book.author

        try:
            bio = await app.author_bio(context, author)
        except CatalogError as e:
            return error_response("Could not get author bio", str(e))

        return success_response(bio, author=author, bio=bio)

    except Exception:
        return unexpected_error_response("get_author_bio")


@trace_tool("generate_book_cover")
async def generate_book_cover_handler(
    context: Context,
    arguments: dict[str, Any] | None = None,  # noqa: ARG001
) -> dict[str, Any]:
    """Generate a cover image for the open draft, returned as a data URL."""
    try:
        app = get_app()
        try:
            cover, kept = await app.generate_cover(context)
        except CatalogError as e:
            return error_response("Could not generate cover", str(e))

        if not kept:
            return success_response(
                "The editor was closed before the cover arrived; it was discarded.",
                kept=False,
            )

        mime_type, _, data = cover.data_url.removeprefix("data:").partition(";base64,")
        return {
            "content": [
                {"type": "text", "text": f"Generated cover preview ({cover.filename})."},
                {"type": "image", "data": data, "mimeType": mime_type},
            ],
            "data": {"filename": cover.filename, "data_url": cover.data_url, "kept": True},
        }

    except Exception:
        return unexpected_error_response("generate_book_cover")


_NO_ARGUMENTS = {"type": "object", "properties": {}}

suggest_book_details = {
    "name": "suggest_book_details",
    "description": (
        "Ask the AI for the year, description and genres of the book in the open "
        "editor, using its title (and author if set). Requires the admin session."
    ),
    "inputSchema": _NO_ARGUMENTS,
    "handler": suggest_book_details_handler,
}

get_author_bio = {
    "name": "get_author_bio",
    "description": "Get a short AI-written biography of an author, by name or by book id.",
    "inputSchema": AuthorBioInput.model_json_schema(),
    "handler": get_author_bio_handler,
}

generate_book_cover = {
    "name": "generate_book_cover",
    "description": (
        "Generate a cover illustration for the book in the open editor. The image "
        "is returned for download; it does not replace the cover URL."
    ),
    "inputSchema": _NO_ARGUMENTS,
    "handler": generate_book_cover_handler,
}
