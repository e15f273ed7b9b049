"""Catalog Tools - Browsing and Deleting

Tools:
- search_catalog: Free-text search combined with a status filter
- delete_book: Two-step delete; the first call arms, the second confirms

Usage: tool.call("search_catalog", {"query": "tolkien", "status": "Read"})
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..app import get_app
from ..catalog.deletion import DeleteOutcome
from ..catalog.search import ALL_STATUSES, parse_status_filter
from ..exceptions import CatalogError
from ..observability import trace_tool
from .responses import (
    error_response,
    format_book,
    invalid_input_response,
    success_response,
    unexpected_error_response,
)

logger = logging.getLogger(__name__)


class SearchCatalogInput(BaseModel):
    """Input schema for the search_catalog tool."""

    query: str = Field(
        default="",
        description="Case-insensitive text matched against title, author and genres",
        max_length=200,
        examples=["tolkien", "fantasy", "dune"],
    )

    status: str | None = Field(
        default=None,
        description="Reading status to filter by, or 'all'",
        examples=["all", "Read", "Reading", "Pending", "Reread", "Abandoned"],
    )

    @field_validator("query")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        """Reject unknown labels up front; legacy Spanish labels are accepted."""
        parse_status_filter(v)
        return v


@trace_tool("search_catalog")
async def search_catalog_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Filter the catalog by text and status.

    Reading the catalog needs no admin session.
    """
    try:
        try:
            params = SearchCatalogInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid search parameters: %s", e)
            return invalid_input_response(e)

        status_filter = parse_status_filter(params.status)
        books = get_app().search(params.query, status_filter)

        if not books:
            message = "No books found matching your search criteria."
        else:
            message = f"Found {len(books)} book(s)"
            if status_filter is not ALL_STATUSES:
                message += f" with status {status_filter.value}"
        return success_response(
            message,
            books=[format_book(b) for b in books],
            total=len(books),
        )

    except Exception:
        return unexpected_error_response("search_catalog")


class DeleteBookInput(BaseModel):
    """Input schema for delete_book."""

    book_id: str = Field(
        ...,
        description="Id of the book to delete",
        min_length=1,
        examples=["1700000000001"],
    )


@trace_tool("delete_book")
async def delete_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Arm or confirm deletion of a book.

    The first call arms the confirmation; calling again with the same id
    within the confirmation window deletes the book.
    """
    try:
        try:
            params = DeleteBookInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        app = get_app()
        book = app.store.get(params.book_id)
        if book is None:
            return error_response("Not found", f"Book not found: {params.book_id}")

        try:
            outcome = app.deletion.request(params.book_id)
        except CatalogError as e:
            return error_response("Delete failed", str(e))

        if outcome is DeleteOutcome.ARMED:
            return success_response(
                f"Call delete_book again within {app.deletion.timeout:g} seconds "
                f"to confirm deleting '{book.title}'.",
                book_id=book.id,
                outcome=outcome.value,
            )
        return success_response(
            f"Deleted '{book.title}'.", book_id=book.id, outcome=outcome.value
        )

    except Exception:
        return unexpected_error_response("delete_book")


search_catalog = {
    "name": "search_catalog",
    "description": (
        "Search the personal catalog. Matches the query against title, author "
        "and genres (case-insensitive) and optionally filters by reading status."
    ),
    "inputSchema": SearchCatalogInput.model_json_schema(),
    "handler": search_catalog_handler,
}

delete_book = {
    "name": "delete_book",
    "description": (
        "Delete a book in two steps: the first call arms the confirmation, a "
        "second call with the same id within a few seconds deletes it. "
        "Requires the admin session."
    ),
    "inputSchema": DeleteBookInput.model_json_schema(),
    "handler": delete_book_handler,
}
