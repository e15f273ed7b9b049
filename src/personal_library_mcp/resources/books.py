"""Book Resources - Read-Only Catalog Access

Resources:
- library://books/list - The whole catalog, newest first
- library://books/{book_id} - One book by id
- library://session - Admin flag, editor state and pending confirmations
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError
from pydantic import BaseModel, Field

from ..app import get_app
from ..models.book import Book, BookStatus
from ..observability import trace_resource

logger = logging.getLogger(__name__)


class BookListResponse(BaseModel):
    """The catalog with a count per reading status."""

    books: list[dict[str, Any]] = Field(..., description="Every book, as wire records")
    total: int = Field(..., description="Number of books in the catalog")
    by_status: dict[str, int] = Field(..., description="Number of books per reading status")


def _count_by_status(books: tuple[Book, ...]) -> dict[str, int]:
    counts = {status.value: 0 for status in BookStatus}
    for book in books:
        counts[book.status.value] += 1
    return counts


@trace_resource("books_list")
async def list_books_handler() -> dict[str, Any]:
    """Returns the full catalog.

    Client requests library://books/list to browse the collection.
    """
    try:
        books = get_app().store.list_books()
        logger.debug("MCP Resource Request - books/list (%d books)", len(books))
        return BookListResponse(
            books=[b.to_record() for b in books],
            total=len(books),
            by_status=_count_by_status(books),
        ).model_dump()

    except Exception as e:
        logger.exception("Error in books/list resource")
        raise ResourceError(f"Failed to retrieve book list: {e!s}") from e


@trace_resource("book_detail")
async def get_book_handler(book_id: str) -> dict[str, Any]:
    """Returns one book.

    Client requests library://books/{book_id} for a single record.
    """
    logger.debug("MCP Resource Request - books/%s", book_id)
    try:
        book = get_app().store.get(book_id)
    except Exception as e:
        logger.exception("Error in books/{book_id} resource")
        raise ResourceError(f"Failed to retrieve book details: {e!s}") from e

    if book is None:
        raise ResourceError(f"Book not found: {book_id}")
    return book.to_record()


@trace_resource("session")
async def get_session_handler() -> dict[str, Any]:
    """Returns the session state: admin flag, editor, loading flags."""
    try:
        return get_app().session_state()
    except Exception as e:
        logger.exception("Error in session resource")
        raise ResourceError(f"Failed to retrieve session state: {e!s}") from e


book_resources: list[dict[str, Any]] = [
    {
        "uri": "library://books/list",
        "name": "Book Catalog",
        "description": "The whole personal catalog, newest first, with counts per reading status.",
        "mime_type": "application/json",
        "handler": list_books_handler,
    },
    {
        "uri_template": "library://books/{book_id}",
        "name": "Book Details",
        "description": "A single book by id.",
        "mime_type": "application/json",
        "handler": get_book_handler,
    },
    {
        "uri": "library://session",
        "name": "Session State",
        "description": (
            "Whether the admin session is unlocked, the editor mode and draft, "
            "the book awaiting delete confirmation and which AI requests are running."
        ),
        "mime_type": "application/json",
        "handler": get_session_handler,
    },
]
