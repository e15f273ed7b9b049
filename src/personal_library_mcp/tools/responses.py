"""Response helpers shared by the tool handlers.

Tools answer with MCP content blocks. Failures are returned, not raised:
``{"isError": True, "content": [...]}`` with a human-readable message.
"""

import logging
from typing import Any

from pydantic import ValidationError

from ..models.book import Book, BookDraft

logger = logging.getLogger(__name__)


def error_response(error_type: str, details: str) -> dict[str, Any]:
    """Format error responses consistently across all tools."""
    return {"isError": True, "content": [{"type": "text", "text": f"{error_type}: {details}"}]}


def invalid_input_response(error: ValidationError) -> dict[str, Any]:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
        for err in error.errors()
    )
    return error_response("Invalid parameters", problems)


def success_response(message: str, **data: Any) -> dict[str, Any]:
    response: dict[str, Any] = {"content": [{"type": "text", "text": message}]}
    if data:
        response["data"] = data
    return response


def format_book(book: Book) -> dict[str, Any]:
    """A book as its wire record."""
    return book.to_record()


def format_draft(draft: BookDraft) -> dict[str, Any]:
    return draft.model_dump(mode="json", by_alias=True)


def unexpected_error_response(tool_name: str) -> dict[str, Any]:
    """Log the active exception and turn it into an error response."""
    logger.exception("Unexpected error in %s tool", tool_name)
    return error_response("Unexpected error", f"{tool_name} failed; see server logs")
