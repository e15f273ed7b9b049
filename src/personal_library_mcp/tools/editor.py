"""Editor Tools - Creating and Editing Books

The editor holds one draft at a time. Open it empty to add a book or seeded
with an existing book to edit it, change the draft, then save or cancel.

Tools:
- open_book_editor: Start a create (no book_id) or edit (book_id) session
- update_book_draft: Set draft fields
- add_draft_tag / remove_draft_tag: Edit the draft's genre tags
- rate_draft: Click a star; clicking the current rating clears it
- save_book_draft: Validate and save, closing the editor
- cancel_book_editor: Discard the draft
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..app import get_app
from ..catalog.rating import MAX_STARS
from ..exceptions import CatalogError, DraftValidationError
from ..models.book import BookStatus
from ..observability import trace_tool
from .responses import (
    error_response,
    format_book,
    format_draft,
    invalid_input_response,
    success_response,
    unexpected_error_response,
)

logger = logging.getLogger(__name__)


def _editor_state() -> dict[str, Any]:
    editor = get_app().editor
    return {
        "mode": editor.mode.value,
        "session": editor.token,
        "editing_id": editor.editing_id,
        "draft": format_draft(editor.draft) if editor.is_open else None,
    }


class OpenBookEditorInput(BaseModel):
    """Input schema for open_book_editor."""

    book_id: str | None = Field(
        default=None,
        description="Id of the book to edit; omit to add a new book",
        examples=["1700000000001"],
    )


@trace_tool("open_book_editor")
async def open_book_editor_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Open the editor. Any draft already open is discarded."""
    try:
        try:
            params = OpenBookEditorInput.model_validate(arguments or {})
        except ValidationError as e:
            return invalid_input_response(e)

        editor = get_app().editor
        try:
            if params.book_id:
                editor.open_edit(params.book_id)
                message = f"Editing '{editor.draft.title}'."
            else:
                editor.open_create()
                message = "Editor opened for a new book."
        except CatalogError as e:
            return error_response("Cannot open editor", str(e))

        return success_response(message, **_editor_state())

    except Exception:
        return unexpected_error_response("open_book_editor")


class UpdateBookDraftInput(BaseModel):
    """Input schema for update_book_draft. Only the fields given are changed."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, max_length=500)
    author: str | None = Field(default=None, max_length=300)
    year: int | None = Field(default=None, ge=0, le=9999)
    description: str | None = Field(default=None, max_length=5000)
    status: str | None = Field(
        default=None,
        description="Reading status",
        examples=[s.value for s in BookStatus],
    )
    cover_url: str | None = Field(
        default=None,
        alias="coverUrl",
        description="Image URL; Google Drive share links are converted to direct links on save",
        max_length=100_000,
    )

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        if v is not None:
            BookStatus.from_label(v)
        return v


@trace_tool("update_book_draft")
async def update_book_draft_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = UpdateBookDraftInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        fields = {name: getattr(params, name) for name in params.model_fields_set}
        if not fields:
            return error_response("Invalid parameters", "Provide at least one field to change")

        try:
            get_app().editor.update_draft(**fields)
        except CatalogError as e:
            return error_response("Cannot update draft", str(e))
        except ValidationError as e:
            return invalid_input_response(e)

        return success_response(
            f"Draft updated ({', '.join(sorted(fields))}).", **_editor_state()
        )

    except Exception:
        return unexpected_error_response("update_book_draft")


class DraftTagInput(BaseModel):
    """Input schema for add_draft_tag and remove_draft_tag."""

    tag: str = Field(..., description="Genre tag", max_length=100, examples=["Fantasy"])


@trace_tool("add_draft_tag")
async def add_draft_tag_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Add a genre tag; blank and duplicate tags are ignored."""
    try:
        try:
            params = DraftTagInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        try:
            draft = get_app().editor.add_tag(params.tag)
        except CatalogError as e:
            return error_response("Cannot add tag", str(e))

        return success_response(f"Genres: {', '.join(draft.genres) or '(none)'}", **_editor_state())

    except Exception:
        return unexpected_error_response("add_draft_tag")


@trace_tool("remove_draft_tag")
async def remove_draft_tag_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = DraftTagInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        try:
            draft = get_app().editor.remove_tag(params.tag)
        except CatalogError as e:
            return error_response("Cannot remove tag", str(e))

        return success_response(f"Genres: {', '.join(draft.genres) or '(none)'}", **_editor_state())

    except Exception:
        return unexpected_error_response("remove_draft_tag")


class RateDraftInput(BaseModel):
    """Input schema for rate_draft."""

    star: int = Field(
        ...,
        description="Star clicked (1-5); clicking the current rating resets it to 0",
        ge=0,
        le=MAX_STARS,
    )


@trace_tool("rate_draft")
async def rate_draft_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = RateDraftInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        try:
            draft = get_app().editor.set_rating(params.star)
        except CatalogError as e:
            return error_response("Cannot rate", str(e))

        return success_response(f"Rating: {draft.rating}/{MAX_STARS}", **_editor_state())

    except Exception:
        return unexpected_error_response("rate_draft")


@trace_tool("save_book_draft")
async def save_book_draft_handler(arguments: dict[str, Any] | None = None) -> dict[str, Any]:  # noqa: ARG001
    """Save the draft. A draft without title or author stays open."""
    try:
        editor = get_app().editor
        creating = editor.editing_id is None
        try:
            book = editor.submit()
        except DraftValidationError as e:
            return error_response("Incomplete draft", str(e))
        except CatalogError as e:
            return error_response("Save failed", str(e))

        verb = "Added" if creating else "Updated"
        return success_response(f"{verb} '{book.title}' by {book.author}.", book=format_book(book))

    except Exception:
        return unexpected_error_response("save_book_draft")


@trace_tool("cancel_book_editor")
async def cancel_book_editor_handler(arguments: dict[str, Any] | None = None) -> dict[str, Any]:  # noqa: ARG001
    try:
        get_app().editor.cancel()
        return success_response("Editor closed; draft discarded.", **_editor_state())
    except Exception:
        return unexpected_error_response("cancel_book_editor")


_NO_ARGUMENTS = {"type": "object", "properties": {}}

open_book_editor = {
    "name": "open_book_editor",
    "description": (
        "Open the book editor: with book_id to edit that book, without to add a "
        "new one. Requires the admin session."
    ),
    "inputSchema": OpenBookEditorInput.model_json_schema(),
    "handler": open_book_editor_handler,
}

update_book_draft = {
    "name": "update_book_draft",
    "description": "Change fields of the draft in the open editor.",
    "inputSchema": UpdateBookDraftInput.model_json_schema(by_alias=True),
    "handler": update_book_draft_handler,
}

add_draft_tag = {
    "name": "add_draft_tag",
    "description": "Add a genre tag to the draft. Blank or repeated tags are ignored.",
    "inputSchema": DraftTagInput.model_json_schema(),
    "handler": add_draft_tag_handler,
}

remove_draft_tag = {
    "name": "remove_draft_tag",
    "description": "Remove a genre tag from the draft (exact match).",
    "inputSchema": DraftTagInput.model_json_schema(),
    "handler": remove_draft_tag_handler,
}

rate_draft = {
    "name": "rate_draft",
    "description": (
        "Set the draft's star rating. Clicking the star equal to the current "
        "rating clears it to 0."
    ),
    "inputSchema": RateDraftInput.model_json_schema(),
    "handler": rate_draft_handler,
}

save_book_draft = {
    "name": "save_book_draft",
    "description": (
        "Save the open draft as a new or updated book. Title and author are "
        "required; an incomplete draft stays open."
    ),
    "inputSchema": _NO_ARGUMENTS,
    "handler": save_book_draft_handler,
}

cancel_book_editor = {
    "name": "cancel_book_editor",
    "description": "Close the editor and discard the draft.",
    "inputSchema": _NO_ARGUMENTS,
    "handler": cancel_book_editor_handler,
}
