"""
Create/edit dialog for a single book.

States:
    CLOSED --open_create()--> CREATE --submit()/cancel()--> CLOSED
    CLOSED --open_edit(id)--> EDIT   --submit()/cancel()--> CLOSED

The dialog owns the draft. A submit that fails validation keeps the dialog
open with the draft intact. Each opening gets a new session token; enrichment
results carry the token they were requested under and are dropped if the
dialog has since been closed or reopened.
"""

import logging
from enum import Enum
from typing import Any

from ..exceptions import BookNotFoundError, DraftValidationError, EditorStateError
from ..models.book import Book, BookDraft, BookStatus, current_year
from . import rating, tags
from .store import CatalogStore

logger = logging.getLogger(__name__)

# Field names the client may set on a draft; ``coverUrl`` is accepted too
DRAFT_FIELDS = frozenset(
    {"title", "author", "year", "description", "rating", "status", "cover_url", "genres"}
)


class EditorMode(str, Enum):
    CLOSED = "closed"
    CREATE = "create"
    EDIT = "edit"


class BookEditor:
    """State machine around the draft being created or edited."""

    def __init__(self, store: CatalogStore):
        self.store = store
        self.mode = EditorMode.CLOSED
        self._draft: BookDraft | None = None
        self._editing_id: str | None = None
        self._token = 0

    @property
    def is_open(self) -> bool:
        return self.mode is not EditorMode.CLOSED

    @property
    def token(self) -> int | None:
        """Token of the current dialog session, None when closed."""
        return self._token if self.is_open else None

    @property
    def editing_id(self) -> str | None:
        return self._editing_id

    @property
    def draft(self) -> BookDraft:
        return self._require_open()

    # === Transitions ===

    def open_create(self) -> int:
        """Open the dialog on a fresh draft."""
        self.store.gate.require_admin("add a book")
        self._open(
            EditorMode.CREATE,
            BookDraft(
                title="",
                author="",
                year=current_year(),
                description="",
                rating=0,
                status=BookStatus.PENDING,
                cover_url="",
                genres=[],
            ),
            None,
        )
        return self._token

    def open_edit(self, book_id: str) -> int:
        """Open the dialog seeded with an existing record.

        Raises:
            BookNotFoundError: If no record has ``book_id``
        """
        self.store.gate.require_admin("edit a book")
        book = self.store.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        self._open(EditorMode.EDIT, BookDraft.from_book(book), book_id)
        return self._token

    def submit(self) -> Book:
        """Save the draft and close the dialog.

        Raises:
            DraftValidationError: If title or author is missing; stays open
        """
        draft = self._require_open()
        missing = draft.missing_required()
        if missing:
            raise DraftValidationError(missing)

        if self.mode is EditorMode.CREATE:
            book = self.store.add(draft)
        else:
            book = self.store.update(self._editing_id, draft)
        self._close()
        return book

    def cancel(self) -> None:
        """Close the dialog and discard the draft. Safe when already closed."""
        if self.is_open:
            logger.debug("Discarding %s draft", self.mode.value)
        self._close()

    # === Draft edits ===

    def update_draft(self, **fields: Any) -> BookDraft:
        """Set draft fields by name.

        Raises:
            EditorStateError: When closed or given an unknown field
            pydantic.ValidationError: If a value is invalid (e.g. rating 7)
        """
        draft = self._require_open()
        if "coverUrl" in fields:
            fields["cover_url"] = fields.pop("coverUrl")
        unknown = set(fields) - DRAFT_FIELDS
        if unknown:
            raise EditorStateError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        self._draft = BookDraft.model_validate({**draft.model_dump(), **fields})
        return self._draft

    def add_tag(self, raw_input: str) -> BookDraft:
        self._draft = tags.add_tag(self._require_open(), raw_input)
        return self._draft

    def remove_tag(self, tag: str) -> BookDraft:
        self._draft = tags.remove_tag(self._require_open(), tag)
        return self._draft

    def set_rating(self, clicked_star: int) -> BookDraft:
        draft = self._require_open()
        new_rating = rating.toggle_rating(draft.rating or 0, clicked_star)
        self._draft = draft.model_copy(update={"rating": new_rating})
        return self._draft

    def apply_suggestion(self, token: int, suggestion: dict[str, Any]) -> bool:
        """Merge enrichment results into the draft they were requested for.

        Returns:
            False if that dialog session is gone; the result is dropped
        """
        if not self.is_open or token != self._token:
            logger.info("Dropping enrichment result for closed editor session %s", token)
            return False
        draft = self._require_open()
        changes = {
            k: v for k, v in suggestion.items() if k in DRAFT_FIELDS and v is not None
        }
        self._draft = BookDraft.model_validate({**draft.model_dump(), **changes})
        return True

    # === Internals ===

    def _open(self, mode: EditorMode, draft: BookDraft, editing_id: str | None) -> None:
        self._token += 1
        self.mode = mode
        self._draft = draft
        self._editing_id = editing_id
        logger.debug("Editor opened in %s mode (session %d)", mode.value, self._token)

    def _close(self) -> None:
        self.mode = EditorMode.CLOSED
        self._draft = None
        self._editing_id = None

    def _require_open(self) -> BookDraft:
        if self._draft is None:
            raise EditorStateError("No book is being edited; open the editor first")
        return self._draft
