"""
Catalog store - the owner of the in-memory collection.

Every change to the collection goes through ``CatalogStore``:
1. The admin gate is checked at this boundary, not only by the callers
2. The new collection is written to storage before it replaces the old one,
   so a failed write leaves memory untouched
3. Observers are notified after each successful change

Reads (``list_books``, ``get``) are open to everyone.
"""

import logging
import time
from collections.abc import Callable, Iterable
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from ..database.catalog_storage import CatalogStorage
from ..exceptions import BookNotFoundError, DraftValidationError
from ..models.book import Book, BookDraft, BookStatus, current_year
from ..models.results import Err, LoadErrorKind, Ok
from .admin import AdminGate
from .cover_url import normalize_cover_url

logger = logging.getLogger(__name__)

Observer = Callable[[tuple[Book, ...]], None]


class LoadSource(str, Enum):
    """Where the collection came from at startup."""

    PERSISTED = "persisted"
    BOOTSTRAP = "bootstrap"
    EMPTY = "empty"


class CatalogStore:
    """Owns the ordered collection of books, newest first."""

    def __init__(
        self,
        storage: CatalogStorage,
        gate: AdminGate,
        placeholder_cover_url: str = "",
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.gate = gate
        self.placeholder_cover_url = placeholder_cover_url
        self._clock = clock
        self._books: list[Book] = []
        self._observers: list[Observer] = []

    # === Loading ===

    def load(self) -> LoadSource:
        """Restore the collection on startup. Never raises.

        Falls back to the bootstrap dataset when nothing usable is persisted,
        and to an empty collection when that is unavailable too. When the
        database could not be read the fallback stays in memory only, so the
        saved catalog is not overwritten.
        """
        persist_fallback = True
        match self.storage.read():
            case Ok(value=books):
                self._books = books
                logger.info("Loaded %d books from storage", len(books))
                return LoadSource.PERSISTED
            case Err(kind=LoadErrorKind.UNREADABLE, message=message):
                logger.warning("Not replacing the saved catalog: %s", message)
                persist_fallback = False
            case Err(kind=kind, message=message):
                logger.info("No usable persisted catalog (%s): %s", kind.value, message)

        match self.storage.read_bootstrap():
            case Ok(value=books):
                self._books = books
                if persist_fallback:
                    try:
                        self.save()
                    except SQLAlchemyError:
                        logger.exception("Could not persist the bootstrap dataset")
                logger.info("Adopted %d books from the bootstrap dataset", len(books))
                return LoadSource.BOOTSTRAP
            case Err(message=message):
                logger.info("Starting with an empty catalog: %s", message)

        self._books = []
        return LoadSource.EMPTY

    def save(self) -> None:
        """Write the whole collection to storage."""
        self.storage.write(self._books)

    # === Reads ===

    def list_books(self) -> tuple[Book, ...]:
        """The full collection in stored order."""
        return tuple(self._books)

    def get(self, book_id: str) -> Book | None:
        return next((b for b in self._books if b.id == book_id), None)

    def __len__(self) -> int:
        return len(self._books)

    # === Mutations ===

    def add(self, draft: BookDraft) -> Book:
        """Create a record from a draft and put it first.

        Raises:
            NotAuthorizedError: Outside an admin session
            DraftValidationError: If title or author is missing
        """
        self.gate.require_admin("add a book")
        missing = draft.missing_required()
        if missing:
            raise DraftValidationError(missing)

        book = Book(
            id=self._new_id(),
            title=draft.title,
            author=draft.author,
            year=draft.year if draft.year is not None else current_year(),
            description=draft.description or "",
            rating=draft.rating or 0,
            status=draft.status or BookStatus.PENDING,
            cover_url=self._cover(draft.cover_url),
            genres=draft.genres,
        )
        self._commit([book, *self._books])
        logger.info("Added book %s: %s", book.id, book.title)
        return book

    def update(self, book_id: str, patch: BookDraft) -> Book:
        """Merge the fields set on ``patch`` over an existing record.

        Raises:
            NotAuthorizedError: Outside an admin session
            BookNotFoundError: If no record has ``book_id``
            DraftValidationError: If the patch blanks the title or author
        """
        self.gate.require_admin("edit a book")
        index = self._index_of(book_id)
        if index is None:
            raise BookNotFoundError(book_id)

        changes = {
            name: getattr(patch, name)
            for name in patch.model_fields_set
            if name != "id" and getattr(patch, name) is not None
        }
        missing = [
            name for name in ("title", "author")
            if name in changes and not changes[name].strip()
        ]
        if missing:
            raise DraftValidationError(missing)
        if "cover_url" in changes:
            changes["cover_url"] = self._cover(changes["cover_url"])

        current = self._books[index]
        updated = Book.model_validate({**current.model_dump(), **changes})
        books = list(self._books)
        books[index] = updated
        self._commit(books)
        logger.info("Updated book %s (%s)", book_id, ", ".join(sorted(changes)) or "no changes")
        return updated

    def remove(self, book_id: str) -> bool:
        """Delete a record. Removing an unknown id is a no-op.

        Returns:
            True if a record was removed

        Raises:
            NotAuthorizedError: Outside an admin session
        """
        self.gate.require_admin("delete a book")
        if self._index_of(book_id) is None:
            logger.debug("Remove of unknown book %s ignored", book_id)
            return False
        self._commit([b for b in self._books if b.id != book_id])
        logger.info("Removed book %s", book_id)
        return True

    def replace_all(self, books: Iterable[Book]) -> int:
        """Replace the whole collection, as an import does.

        Raises:
            NotAuthorizedError: Outside an admin session
        """
        self.gate.require_admin("replace the catalog")
        new_books = list(books)
        self._commit(new_books)
        logger.info("Replaced catalog with %d books", len(new_books))
        return len(new_books)

    # === Observers ===

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer`` with the new collection after every change.

        Returns:
            A function that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # === Internals ===

    def _commit(self, books: list[Book]) -> None:
        self.storage.write(books)
        self._books = books
        snapshot = tuple(books)
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Catalog observer %r failed", observer)

    def _index_of(self, book_id: str) -> int | None:
        return next((i for i, b in enumerate(self._books) if b.id == book_id), None)

    def _new_id(self) -> str:
        taken = {b.id for b in self._books}
        candidate = int(self._clock() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _cover(self, raw_url: str | None) -> str:
        return normalize_cover_url(raw_url) or self.placeholder_cover_url
