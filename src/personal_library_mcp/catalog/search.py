"""Free-text and status filtering over the collection."""

from collections.abc import Iterable
from typing import Final

from ..models.book import Book, BookStatus


class _AllStatuses:
    """Sentinel accepted as a status filter meaning "any status"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL_STATUSES"


ALL_STATUSES: Final = _AllStatuses()

StatusFilter = BookStatus | _AllStatuses


def search_text(book: Book) -> str:
    """Lower-cased text a search term is matched against."""
    return (book.title + book.author + " ".join(book.genres)).lower()


def matches(book: Book, search_term: str, status_filter: StatusFilter = ALL_STATUSES) -> bool:
    if search_term and search_term.lower() not in search_text(book):
        return False
    return status_filter is ALL_STATUSES or book.status == status_filter


def filter_books(
    books: Iterable[Book],
    search_term: str = "",
    status_filter: StatusFilter = ALL_STATUSES,
) -> list[Book]:
    """Books matching both the search term and the status filter.

    The term is a case-insensitive substring of title, author and genres
    concatenated; an empty term matches everything. Source order is kept.
    """
    return [book for book in books if matches(book, search_term, status_filter)]


def parse_status_filter(value: str | None) -> StatusFilter:
    """Turn a user-supplied label into a status filter.

    ``None``, ``""``, ``"all"`` and the legacy ``"Todos"`` mean all statuses.

    Raises:
        ValueError: If the label is not a known status
    """
    if value is None or value.strip().lower() in ("", "all", "todos"):
        return ALL_STATUSES
    return BookStatus.from_label(value)
