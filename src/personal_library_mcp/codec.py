"""JSON encoding and validation of whole collections.

Both the persisted blob and import artifacts are a JSON array of book
records. Decoding validates every element, so a collection that comes back
as ``Ok`` always satisfies the catalog invariants: well-formed records with
distinct ids and non-empty title and author.
"""

import json
from collections.abc import Iterable

from pydantic import ValidationError

from .models.book import Book
from .models.results import Err, ImportErrorKind, Ok, Result


def encode_collection(books: Iterable[Book], indent: int | None = None) -> str:
    """Serialize books to a JSON array using the wire keys."""
    return json.dumps(
        [book.to_record() for book in books],
        ensure_ascii=False,
        indent=indent,
    )


def decode_collection(raw: str | bytes) -> Result[list[Book], ImportErrorKind]:
    """Parse and validate a JSON array of book records.

    The whole payload is rejected when any element is invalid or when two
    elements share an id.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            return Err(ImportErrorKind.INVALID_FORMAT, "File is not UTF-8 text")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(ImportErrorKind.INVALID_FORMAT, f"Invalid JSON: {e.msg} (line {e.lineno})")

    if not isinstance(data, list):
        return Err(
            ImportErrorKind.INVALID_FORMAT,
            f"Expected a JSON array of books, got {type(data).__name__}",
        )

    books: list[Book] = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            return Err(
                ImportErrorKind.INVALID_RECORDS,
                f"Record {index} is not an object",
            )
        try:
            book = Book.model_validate(entry)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            return Err(
                ImportErrorKind.INVALID_RECORDS,
                f"Record {index} is invalid ({fields})",
            )
        if book.id in seen_ids:
            return Err(
                ImportErrorKind.INVALID_RECORDS,
                f"Record {index} repeats id {book.id}",
            )
        seen_ids.add(book.id)
        books.append(book)

    return Ok(books)
