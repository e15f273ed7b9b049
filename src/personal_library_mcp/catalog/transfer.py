"""
Import and export of the whole collection.

Export produces a pretty-printed JSON array named after the export date.
Import accepts such an array and, only when every record in it is valid,
hands back the books that will replace the collection. Replacement itself is
done by the store; nothing here mutates state.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from ..codec import decode_collection, encode_collection
from ..models.book import Book
from ..models.results import Err, ExportErrorKind, ImportErrorKind, Ok, Result

logger = logging.getLogger(__name__)

EXPORT_MIME_TYPE = "application/json"


@dataclass(frozen=True)
class ExportArtifact:
    """A downloadable export file."""

    filename: str
    mime_type: str
    content: str
    record_count: int
    path: Path | None = None


def export_filename(prefix: str, on: date) -> str:
    return f"{prefix}_{on.isoformat()}.json"


def export_all(
    books: Sequence[Book],
    prefix: str = "library",
    today: date | None = None,
) -> Result[ExportArtifact, ExportErrorKind]:
    """Serialize the collection into an export artifact.

    An empty collection yields ``Err(EMPTY_COLLECTION)`` and no artifact.
    """
    if not books:
        return Err(ExportErrorKind.EMPTY_COLLECTION, "Nothing to export: the catalog is empty")

    artifact = ExportArtifact(
        filename=export_filename(prefix, today or date.today()),
        mime_type=EXPORT_MIME_TYPE,
        content=encode_collection(books, indent=2),
        record_count=len(books),
    )
    logger.info("Exported %d books as %s", artifact.record_count, artifact.filename)
    return Ok(artifact)


def import_all(artifact: str | bytes) -> Result[list[Book], ImportErrorKind]:
    """Parse an import artifact.

    The payload must be a JSON array whose every element is a valid book with
    a distinct id. Any invalid element rejects the whole import.
    """
    result = decode_collection(artifact)
    match result:
        case Ok(value=books):
            logger.info("Import artifact holds %d books", len(books))
        case Err(kind=kind, message=message):
            logger.warning("Rejected import artifact (%s): %s", kind.value, message)
    return result
