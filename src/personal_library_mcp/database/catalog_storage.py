"""
Catalog persistence on top of the keyed blob table.

``CatalogStorage`` is the only component that touches the database. It reads
and writes the collection under one storage key and reads the bundled
bootstrap dataset. Reads never raise: missing, empty or corrupt data comes
back as an ``Err`` so the store can fall back. A database that cannot be
read at all is ``UNREADABLE``, which is not the same as nothing saved.
"""

import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from ..codec import decode_collection, encode_collection
from ..models.book import Book
from ..models.results import Err, LoadErrorKind, Ok, Result
from .schema import StoredBlob
from .session import DatabaseManager

logger = logging.getLogger(__name__)


class CatalogStorage:
    """Reads and writes the whole collection as one JSON blob."""

    def __init__(
        self,
        db_manager: DatabaseManager,
        storage_key: str,
        bootstrap_path: Path | None = None,
    ):
        self.db_manager = db_manager
        self.storage_key = storage_key
        self.bootstrap_path = bootstrap_path

    def read(self) -> Result[list[Book], LoadErrorKind]:
        """Read the persisted collection."""
        try:
            with self.db_manager.session_scope() as session:
                blob = session.get(StoredBlob, self.storage_key)
                raw = blob.value if blob is not None else None
        except SQLAlchemyError as e:
            logger.warning("Could not read persisted catalog: %s", e)
            return Err(LoadErrorKind.UNREADABLE, "Persisted catalog is unreadable")

        if raw is None:
            return Err(LoadErrorKind.MISSING, "No persisted catalog")
        return self._decode(raw, "persisted catalog")

    def write(self, books: list[Book]) -> None:
        """Replace the persisted collection.

        Raises:
            SQLAlchemyError: If the write fails; callers keep their old state
        """
        payload = encode_collection(books)
        with self.db_manager.session_scope() as session:
            blob = session.get(StoredBlob, self.storage_key)
            if blob is None:
                session.add(StoredBlob(key=self.storage_key, value=payload))
            else:
                blob.value = payload
        logger.debug("Persisted %d books under %s", len(books), self.storage_key)

    def read_bootstrap(self) -> Result[list[Book], LoadErrorKind]:
        """Read the default dataset adopted when nothing is persisted."""
        if self.bootstrap_path is None:
            return Err(LoadErrorKind.MISSING, "No bootstrap dataset configured")
        try:
            raw = self.bootstrap_path.read_bytes()
        except OSError as e:
            logger.info("Bootstrap dataset unavailable at %s: %s", self.bootstrap_path, e)
            return Err(LoadErrorKind.MISSING, "Bootstrap dataset not found")
        return self._decode(raw, "bootstrap dataset")

    def _decode(self, raw: str | bytes, source: str) -> Result[list[Book], LoadErrorKind]:
        match decode_collection(raw):
            case Ok(value=books) if not books:
                return Err(LoadErrorKind.EMPTY, f"The {source} is empty")
            case Ok(value=books):
                return Ok(books)
            case Err(message=message):
                logger.warning("Ignoring corrupt %s: %s", source, message)
                return Err(LoadErrorKind.CORRUPT, message)
