"""
Application root for the personal library server.

``LibraryApp`` wires the catalog components together and holds the session
state a user interface would otherwise keep: the admin flag, the open editor,
the armed delete confirmation and one loading flag per enrichment kind. Tool
and resource handlers reach everything through ``get_app()``.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from enum import Enum

from fastmcp import Context

from . import enrichment
from .catalog.admin import AdminGate
from .catalog.deletion import DeleteConfirmation
from .catalog.editor import BookEditor
from .catalog.search import ALL_STATUSES, StatusFilter, filter_books
from .catalog.store import CatalogStore, LoadSource
from .catalog.transfer import ExportArtifact, export_all, import_all
from .config import LibraryConfig, get_config
from .database import CatalogStorage, DatabaseManager
from .exceptions import EnrichmentError
from .models.book import Book
from .models.results import Err, ExportErrorKind, ImportErrorKind, Ok, Result

logger = logging.getLogger(__name__)


class EnrichmentKind(str, Enum):
    DETAILS = "details"
    BIO = "bio"
    COVER = "cover"


class LibraryApp:
    """Composition root and session state."""

    def __init__(
        self,
        config: LibraryConfig | None = None,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.config = config or get_config()

        self.db = DatabaseManager(self.config.get_database_url())
        self.db.init_database()
        self.storage = CatalogStorage(
            self.db, self.config.storage_key, bootstrap_path=self.config.bootstrap_path
        )
        self.gate = AdminGate(self.config.admin_secret)
        self.store = CatalogStore(
            self.storage,
            self.gate,
            placeholder_cover_url=self.config.placeholder_cover_url,
            clock=clock,
        )
        self.load_source: LoadSource = self.store.load()

        self.editor = BookEditor(self.store)
        self.deletion = DeleteConfirmation(
            self.store, timeout=self.config.delete_confirm_timeout, clock=monotonic
        )
        self.loading: dict[EnrichmentKind, bool] = {kind: False for kind in EnrichmentKind}
        self.author_bios: dict[str, str] = {}
        self.generated_cover: enrichment.GeneratedCover | None = None

        self.store.subscribe(self._on_catalog_change)
        logger.info(
            "Library ready: %d books (%s)", len(self.store), self.load_source.value
        )

    # === Session ===

    def login(self, secret: str) -> bool:
        """Unlock the admin session. A wrong secret locks an open one."""
        if self.gate.attempt_login(secret):
            return True
        self._drop_privileged_state()
        return False

    def logout(self) -> None:
        """Drop the admin session along with any privileged UI state."""
        self.gate.logout()
        self._drop_privileged_state()

    def session_state(self) -> dict:
        return {
            "is_admin": self.gate.is_admin,
            "book_count": len(self.store),
            "load_source": self.load_source.value,
            "editor": {
                "mode": self.editor.mode.value,
                "session": self.editor.token,
                "editing_id": self.editor.editing_id,
                "draft": self.editor.draft.model_dump(mode="json", by_alias=True)
                if self.editor.is_open
                else None,
            },
            "armed_delete": self.deletion.armed_id,
            "loading": {kind.value: busy for kind, busy in self.loading.items()},
            "sampling_enabled": self.config.enable_sampling,
        }

    # === Catalog ===

    def search(self, term: str = "", status: StatusFilter = ALL_STATUSES) -> list[Book]:
        return filter_books(self.store.list_books(), term, status)

    def export_catalog(self, today: date | None = None) -> Result[ExportArtifact, ExportErrorKind]:
        """Export the collection and write the file into ``export_dir``.

        Raises:
            NotAuthorizedError: Outside an admin session
            OSError: If the file cannot be written
        """
        self.gate.require_admin("export the catalog")
        result = export_all(
            self.store.list_books(), prefix=self.config.export_filename_prefix, today=today
        )
        if isinstance(result, Err):
            return result

        artifact = result.value
        self.config.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.config.export_dir / artifact.filename
        path.write_text(artifact.content, encoding="utf-8")
        logger.info("Wrote export to %s", path)
        return Ok(replace(artifact, path=path))

    def import_catalog(self, payload: str | bytes) -> Result[int, ImportErrorKind]:
        """Replace the collection with the contents of an import artifact.

        A rejected artifact leaves the collection untouched.

        Raises:
            NotAuthorizedError: Outside an admin session
        """
        self.gate.require_admin("import a catalog")
        match import_all(payload):
            case Ok(value=books):
                return Ok(self.store.replace_all(books))
            case Err() as err:
                return err

    # === Enrichment ===

    @contextmanager
    def busy(self, kind: EnrichmentKind) -> Iterator[None]:
        """Hold the loading flag for ``kind``; refuse a second concurrent request."""
        if self.loading[kind]:
            raise EnrichmentError(f"An AI {kind.value} request is already running")
        self.loading[kind] = True
        try:
            yield
        finally:
            self.loading[kind] = False

    def _require_enrichment(self) -> None:
        self.gate.require_admin("use AI enrichment")
        if not self.config.enable_sampling:
            raise EnrichmentError("AI enrichment is disabled in the server configuration")

    async def suggest_details(self, context: Context) -> tuple[enrichment.BookSuggestion, bool]:
        """Fill the open draft from the client's LLM.

        Returns:
            The suggestion, and whether it reached the draft (False when the
            editor was closed or reopened while waiting)
        """
        self._require_enrichment()
        token = self.editor.token
        draft = self.editor.draft
        with self.busy(EnrichmentKind.DETAILS):
            suggestion = await enrichment.suggest_details(
                context, draft.title or "", draft.author or None
            )
        return suggestion, self.editor.apply_suggestion(token, suggestion.as_draft_fields())

    async def author_bio(self, context: Context, author: str) -> str:
        self.gate.require_admin("use AI enrichment")
        if not self.config.enable_sampling:
            return enrichment.BIO_PLACEHOLDER
        if author in self.author_bios:
            return self.author_bios[author]
        with self.busy(EnrichmentKind.BIO):
            bio = await enrichment.author_bio(context, author)
        if bio != enrichment.BIO_PLACEHOLDER:
            self.author_bios[author] = bio
        return bio

    async def generate_cover(self, context: Context) -> tuple[enrichment.GeneratedCover, bool]:
        """Generate a cover preview for the open draft.

        Returns:
            The cover, and whether it was kept as the current preview
        """
        self._require_enrichment()
        token = self.editor.token
        draft = self.editor.draft
        with self.busy(EnrichmentKind.COVER):
            cover = await enrichment.generate_cover(context, draft.title or "", draft.author or None)
        if self.editor.token != token:
            logger.info("Dropping generated cover for closed editor session %s", token)
            return cover, False
        self.generated_cover = cover
        return cover, True

    # === Internals ===

    def _on_catalog_change(self, books: tuple[Book, ...]) -> None:
        ids = {b.id for b in books}
        if self.editor.editing_id is not None and self.editor.editing_id not in ids:
            logger.info("Book %s left the catalog; closing its editor", self.editor.editing_id)
            self.editor.cancel()
        armed_id = self.deletion.armed_id
        if armed_id is not None and armed_id not in ids:
            self.deletion.reset()

    def _drop_privileged_state(self) -> None:
        self.editor.cancel()
        self.deletion.reset()
        self.generated_cover = None


class _AppStore:
    """Holds the process-wide application instance."""

    _instance: LibraryApp | None = None


def get_app() -> LibraryApp:
    """Get the application instance, creating it on first use."""
    if _AppStore._instance is None:  # type: ignore[reportPrivateUsage]
        _AppStore._instance = LibraryApp()  # type: ignore[reportPrivateUsage]
    return _AppStore._instance  # type: ignore[reportPrivateUsage]


def set_app(app: LibraryApp | None) -> None:
    """Install an application instance (tests use this)."""
    _AppStore._instance = app  # type: ignore[reportPrivateUsage]


def reset_app() -> None:
    """Close and forget the application instance."""
    if _AppStore._instance is not None:  # type: ignore[reportPrivateUsage]
        _AppStore._instance.db.close()  # type: ignore[reportPrivateUsage]
    _AppStore._instance = None  # type: ignore[reportPrivateUsage]
