"""Catalog behaviour: the store and the components that act on it."""

from .admin import AdminGate
from .cover_url import normalize_cover_url
from .deletion import DeleteConfirmation, DeleteOutcome
from .editor import BookEditor, EditorMode
from .rating import MAX_STARS, toggle_rating
from .search import ALL_STATUSES, filter_books, parse_status_filter
from .store import CatalogStore, LoadSource
from .tags import add_tag, remove_tag
from .transfer import ExportArtifact, export_all, import_all

__all__ = [
    "ALL_STATUSES",
    "MAX_STARS",
    "AdminGate",
    "BookEditor",
    "CatalogStore",
    "DeleteConfirmation",
    "DeleteOutcome",
    "EditorMode",
    "ExportArtifact",
    "LoadSource",
    "add_tag",
    "export_all",
    "filter_books",
    "import_all",
    "normalize_cover_url",
    "parse_status_filter",
    "remove_tag",
    "toggle_rating",
]
