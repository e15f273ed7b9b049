"""
Personal Library MCP Server Models.

Pydantic models for the catalog entity and the result types used where
failure is an expected outcome:
- Book / BookDraft / BookStatus: catalog records and the editable draft
- Ok / Err: outcomes of loading, importing and exporting
"""

from .book import Book, BookDraft, BookStatus, normalize_genres
from .results import Err, ExportErrorKind, ImportErrorKind, LoadErrorKind, Ok, Result

__all__ = [
    "Book",
    "BookDraft",
    "BookStatus",
    "Err",
    "ExportErrorKind",
    "ImportErrorKind",
    "LoadErrorKind",
    "Ok",
    "Result",
    "normalize_genres",
]
