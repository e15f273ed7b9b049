"""
Database package for the Personal Library MCP Server.

This package provides:
- SQLAlchemy schema for the keyed blob table (schema.py)
- Session management and connection handling (session.py)
- Whole-collection persistence and bootstrap loading (catalog_storage.py)
"""

from .catalog_storage import CatalogStorage
from .schema import Base, StoredBlob
from .session import DatabaseManager

__all__ = [
    "Base",
    "CatalogStorage",
    "DatabaseManager",
    "StoredBlob",
]
