"""
SQLAlchemy database schema for the Personal Library MCP Server.

The catalog is persisted as a single keyed blob: one row per storage key,
holding the whole collection as a JSON array. Every save replaces the row's
value; there is no record-level storage.
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Base class for all SQLAlchemy models
Base = declarative_base()


class StoredBlob(Base):
    """
    Key/value table backing catalog persistence.

    Usage:
    - Read on startup to restore the collection
    - Overwritten after every successful catalog mutation
    """

    __tablename__ = "stored_blobs"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StoredBlob(key='{self.key}', size={len(self.value or '')})>"
