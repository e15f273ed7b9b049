"""MCP resources for the personal library server."""

from .books import book_resources

all_resources = [*book_resources]

__all__ = ["all_resources", "book_resources"]
