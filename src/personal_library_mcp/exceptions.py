"""Exception hierarchy for catalog operations.

Tool handlers catch ``CatalogError`` and turn it into an ``isError`` response,
so every failure here is recoverable: the catalog is left in its last
consistent state and the message is shown to the user.

Corrupt persisted data and bad import artifacts are not exceptions; they come
back as ``Err`` values (see ``models.results``).
"""


class CatalogError(Exception):
    """Base exception for catalog operations."""


class DraftValidationError(CatalogError):
    """Raised when a draft is missing its title or author."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Title and author are required (missing: {', '.join(missing)})")


class BookNotFoundError(CatalogError):
    """Raised when no record matches the requested id."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book not found: {book_id}")


class NotAuthorizedError(CatalogError):
    """Raised when a privileged operation runs outside an admin session."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Admin session required to {action}")


class EditorStateError(CatalogError):
    """Raised when an editor operation does not fit the dialog state."""


class EnrichmentError(CatalogError):
    """Raised when the AI enrichment service fails or returns garbage."""
