"""
Book model for the Personal Library MCP Server.

A book is the only persisted entity. The whole collection is stored and
exported as a JSON array of these records, using the wire keys
``id, title, author, year, description, rating, status, coverUrl, genres``.

Two models live here:
1. ``Book`` - a complete record that satisfies the catalog invariants
2. ``BookDraft`` - the partial record edited in the create/edit dialog
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookStatus(str, Enum):
    """Reading status of a book."""

    READ = "Read"
    REREAD = "Reread"
    PENDING = "Pending"
    ABANDONED = "Abandoned"
    READING = "Reading"

    @classmethod
    def from_label(cls, label: str) -> "BookStatus":
        """Resolve an English or legacy Spanish label to a status.

        Raises:
            ValueError: If the label is not a known status
        """
        text = label.strip()
        if text in LEGACY_STATUS_LABELS:
            return LEGACY_STATUS_LABELS[text]
        for status in cls:
            if status.value.lower() == text.lower():
                return status
        raise ValueError(f"Unknown book status: {label!r}")


# Labels written by the original Spanish-language catalog
LEGACY_STATUS_LABELS: dict[str, BookStatus] = {
    "Leído": BookStatus.READ,
    "Releído": BookStatus.REREAD,
    "Pendiente": BookStatus.PENDING,
    "Abandonado": BookStatus.ABANDONED,
    "Leyendo": BookStatus.READING,
}


def current_year() -> int:
    return datetime.now().year


def normalize_genres(values: Any) -> list[str]:
    """Trim tags, drop empty ones and keep the first of any duplicates."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    genres: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        tag = value.strip()
        if tag and tag not in genres:
            genres.append(tag)
    return genres


def _coerce_status(v: Any) -> Any:
    if isinstance(v, str) and not isinstance(v, BookStatus):
        return BookStatus.from_label(v)
    return v


def _coerce_year(v: Any) -> int | None:
    if isinstance(v, bool) or v is None:
        return None
    if isinstance(v, float) and not v.is_integer():
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


_BOOK_EXAMPLE = {
    "id": "1718035200000",
    "title": "Cien años de soledad",
    "author": "Gabriel García Márquez",
    "year": 1967,
    "description": "La saga de la familia Buendía en Macondo.",
    "rating": 5,
    "status": "Read",
    "coverUrl": "https://lh3.googleusercontent.com/u/0/d/1AbC_dEf-123",
    "genres": ["Realismo mágico", "Novela"],
}


class Book(BaseModel):
    """
    A catalog record.

    Title and author are never empty once a record exists. ``cover_url`` holds
    the normalized URL, never raw user input.
    """

    id: str = Field(
        ...,
        description="Opaque identifier, unique within the collection",
        min_length=1,
    )

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        examples=["Dune", "Cien años de soledad"],
    )

    author: str = Field(
        ...,
        description="Author name as displayed",
        min_length=1,
        examples=["Frank Herbert"],
    )

    year: int = Field(
        default_factory=current_year,
        description="Publication year; the current year when unknown",
    )

    description: str = Field(
        default="",
        description="Free-text description, may be empty",
    )

    rating: int = Field(
        default=0,
        description="Star rating, 0 means unrated",
        ge=0,
        le=5,
    )

    status: BookStatus = Field(
        default=BookStatus.PENDING,
        description="Reading status",
    )

    cover_url: str = Field(
        default="",
        alias="coverUrl",
        description="Direct-fetch cover image URL",
    )

    genres: list[str] = Field(
        default_factory=list,
        description="Genre tags, unique within the record",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": _BOOK_EXAMPLE},
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Accept numeric ids from older exports."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "author", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("year", mode="before")
    @classmethod
    def default_invalid_year(cls, v: Any) -> int:
        """Fall back to the current year for absent or unparsable years."""
        year = _coerce_year(v)
        return current_year() if year is None else year

    @field_validator("description", mode="before")
    @classmethod
    def none_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> Any:
        return _coerce_status(v)

    @field_validator("cover_url", mode="before")
    @classmethod
    def none_cover(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("genres", mode="before")
    @classmethod
    def clean_genres(cls, v: Any) -> list[str]:
        return normalize_genres(v)

    def to_record(self) -> dict[str, Any]:
        """Serialize using the persisted wire keys."""
        return self.model_dump(mode="json", by_alias=True)


class BookDraft(BaseModel):
    """
    The in-progress record edited in the create/edit dialog.

    Every field is optional. Fields explicitly set on a draft are what an
    update applies (see ``model_fields_set``).
    """

    id: str | None = None
    title: str | None = None
    author: str | None = None
    year: int | None = None
    description: str | None = None
    rating: int | None = Field(default=None, ge=0, le=5)
    status: BookStatus | None = None
    cover_url: str | None = Field(default=None, alias="coverUrl")
    genres: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("year", mode="before")
    @classmethod
    def drop_invalid_year(cls, v: Any) -> int | None:
        return _coerce_year(v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> Any:
        return _coerce_status(v)

    @field_validator("genres", mode="before")
    @classmethod
    def clean_genres(cls, v: Any) -> list[str]:
        return normalize_genres(v)

    @classmethod
    def from_book(cls, book: Book) -> "BookDraft":
        """Seed a draft with every field of an existing record."""
        return cls.model_validate(book.model_dump())

    def missing_required(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        missing = []
        if not (self.title or "").strip():
            missing.append("title")
        if not (self.author or "").strip():
            missing.append("author")
        return missing
