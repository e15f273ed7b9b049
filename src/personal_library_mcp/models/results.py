"""
Result types for operations whose failure is an expected outcome.

Loading the persisted catalog and importing an artifact both parse untrusted
JSON. Instead of raising and catching, they return ``Ok(value)`` or
``Err(kind, message)`` so callers must look at the outcome:

    match storage.read():
        case Ok(value=books):
            ...
        case Err(kind=LoadErrorKind.CORRUPT):
            ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a reason and a user-facing message."""

    kind: E
    message: str

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


class LoadErrorKind(str, Enum):
    """Why a persisted or bootstrap collection could not be used."""

    MISSING = "missing"
    UNREADABLE = "unreadable"
    EMPTY = "empty"
    CORRUPT = "corrupt"


class ImportErrorKind(str, Enum):
    """Why an import artifact was rejected."""

    INVALID_FORMAT = "invalid_format"
    INVALID_RECORDS = "invalid_records"


class ExportErrorKind(str, Enum):
    """Why no export artifact was produced."""

    EMPTY_COLLECTION = "empty_collection"
