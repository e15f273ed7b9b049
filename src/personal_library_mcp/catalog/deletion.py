"""Two-step delete confirmation.

The first request for a book arms the confirmation; a second request for the
same book inside the timeout window deletes it. The window is measured with
an injectable monotonic clock so tests can drive it.
"""

import logging
import time
from collections.abc import Callable
from enum import Enum

from .store import CatalogStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0


class DeleteOutcome(str, Enum):
    ARMED = "armed"
    DELETED = "deleted"


class DeleteConfirmation:
    def __init__(
        self,
        store: CatalogStore,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.store = store
        self.timeout = timeout
        self._clock = clock
        self._armed_id: str | None = None
        self._armed_at = 0.0

    @property
    def armed_id(self) -> str | None:
        """Id awaiting confirmation, None once the window has lapsed."""
        if self._armed_id is not None and self._clock() - self._armed_at >= self.timeout:
            logger.debug("Delete confirmation for %s expired", self._armed_id)
            self._armed_id = None
        return self._armed_id

    def is_armed(self, book_id: str) -> bool:
        return self.armed_id == book_id

    def request(self, book_id: str) -> DeleteOutcome:
        """Arm, or confirm and delete.

        Raises:
            NotAuthorizedError: Outside an admin session
        """
        self.store.gate.require_admin("delete a book")
        if self.is_armed(book_id):
            self._armed_id = None
            self.store.remove(book_id)
            return DeleteOutcome.DELETED

        self._armed_id = book_id
        self._armed_at = self._clock()
        logger.debug("Delete of %s armed for %.1fs", book_id, self.timeout)
        return DeleteOutcome.ARMED

    def reset(self) -> None:
        self._armed_id = None
