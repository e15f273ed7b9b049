"""Admin session gate.

A single shared secret unlocks the privileged session in which the catalog
may be changed, imported, exported or enriched. The secret is held and
compared in plain form inside the running server. That is only acceptable
for a single-user personal catalog; do not reuse this for anything
multi-tenant.
"""

import hmac
import logging

from ..exceptions import NotAuthorizedError

logger = logging.getLogger(__name__)


class AdminGate:
    """Holds the ``is_admin`` session flag."""

    def __init__(self, shared_secret: str):
        self._secret = shared_secret.encode("utf-8")
        self._is_admin = False

    @property
    def is_admin(self) -> bool:
        return self._is_admin

    def attempt_login(self, candidate_secret: str) -> bool:
        """Unlock the session if the candidate matches the shared secret.

        No lockout and no rate limiting. A failed attempt always leaves the
        session locked, even one that was unlocked before.
        """
        if hmac.compare_digest(candidate_secret.encode("utf-8"), self._secret):
            self._is_admin = True
            logger.info("Admin session unlocked")
            return True

        self._is_admin = False
        logger.warning("Rejected admin login attempt")
        return False

    def logout(self) -> None:
        self._is_admin = False
        logger.info("Admin session closed")

    def require_admin(self, action: str) -> None:
        """Raise unless the session is privileged.

        Raises:
            NotAuthorizedError: If no admin session is active
        """
        if not self._is_admin:
            raise NotAuthorizedError(action)
