"""Admin Session Tools

Unlock and lock the privileged session in which the catalog may be changed.

Tools:
- admin_login: Compare a candidate secret against the configured one
- admin_logout: Leave the privileged session
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..app import get_app
from ..observability import trace_tool
from .responses import (
    error_response,
    invalid_input_response,
    success_response,
    unexpected_error_response,
)

logger = logging.getLogger(__name__)


class AdminLoginInput(BaseModel):
    """Input schema for admin_login."""

    secret: str = Field(
        ...,
        description="The shared admin secret",
        min_length=1,
        max_length=500,
    )


@trace_tool("admin_login")
async def admin_login_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Unlock the admin session.

    Client calls: tool.call("admin_login", {"secret": "..."})
    """
    try:
        try:
            params = AdminLoginInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        # The candidate is never stored, so the input is always cleared
        if not get_app().login(params.secret):
            response = error_response("Access denied", "Incorrect admin secret")
            response["data"] = {"is_admin": False, "password_cleared": True}
            return response

        return success_response("Admin session unlocked.", is_admin=True, password_cleared=True)

    except Exception:
        return unexpected_error_response("admin_login")


@trace_tool("admin_logout")
async def admin_logout_handler(arguments: dict[str, Any] | None = None) -> dict[str, Any]:  # noqa: ARG001
    """Lock the admin session and close the editor."""
    try:
        get_app().logout()
        return success_response("Admin session closed.", is_admin=False)
    except Exception:
        return unexpected_error_response("admin_logout")


admin_login = {
    "name": "admin_login",
    "description": (
        "Unlock the admin session with the shared secret. Adding, editing, "
        "deleting, importing, exporting and AI enrichment require it."
    ),
    "inputSchema": AdminLoginInput.model_json_schema(),
    "handler": admin_login_handler,
}

admin_logout = {
    "name": "admin_logout",
    "description": "Leave the admin session. Any open editor is discarded.",
    "inputSchema": {"type": "object", "properties": {}},
    "handler": admin_logout_handler,
}
