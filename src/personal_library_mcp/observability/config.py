"""Configuration for Logfire observability."""

import os
from typing import Literal

from pydantic import BaseModel, Field


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class ObservabilityConfig(BaseModel):
    """Logfire settings, read from ``LOGFIRE_*`` environment variables."""

    token: str = Field(default_factory=lambda: os.getenv("LOGFIRE_TOKEN", ""), repr=False)
    service_name: str = "personal-library-mcp"
    environment: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))

    enabled: bool = Field(default_factory=lambda: _env_flag("LOGFIRE_ENABLED", "true"))
    console_output: bool = Field(default_factory=lambda: _env_flag("LOGFIRE_CONSOLE", "false"))
    # Only ship spans when a token is configured, unless told otherwise
    send_to_logfire: bool | Literal["if-token-present"] = Field(
        default_factory=lambda: (
            _env_flag("LOGFIRE_SEND", "false") if "LOGFIRE_SEND" in os.environ else "if-token-present"
        )
    )
