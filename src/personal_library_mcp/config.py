"""Configuration management for the Personal Library MCP Server.

Settings come from environment variables prefixed with ``PERSONAL_LIBRARY_``
(or a ``.env`` file) and are validated with Pydantic v2:
1. Protocol Metadata - server name and version for the MCP handshake
2. Storage - where the catalog blob lives and which dataset seeds it
3. Security - the shared admin secret, hidden from reprs
4. Session behaviour - delete confirmation window, export naming
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_BOOTSTRAP_PATH = Path(__file__).parent / "data" / "default_books.json"

DEFAULT_PLACEHOLDER_COVER = (
    "https://images.unsplash.com/photo-1543004471-2401c3eaa991"
    "?q=80&w=1000&auto=format&fit=crop"
)


class LibraryConfig(BaseSettings):
    """Server configuration for the personal catalog.

    The catalog is a single-user tool, so the admin secret is a plain shared
    value compared in memory. Everything else has a working default so the
    server can start without any environment set up.
    """

    model_config = SettingsConfigDict(
        # Use PERSONAL_LIBRARY_ prefix for all env vars
        env_prefix="PERSONAL_LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    # === Server Metadata (Required by MCP Protocol) ===

    server_name: str = Field(
        default="personal-library",
        description="MCP server name used in protocol handshake",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version for capability negotiation",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    transport: str = Field(
        default="stdio",
        description="Primary transport mechanism",
        pattern=r"^(stdio|streamable_http)$",
    )

    # === Storage Configuration ===

    database_path: Path = Field(
        default=Path("data/personal_library.db"),
        description="SQLite database file holding the catalog blob",
    )

    storage_key: str = Field(
        default="personal_library_books_v5",
        description="Key under which the whole collection is stored",
        min_length=1,
        max_length=200,
    )

    bootstrap_path: Path | None = Field(
        default=BUNDLED_BOOTSTRAP_PATH,
        description="JSON array adopted when no persisted collection exists",
    )

    # === Security Configuration ===

    admin_secret: str = Field(
        default="change-me",
        description="Shared secret unlocking the privileged session",
        min_length=1,
        # Sensitive data - keep it out of logs
        repr=False,
    )

    # === Catalog Behaviour ===

    placeholder_cover_url: str = Field(
        default=DEFAULT_PLACEHOLDER_COVER,
        description="Cover used when a new book is saved without one",
    )

    delete_confirm_timeout: float = Field(
        default=3.0,
        description="Seconds a first delete click stays armed",
        gt=0,
        le=60,
    )

    export_dir: Path = Field(
        default=Path("exports"),
        description="Directory receiving export files and generated covers",
    )

    export_filename_prefix: str = Field(
        default="library",
        description="Export files are named <prefix>_<YYYY-MM-DD>.json",
        pattern=r"^[A-Za-z0-9_-]+$",
    )

    # === Feature Flags ===

    enable_sampling: bool = Field(
        default=True,
        description="Enable AI enrichment through MCP sampling",
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging for protocol messages",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    # === Validation Methods ===

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Make the database path absolute and ensure its directory exists."""
        abs_path = v.absolute()
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        if not abs_path.parent.is_dir():
            raise ValueError(f"Database directory {abs_path.parent} is not accessible")
        return abs_path

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        """Validate server name meets MCP naming conventions."""
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    # === Computed Properties ===

    @property
    def server_info(self) -> dict[str, str]:
        """Name, version and transport, as shown in the startup banner."""
        return {
            "name": self.server_name,
            "version": self.server_version,
            "transport": self.transport,
        }

    def get_database_url(self) -> str:
        """Get SQLAlchemy database URL."""
        return f"sqlite:///{self.database_path}"


# === Global Configuration Instance ===


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LibraryConfig | None = None


def get_config() -> LibraryConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibraryConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
