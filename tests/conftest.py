"""Test configuration and fixtures for the Personal Library MCP Server.

1. Isolated storage - each test gets its own SQLite file
2. Configuration overrides - a test config with a known admin secret
3. Controllable clocks - ids and delete windows without sleeping
4. Sampling contexts - mocked MCP sessions returning ``mcp.types`` results
"""

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from mcp.types import CreateMessageResult, ImageContent, TextContent

from personal_library_mcp.app import LibraryApp, reset_app, set_app
from personal_library_mcp.catalog.admin import AdminGate
from personal_library_mcp.catalog.store import CatalogStore
from personal_library_mcp.config import LibraryConfig, reset_config
from personal_library_mcp.database import CatalogStorage, DatabaseManager
from personal_library_mcp.models.book import Book, BookStatus

ADMIN_SECRET = "open-sesame"
PLACEHOLDER = "https://example.com/placeholder.jpg"


class FakeClock:
    """A clock tests move by hand."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# === Storage Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    return tmp_path / "test_library.db"


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    manager = DatabaseManager(test_database_url)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def storage(db_manager: DatabaseManager) -> CatalogStorage:
    return CatalogStorage(db_manager, "test_books")


# === Catalog Fixtures ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gate() -> AdminGate:
    return AdminGate(ADMIN_SECRET)


@pytest.fixture
def admin_gate(gate: AdminGate) -> AdminGate:
    assert gate.attempt_login(ADMIN_SECRET)
    return gate


@pytest.fixture
def store(storage: CatalogStorage, admin_gate: AdminGate, clock: FakeClock) -> CatalogStore:
    """An empty, loaded store in an admin session."""
    catalog = CatalogStore(storage, admin_gate, placeholder_cover_url=PLACEHOLDER, clock=clock)
    catalog.load()
    return catalog


@pytest.fixture
def sample_books() -> list[Book]:
    return [
        Book(
            id="3",
            title="The Hobbit",
            author="J.R.R. Tolkien",
            year=1937,
            rating=5,
            status=BookStatus.READ,
            genres=["Fantasy", "Adventure"],
        ),
        Book(
            id="2",
            title="Dune",
            author="Frank Herbert",
            year=1965,
            status=BookStatus.READING,
            genres=["Science Fiction"],
        ),
        Book(
            id="1",
            title="Cien años de soledad",
            author="Gabriel García Márquez",
            year=1967,
            status=BookStatus.PENDING,
            genres=["Realismo mágico"],
        ),
    ]


@pytest.fixture
def sample_records(sample_books: list[Book]) -> list[dict]:
    return [book.to_record() for book in sample_books]


# === Configuration and Application Fixtures ===


@pytest.fixture
def test_config(tmp_path: Path, test_db_path: Path) -> Generator[LibraryConfig, None, None]:
    reset_config()
    config = LibraryConfig(
        server_name="test-personal-library",
        database_path=test_db_path,
        storage_key="test_books",
        bootstrap_path=None,
        admin_secret=ADMIN_SECRET,
        placeholder_cover_url=PLACEHOLDER,
        export_dir=tmp_path / "exports",
        export_filename_prefix="library",
        debug=True,
        log_level="DEBUG",
    )
    yield config
    reset_config()


@pytest.fixture
def monotonic() -> FakeClock:
    return FakeClock(now=100.0)


@pytest.fixture
def app(
    test_config: LibraryConfig, clock: FakeClock, monotonic: FakeClock
) -> Generator[LibraryApp, None, None]:
    """The application installed as the process-wide instance, not logged in."""
    library = LibraryApp(test_config, clock=clock, monotonic=monotonic)
    set_app(library)
    yield library
    reset_app()


@pytest.fixture
def admin_app(app: LibraryApp) -> LibraryApp:
    assert app.login(ADMIN_SECRET)
    return app


@pytest.fixture
def stocked_app(admin_app: LibraryApp, sample_books: list[Book]) -> LibraryApp:
    admin_app.store.replace_all(sample_books)
    return admin_app


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove PERSONAL_LIBRARY_* variables for the duration of a test."""
    original_env = os.environ.copy()
    for key in list(os.environ):
        if key.startswith("PERSONAL_LIBRARY_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


# === Sampling Fixtures ===


def make_context(sampling: bool = True) -> Mock:
    context = Mock()
    context.request_context.session.check_client_capability = Mock(return_value=sampling)
    context.request_context.session.create_message = AsyncMock()
    return context


def text_result(text: str) -> CreateMessageResult:
    return CreateMessageResult(
        role="assistant",
        content=TextContent(type="text", text=text),
        model="test-model",
        stopReason="endTurn",
    )


def image_result(data: str = "iVBORw0KGgo=", mime_type: str = "image/png") -> CreateMessageResult:
    return CreateMessageResult(
        role="assistant",
        content=ImageContent(type="image", data=data, mimeType=mime_type),
        model="test-model",
        stopReason="endTurn",
    )


@pytest.fixture
def mock_context_with_sampling() -> Mock:
    return make_context(sampling=True)


@pytest.fixture
def mock_context_without_sampling() -> Mock:
    return make_context(sampling=False)
