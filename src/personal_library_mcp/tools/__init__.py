"""
MCP tools for the personal library server.

Tools are the actions a client can take: unlocking the admin session,
searching, editing, deleting, importing, exporting and asking the client's
LLM for enrichment. Each tool is a dictionary with its name, description,
input schema and async handler; ``all_tools`` is what the server registers.
"""

from .admin import admin_login, admin_logout
from .catalog import delete_book, search_catalog
from .editor import (
    add_draft_tag,
    cancel_book_editor,
    open_book_editor,
    rate_draft,
    remove_draft_tag,
    save_book_draft,
    update_book_draft,
)
from .enrichment import generate_book_cover, get_author_bio, suggest_book_details
from .transfer import export_catalog, import_catalog

all_tools = [
    admin_login,
    admin_logout,
    search_catalog,
    open_book_editor,
    update_book_draft,
    add_draft_tag,
    remove_draft_tag,
    rate_draft,
    save_book_draft,
    cancel_book_editor,
    delete_book,
    export_catalog,
    import_catalog,
    suggest_book_details,
    get_author_bio,
    generate_book_cover,
]

__all__ = [
    "add_draft_tag",
    "admin_login",
    "admin_logout",
    "all_tools",
    "cancel_book_editor",
    "delete_book",
    "export_catalog",
    "generate_book_cover",
    "get_author_bio",
    "import_catalog",
    "open_book_editor",
    "rate_draft",
    "remove_draft_tag",
    "save_book_draft",
    "search_catalog",
    "suggest_book_details",
    "update_book_draft",
]
