"""Personal Library MCP Server - FastMCP Implementation

A single-user book catalog served over MCP. Anyone connected may browse and
search; an admin session unlocked with a shared secret may add, edit, delete,
import, export and enrich books with the client's LLM.

Features exposed:
- Resources: Book catalog, single book, session state
- Tools: Admin session, search, editor, delete, import/export, AI enrichment
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .app import get_app
from .config import LibraryConfig, get_config
from .observability import initialize_observability
from .resources import all_resources
from .tools import all_tools

# Initialize logging - stderr for logs, stdout for MCP protocol
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)


def create_server(config: LibraryConfig | None = None) -> FastMCP:
    """Build the FastMCP server with every resource and tool registered."""
    config = config or get_config()

    server = FastMCP(
        name=config.server_name,
        version=config.server_version,
        instructions=(
            "Personal Library - a single-user book catalog. Read library://books/list "
            "or call search_catalog to browse. Call admin_login first to change "
            "anything: open_book_editor, edit the draft, then save_book_draft. "
            "delete_book needs two calls to confirm."
        ),
    )

    for resource in all_resources:
        uri = resource.get("uri_template", resource.get("uri"))
        if not uri:
            logger.error("Resource missing URI: %s", resource)
            continue

        logger.debug("Registering resource: %s with URI: %s", resource["name"], uri)
        try:
            server.resource(
                uri=uri,
                name=resource["name"],
                description=resource["description"],
                mime_type=resource["mime_type"],
            )(resource["handler"])
        except Exception:
            logger.exception("Failed to register resource %s", resource["name"])
            raise

    logger.info("Registered %d resources", len(all_resources))

    for tool in all_tools:
        logger.debug("Registering tool: %s", tool["name"])
        try:
            server.tool(
                name=tool["name"],
                description=tool["description"],
            )(tool["handler"])
        except Exception:
            logger.exception("Failed to register tool %s", tool["name"])
            raise

    logger.info("Registered %d tools", len(all_tools))
    return server


mcp = create_server()


def run_server(config: LibraryConfig) -> None:
    """Run the MCP server on the configured transport.

    With stdio, stdin receives JSON-RPC requests and stdout sends responses.
    """
    logger.info(
        "Starting %s v%s on %s transport",
        config.server_name,
        config.server_version,
        config.transport,
    )

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled - verbose protocol logging active")
    else:
        logging.getLogger().setLevel(config.log_level)
        logging.getLogger("fastmcp").setLevel(logging.WARNING)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, initiating shutdown...", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Open the database and load the catalog before the first request
    app = get_app()
    logger.info("Catalog holds %d books (%s)", len(app.store), app.load_source.value)

    try:
        mcp.run(transport="streamable-http" if config.transport == "streamable_http" else "stdio")
    except Exception:
        logger.exception("Fatal error in MCP server")
        sys.exit(1)


def main() -> None:
    """Main entry point for the MCP server."""
    try:
        config = get_config()
        logger.info("=" * 60)
        logger.info("Personal Library MCP Server")
        for key, value in config.server_info.items():
            logger.info("%s: %s", key.capitalize(), value)
        logger.info("Database: %s", config.database_path)
        logger.info("Debug Mode: %s", config.debug)
        logger.info("=" * 60)

        initialize_observability()
        run_server(config)

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Failed to start MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
