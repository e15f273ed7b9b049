"""
Personal Library MCP Server Package.

A single-user book catalog exposed over the Model Context Protocol.

Key Components:
- models: Pydantic models for books, drafts and result values
- database: SQLAlchemy storage for the persisted collection
- catalog: The store, search, editor, delete confirmation and transfer logic
- enrichment: AI help through MCP sampling
- resources / tools: The MCP surface
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
