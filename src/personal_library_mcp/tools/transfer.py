"""Transfer Tools - Whole-Catalog Export and Import

Tools:
- export_catalog: Write the collection to a dated JSON file
- import_catalog: Replace the collection with a JSON array of books

An import is all-or-nothing: if any record is invalid the catalog is left
exactly as it was.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..app import get_app
from ..exceptions import CatalogError
from ..models.results import Err, Ok
from ..observability import trace_tool
from .responses import (
    error_response,
    invalid_input_response,
    success_response,
    unexpected_error_response,
)

logger = logging.getLogger(__name__)

# Limit to prevent loading arbitrarily large files into memory
MAX_IMPORT_BYTES = 20 * 1024 * 1024


class ExportCatalogInput(BaseModel):
    """Input schema for export_catalog."""

    include_content: bool = Field(
        default=False,
        description="Also return the exported JSON in the response",
    )


@trace_tool("export_catalog")
async def export_catalog_handler(arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    try:
        try:
            params = ExportCatalogInput.model_validate(arguments or {})
        except ValidationError as e:
            return invalid_input_response(e)

        try:
            result = get_app().export_catalog()
        except CatalogError as e:
            return error_response("Export failed", str(e))
        except OSError as e:
            logger.exception("Could not write export file")
            return error_response("Export failed", f"Could not write export file: {e}")

        match result:
            case Err(message=message):
                return error_response("Nothing to export", message)
            case Ok(value=artifact):
                data: dict[str, Any] = {
                    "filename": artifact.filename,
                    "path": str(artifact.path),
                    "mime_type": artifact.mime_type,
                    "record_count": artifact.record_count,
                }
                if params.include_content:
                    data["content"] = artifact.content
                return success_response(
                    f"Exported {artifact.record_count} book(s) to {artifact.path}", **data
                )

    except Exception:
        return unexpected_error_response("export_catalog")


class ImportCatalogInput(BaseModel):
    """Input schema for import_catalog. Give exactly one of path or content."""

    path: str | None = Field(
        default=None,
        description="Path of a JSON export file on the server",
        examples=["exports/library_2026-01-31.json"],
    )

    content: str | None = Field(
        default=None,
        description="The JSON array itself",
        max_length=MAX_IMPORT_BYTES,
    )

    @model_validator(mode="after")
    def exactly_one_source(self) -> "ImportCatalogInput":
        if (self.path is None) == (self.content is None):
            raise ValueError("Provide exactly one of 'path' or 'content'")
        return self


@trace_tool("import_catalog")
async def import_catalog_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Replace the catalog with an imported collection."""
    try:
        try:
            params = ImportCatalogInput.model_validate(arguments)
        except ValidationError as e:
            return invalid_input_response(e)

        if params.path is not None:
            source = Path(params.path).expanduser()
            try:
                if source.stat().st_size > MAX_IMPORT_BYTES:
                    return error_response("Import rejected", f"{source} is too large")
                payload: str | bytes = source.read_bytes()
            except OSError as e:
                return error_response("Import failed", f"Could not read {source}: {e}")
        else:
            payload = params.content or ""

        try:
            result = get_app().import_catalog(payload)
        except CatalogError as e:
            return error_response("Import failed", str(e))

        match result:
            case Ok(value=count):
                return success_response(f"Imported {count} book(s).", imported_count=count)
            case Err(kind=kind, message=message):
                return error_response(f"Import rejected ({kind.value})", message)

    except Exception:
        return unexpected_error_response("import_catalog")


export_catalog = {
    "name": "export_catalog",
    "description": (
        "Export the whole catalog as a JSON file named after today's date. "
        "Fails when the catalog is empty. Requires the admin session."
    ),
    "inputSchema": ExportCatalogInput.model_json_schema(),
    "handler": export_catalog_handler,
}

import_catalog = {
    "name": "import_catalog",
    "description": (
        "Replace the whole catalog with a JSON array of books, from a file path "
        "or inline content. Any invalid record rejects the import. Requires the "
        "admin session."
    ),
    "inputSchema": ImportCatalogInput.model_json_schema(),
    "handler": import_catalog_handler,
}
