"""Tests for the export_catalog and import_catalog tools."""

import json

import pytest

from personal_library_mcp.tools.transfer import (
    ImportCatalogInput,
    export_catalog_handler,
    import_catalog_handler,
)


class TestExportCatalog:
    @pytest.mark.asyncio
    async def test_writes_dated_file(self, stocked_app, test_config):
        result = await export_catalog_handler({"include_content": True})

        data = result["data"]
        assert data["record_count"] == 3
        assert data["filename"].startswith("library_")
        assert data["filename"].endswith(".json")
        assert data["mime_type"] == "application/json"
        assert (test_config.export_dir / data["filename"]).is_file()
        assert len(json.loads(data["content"])) == 3

    @pytest.mark.asyncio
    async def test_content_omitted_by_default(self, stocked_app):
        result = await export_catalog_handler({})
        assert "content" not in result["data"]

    @pytest.mark.asyncio
    async def test_empty_catalog(self, admin_app):
        result = await export_catalog_handler({})
        assert result["isError"] is True
        assert result["content"][0]["text"].startswith("Nothing to export")

    @pytest.mark.asyncio
    async def test_needs_admin(self, app):
        result = await export_catalog_handler({})
        assert result["isError"] is True


class TestImportCatalogInput:
    def test_needs_exactly_one_source(self):
        with pytest.raises(ValueError):
            ImportCatalogInput()
        with pytest.raises(ValueError):
            ImportCatalogInput(path="a.json", content="[]")


class TestImportCatalog:
    @pytest.mark.asyncio
    async def test_inline_content(self, admin_app, sample_records):
        result = await import_catalog_handler({"content": json.dumps(sample_records)})

        assert result["data"]["imported_count"] == 3
        assert len(admin_app.store) == 3

    @pytest.mark.asyncio
    async def test_from_file(self, admin_app, sample_records, tmp_path):
        path = tmp_path / "backup.json"
        path.write_text(json.dumps(sample_records), encoding="utf-8")

        result = await import_catalog_handler({"path": str(path)})

        assert result["data"]["imported_count"] == 3

    @pytest.mark.asyncio
    async def test_missing_file(self, admin_app, tmp_path):
        result = await import_catalog_handler({"path": str(tmp_path / "absent.json")})
        assert result["isError"] is True
        assert "Could not read" in result["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_object_rejected_and_catalog_kept(self, stocked_app):
        result = await import_catalog_handler({"content": '{"books": []}'})

        assert result["isError"] is True
        assert "invalid_format" in result["content"][0]["text"]
        assert len(stocked_app.store) == 3

    @pytest.mark.asyncio
    async def test_invalid_record_rejected(self, stocked_app):
        result = await import_catalog_handler({"content": '[{"id": "1", "title": "T"}]'})

        assert result["isError"] is True
        assert "invalid_records" in result["content"][0]["text"]
        assert len(stocked_app.store) == 3

    @pytest.mark.asyncio
    async def test_needs_admin(self, app):
        result = await import_catalog_handler({"content": "[]"})
        assert result["isError"] is True
        assert "Admin session required" in result["content"][0]["text"]
