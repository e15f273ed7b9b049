"""Tests for server configuration.

1. Default values
2. Environment variable loading
3. Validation rules
4. Secret handling
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from personal_library_mcp.config import (
    BUNDLED_BOOTSTRAP_PATH,
    DEFAULT_PLACEHOLDER_COVER,
    LibraryConfig,
    get_config,
    reset_config,
)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch, clean_env):
    """Default paths are relative; keep them inside the test directory."""
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


class TestLibraryConfig:
    def test_default_configuration(self, tmp_path):
        config = LibraryConfig()

        assert config.server_name == "personal-library"
        assert config.server_version == "0.1.0"
        assert config.transport == "stdio"
        assert config.database_path == (tmp_path / "data" / "personal_library.db").absolute()
        assert config.storage_key == "personal_library_books_v5"
        assert config.bootstrap_path == BUNDLED_BOOTSTRAP_PATH
        assert config.placeholder_cover_url == DEFAULT_PLACEHOLDER_COVER
        assert config.delete_confirm_timeout == 3.0
        assert config.export_filename_prefix == "library"
        assert config.enable_sampling is True

    def test_bundled_bootstrap_dataset_ships_with_package(self):
        assert BUNDLED_BOOTSTRAP_PATH.is_file()

    def test_environment_variable_loading(self, tmp_path):
        env_vars = {
            "PERSONAL_LIBRARY_SERVER_NAME": "my-books",
            "PERSONAL_LIBRARY_DATABASE_PATH": str(tmp_path / "books.db"),
            "PERSONAL_LIBRARY_ADMIN_SECRET": "hunter2",
            "PERSONAL_LIBRARY_DELETE_CONFIRM_TIMEOUT": "5",
            "PERSONAL_LIBRARY_ENABLE_SAMPLING": "false",
            "PERSONAL_LIBRARY_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars):
            config = LibraryConfig()

        assert config.server_name == "my-books"
        assert config.database_path == tmp_path / "books.db"
        assert config.admin_secret == "hunter2"
        assert config.delete_confirm_timeout == 5.0
        assert config.enable_sampling is False

    def test_server_name_validation(self):
        for name in ["MY_Library", "my library", "ab", "a" * 51]:
            with pytest.raises(ValidationError):
                LibraryConfig(server_name=name)

    def test_transport_validation(self):
        assert LibraryConfig(transport="streamable_http").transport == "streamable_http"
        with pytest.raises(ValidationError):
            LibraryConfig(transport="websocket")

    @pytest.mark.parametrize("timeout", [0, -1, 61])
    def test_delete_timeout_bounds(self, timeout):
        with pytest.raises(ValidationError):
            LibraryConfig(delete_confirm_timeout=timeout)

    def test_export_prefix_must_be_filename_safe(self):
        with pytest.raises(ValidationError):
            LibraryConfig(export_filename_prefix="../escape")

    def test_database_path_parent_is_created(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "library.db"
        config = LibraryConfig(database_path=db_path)

        assert db_path.parent.is_dir()
        assert config.get_database_url() == f"sqlite:///{db_path}"

    def test_admin_secret_hidden_from_repr(self):
        config = LibraryConfig(admin_secret="very-secret-value")

        assert "very-secret-value" not in repr(config)
        assert config.admin_secret == "very-secret-value"

    def test_server_info(self):
        info = LibraryConfig().server_info
        assert info == {"name": "personal-library", "version": "0.1.0", "transport": "stdio"}


class TestConfigSingleton:
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()

    def test_reset_config_rereads_environment(self):
        first = get_config()
        with patch.dict(os.environ, {"PERSONAL_LIBRARY_STORAGE_KEY": "other_key"}):
            reset_config()
            second = get_config()

        assert second is not first
        assert second.storage_key == "other_key"

    def test_relative_database_path_is_made_absolute(self):
        config = LibraryConfig(database_path=Path("rel/library.db"))
        assert config.database_path.is_absolute()
