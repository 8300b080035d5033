"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from format_converter.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self, settings):
        assert settings.output_dir_name == "Converted"
        assert settings.exit_keyword == "exit"
        assert settings.vector_density == 300
        assert settings.menu_scope == "all"
        assert settings.symmetric_catalog is False
        assert settings.atomic_writes is True
        assert settings.offer_open_after_convert is True
        assert settings.log_level == "WARNING"
        assert settings.logging_enabled is False
        assert settings.anonymize_logs is True

    def test_environment_override(self, settings, monkeypatch):
        monkeypatch.setenv("FORMAT_CONVERTER_OUTPUT_DIR_NAME", "exports")
        monkeypatch.setenv("FORMAT_CONVERTER_MENU_SCOPE", "SOURCE")
        monkeypatch.setenv("FORMAT_CONVERTER_LOG_LEVEL", "debug")

        overridden = Settings(_env_file=None)

        assert overridden.output_dir_name == "exports"
        assert overridden.menu_scope == "source"
        assert overridden.log_level == "DEBUG"

    def test_invalid_menu_scope(self):
        with pytest.raises(ValidationError, match="menu_scope"):
            Settings(_env_file=None, menu_scope="everything")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    @pytest.mark.parametrize("density", [0, 35, 2401])
    def test_vector_density_out_of_range(self, density):
        with pytest.raises(ValidationError, match="vector_density"):
            Settings(_env_file=None, vector_density=density)

    @pytest.mark.parametrize("name", ["", " ", ".", "..", "a/b", "a\\b"])
    def test_output_dir_name_must_be_single_directory(self, name):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_dir_name=name)

    def test_exit_keyword_is_stripped(self):
        assert Settings(_env_file=None, exit_keyword=" quit ").exit_keyword == "quit"

    def test_empty_exit_keyword_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, exit_keyword="   ")

    def test_env_file_is_read(self, settings, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("FORMAT_CONVERTER_VECTOR_DENSITY=600\n")

        assert Settings(_env_file=env_file).vector_density == 600


class TestGetSettings:
    def test_cached(self, monkeypatch):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_cache_clear_rereads_environment(self, monkeypatch):
        get_settings.cache_clear()
        monkeypatch.setenv("FORMAT_CONVERTER_EXIT_KEYWORD", "quit")
        try:
            assert get_settings().exit_keyword == "quit"
        finally:
            get_settings.cache_clear()

    def test_unknown_environment_keys_are_ignored(self, settings, monkeypatch):
        monkeypatch.setenv("FORMAT_CONVERTER_APP_NAME", "Something")

        loaded = Settings(_env_file=None)

        assert not hasattr(loaded, "app_name")
