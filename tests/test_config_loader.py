"""
Tests for ConfigurationLoader file and environment handling.
"""

import json
import pytest
from pydantic import ValidationError

from config.loader import ConfigurationLoader
from config.defaults import ENV_VAR_MAPPING
from deferred_sync.models.config import SyncSettings, SyncConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove sync environment overrides set outside the test"""
    for env_var in ENV_VAR_MAPPING:
        monkeypatch.delenv(env_var, raising=False)


class TestConfigurationLoader:
    """Test suite for the configuration loader"""

    @pytest.fixture
    def loader(self):
        return ConfigurationLoader()

    def test_defaults_without_file(self, loader):
        settings = loader.load_settings()

        assert settings == SyncSettings()

    def test_load_from_file(self, loader, tmp_path):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({
            "sync": {"chunk_limit": 20},
            "qdrant": {"collection_prefix": "shop"}
        }))

        settings = loader.load_settings(config_file)

        assert settings.sync.chunk_limit == 20
        assert settings.qdrant.collection_prefix == "shop"
        assert settings.qdrant.url == "http://localhost:6333"

    def test_missing_file_uses_defaults(self, loader, tmp_path):
        settings = loader.load_settings(tmp_path / "absent.json")

        assert settings.sync.chunk_limit is None

    def test_malformed_file_uses_defaults(self, loader, tmp_path):
        config_file = tmp_path / "sync.json"
        config_file.write_text("{not json")

        settings = loader.load_settings(config_file)

        assert settings == SyncSettings()

    def test_non_object_file_uses_defaults(self, loader, tmp_path):
        config_file = tmp_path / "sync.json"
        config_file.write_text("[1, 2]")

        assert loader.load_settings(config_file) == SyncSettings()

    def test_invalid_value_raises(self, loader, tmp_path):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({"sync": {"chunk_limit": -4}}))

        with pytest.raises(ValidationError):
            loader.load_settings(config_file)

    def test_env_overrides_file(self, loader, tmp_path, monkeypatch):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({"sync": {"chunk_limit": 20}}))
        monkeypatch.setenv("DEFERRED_SYNC_CHUNK_LIMIT", "7")
        monkeypatch.setenv("DEFERRED_SYNC_DOING_CRON", "true")
        monkeypatch.setenv("DEFERRED_SYNC_LOG_LEVEL", "warning")

        settings = loader.load_settings(config_file)

        assert settings.sync.chunk_limit == 7
        assert settings.context.is_scheduled_task is True
        assert settings.logging.level == "WARNING"

    def test_env_can_disable_chunk_limit(self, loader, tmp_path, monkeypatch):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({"sync": {"chunk_limit": 20}}))
        monkeypatch.setenv("DEFERRED_SYNC_CHUNK_LIMIT", "none")

        assert loader.load_settings(config_file).sync.chunk_limit is None

    def test_env_override_into_null_section(self, loader, tmp_path, monkeypatch):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({"sync": None}))
        monkeypatch.setenv("DEFERRED_SYNC_CHUNK_LIMIT", "5")

        assert loader.load_settings(config_file).sync.chunk_limit == 5

    def test_null_section_without_override_raises(self, loader, tmp_path):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({"sync": None}))

        with pytest.raises(ValidationError):
            loader.load_settings(config_file)

    def test_numeric_string_settings_stay_strings(self, loader, monkeypatch):
        monkeypatch.setenv("DEFERRED_SYNC_COLLECTION_PREFIX", "2024")

        assert loader.load_settings().qdrant.collection_prefix == "2024"

    def test_results_are_cached(self, loader, tmp_path):
        config_file = tmp_path / "sync.json"
        config_file.write_text(json.dumps({"sync": {"chunk_limit": 1}}))

        first = loader.load_settings(config_file)
        config_file.write_text(json.dumps({"sync": {"chunk_limit": 2}}))

        assert loader.load_settings(config_file) is first

        loader.clear_cache()
        assert loader.load_settings(config_file).sync.chunk_limit == 2

    def test_save_and_reload(self, loader, tmp_path):
        config_file = tmp_path / "nested" / "sync.json"
        settings = SyncSettings(sync=SyncConfig(chunk_limit=99))

        assert loader.save_settings(settings, config_file) is True
        assert loader.load_settings(config_file) == settings
