"""
Tests for the configuration management system.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from semantix_core.config.config_manager import (
    ConfigManager,
    Environment,
    LogLevel,
    ConfigValidationError,
    get_config,
    init_config,
)


class TestConfigManager:
    """Test the ConfigManager class."""

    def test_singleton_pattern(self, tmp_path):
        config1 = ConfigManager(tmp_path)
        config2 = ConfigManager()
        assert config1 is config2

    def test_default_configuration(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.config.environment == Environment.DEVELOPMENT
        assert config.config.logging.level == LogLevel.WARNING
        assert config.config.store.shard_count == 16
        assert config.config.search.default_top_n == 5
        assert config.config.search.skip_incompatible is False
        assert config.config.persistence.data_path == "./data/documents.json"
        assert config.config.persistence.pretty_print is True
        assert config.loaded_files == []

    def test_yaml_config_loading(self, tmp_path):
        test_config = {
            "environment": "testing",
            "debug": True,
            "store": {"shard_count": 8},
            "search": {"default_top_n": 3, "skip_incompatible": True},
        }
        with open(tmp_path / "config.yaml", "w") as f:
            yaml.dump(test_config, f)

        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.config.environment == Environment.TESTING
        assert config.config.debug is True
        assert config.config.store.shard_count == 8
        assert config.config.search.default_top_n == 3
        assert config.config.search.skip_incompatible is True

    def test_json_config_loading(self, tmp_path):
        test_config = {"persistence": {"data_path": "/tmp/docs.json", "pretty_print": False}}
        with open(tmp_path / "config.json", "w") as f:
            json.dump(test_config, f)

        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.config.persistence.data_path == "/tmp/docs.json"
        assert config.config.persistence.pretty_print is False

    def test_environment_specific_config(self, tmp_path):
        environments_dir = Path(tmp_path) / "environments"
        environments_dir.mkdir()
        with open(tmp_path / "config.yaml", "w") as f:
            yaml.dump({"search": {"default_top_n": 3}}, f)
        with open(environments_dir / "config.staging.yaml", "w") as f:
            yaml.dump({"search": {"default_top_n": 7}}, f)

        with patch.dict(os.environ, {"SEMANTIX_ENVIRONMENT": "staging"}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.config.search.default_top_n == 7
        assert config.config.environment == Environment.STAGING

    def test_environment_variable_override(self, tmp_path):
        with open(tmp_path / "config.yaml", "w") as f:
            yaml.dump({"store": {"shard_count": 8}}, f)

        env_vars = {
            "SEMANTIX_SHARD_COUNT": "32",
            "SEMANTIX_LOG_LEVEL": "debug",
            "SEMANTIX_SKIP_INCOMPATIBLE": "yes",
            "SEMANTIX_DATA_PATH": "/var/lib/semantix/docs.json",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            config = ConfigManager(tmp_path)

        assert config.config.store.shard_count == 32
        assert config.config.logging.level == LogLevel.DEBUG
        assert config.config.search.skip_incompatible is True
        assert config.config.persistence.data_path == "/var/lib/semantix/docs.json"

    def test_invalid_environment_value_is_ignored(self, tmp_path):
        with patch.dict(os.environ, {"SEMANTIX_SHARD_COUNT": "many"}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.config.store.shard_count == 16

    def test_unknown_key_is_ignored(self, tmp_path):
        with open(tmp_path / "config.yaml", "w") as f:
            yaml.dump({"store": {"unknown_option": 1}, "nonexistent": {"x": 1}}, f)

        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.get("store.unknown_option") is None

    def test_validation_failure(self, tmp_path):
        with open(tmp_path / "config.yaml", "w") as f:
            yaml.dump({"store": {"shard_count": 0}}, f)

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigValidationError):
                ConfigManager(tmp_path)

    def test_get_and_set(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.get("search.default_top_n") == 5
        assert config.get("search.missing", "fallback") == "fallback"

        config.set("search.default_top_n", 12)
        assert config.get("search.default_top_n") == 12

        with pytest.raises(ConfigValidationError):
            config.set("search.default_top_n", -1)

    def test_to_dict_and_save(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        data = config.to_dict()
        assert data["environment"] == "development"
        assert data["logging"]["level"] == "WARNING"
        assert data["store"] == {"shard_count": 16}

        config.save_to_file("saved.yaml")
        with open(tmp_path / "saved.yaml") as f:
            assert yaml.safe_load(f) == data

    def test_reload_configuration(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)
            with open(tmp_path / "config.yaml", "w") as f:
                yaml.dump({"search": {"default_top_n": 9}}, f)
            config.reload_configuration()

        assert config.config.search.default_top_n == 9

    def test_get_index_config(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigManager(tmp_path)

        assert config.get_index_config() == {
            "shard_count": 16,
            "skip_incompatible": False,
            "pretty_print": True,
        }

    def test_global_helpers(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            initialized = init_config(tmp_path)

        assert get_config() is initialized
        assert initialized.config_dir == Path(tmp_path)
