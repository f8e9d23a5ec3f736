"""Tests for configuration system."""

from pathlib import Path

import pytest

from nda_search.config import get_config, reset_config
from nda_search.config.defaults import DEFAULT_BASE_URL, get_history_path
from nda_search.config.loader import load_config
from nda_search.config.schema import NDASearchConfig, OutputFormat
from nda_search.exceptions import ConfigError, ConfigValidationError


class TestNDASearchConfig:
    """Tests for NDASearchConfig schema."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = NDASearchConfig()

        assert config.service.base_url == DEFAULT_BASE_URL
        assert config.search.batch_size == 25
        assert config.search.batch_pause_seconds == 0.1
        assert config.search.supplementary_categories == []
        assert config.history.enabled is True
        assert config.history.max_entries == 10
        assert config.output.default_format == OutputFormat.RICH

    def test_config_from_dict(self) -> None:
        """Test creating config from dictionary."""
        data = {
            "search": {"batch_size": 5, "supplementary_categories": ["Imaging"]},
            "output": {"default_format": "json"},
        }
        config = NDASearchConfig.model_validate(data)

        assert config.search.batch_size == 5
        assert config.search.supplementary_categories == ["Imaging"]
        assert config.output.default_format == OutputFormat.JSON

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(ValueError):
            NDASearchConfig.model_validate({"search": {"batch_size": 0}})


class TestConfigLoader:
    """Tests for configuration loader."""

    def test_load_config_creates_default(self, temp_dir: Path) -> None:
        """Test that load_config creates default config file."""
        config_path = temp_dir / "fresh" / "config.toml"
        config = load_config(config_path, create_if_missing=True)

        assert config_path.exists()
        assert config.search.batch_size == 25

    def test_load_config_from_file(self, config_file: Path) -> None:
        """Test loading config from existing file."""
        config = load_config(config_file)

        assert config.service.base_url == "https://example.org/api/datadictionary"
        assert config.service.timeout == 5.0
        assert config.search.supplementary_categories == ["Imaging"]
        assert config.history.max_entries == 5
        assert config.output.default_format == OutputFormat.PLAIN

    def test_load_config_without_file(self, temp_dir: Path) -> None:
        """Test loading config without creating file."""
        config_path = temp_dir / "nonexistent.toml"
        config = load_config(config_path, create_if_missing=False)

        assert not config_path.exists()
        assert config.history.enabled is True

    def test_invalid_toml(self, temp_dir: Path) -> None:
        config_path = temp_dir / "broken.toml"
        config_path.write_text("[search\nbatch_size = ")

        with pytest.raises(ConfigError):
            load_config(config_path)

    def test_invalid_values(self, temp_dir: Path) -> None:
        config_path = temp_dir / "invalid.toml"
        config_path.write_text("[search]\nbatch_size = -1\n")

        with pytest.raises(ConfigValidationError):
            load_config(config_path)


class TestEnvironmentOverrides:
    """Environment variables take precedence over the file."""

    def test_base_url(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NDA_SEARCH_BASE_URL", "http://localhost:8080/api/")
        config = load_config(config_file)
        assert config.service.base_url == "http://localhost:8080/api"

    def test_log_level(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NDA_SEARCH_LOG_LEVEL", "debug")
        assert load_config(config_file).logging.level == "DEBUG"

    @pytest.mark.parametrize("value", ["1", "true", "YES"])
    def test_no_history(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("NDA_SEARCH_NO_HISTORY", value)
        assert load_config(config_file).history.enabled is False

    def test_history_path(self, temp_dir: Path) -> None:
        config = load_config(create_if_missing=False)

        assert config.history.path == temp_dir / "history.duckdb"
        assert get_history_path() == temp_dir / "history.duckdb"


class TestConfigSingleton:
    """Tests for the configuration singleton."""

    def test_cached_until_reset(self) -> None:
        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first

    def test_uses_config_env_path(self, temp_dir: Path) -> None:
        get_config()
        assert (temp_dir / "config.toml").exists()
