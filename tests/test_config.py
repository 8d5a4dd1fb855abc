"""
Unit tests for configuration defaults, RetryConfig and YAML loading.
"""

import pytest

from safe_image.utils import config
from safe_image.utils.config import ConfigError, RetryConfig, load_config


@pytest.fixture
def isolated_config(monkeypatch):
    """Give each test its own CONFIG dict."""
    monkeypatch.setattr(config, "CONFIG", config.CONFIG.copy())
    return config.CONFIG


class TestDefaults:
    """Tests for default values."""

    def test_retry_defaults(self):
        """Test the documented retry defaults."""
        assert config.get("max_retries") == 3
        assert config.get("retry_delay_ms") == 2000
        assert config.get("connectivity_enabled") is True

    def test_get_config_returns_copy(self):
        """Test that get_config cannot mutate CONFIG."""
        cfg = config.get_config()
        cfg["max_retries"] = 99
        assert config.get("max_retries") == 3

    def test_get_default_for_unknown_key(self):
        """Test fallback default for missing keys."""
        assert config.get("no_such_key", 42) == 42


class TestRetryConfig:
    """Tests for RetryConfig validation and construction."""

    def test_defaults(self):
        """Test dataclass defaults match CONFIG."""
        cfg = RetryConfig()
        assert (cfg.max_retries, cfg.retry_delay_ms, cfg.connectivity_enabled) == (3, 2000, True)

    def test_negative_retries_rejected(self):
        """Test that a negative budget raises."""
        with pytest.raises(ValueError):
            RetryConfig(max_retries=-1)

    def test_negative_delay_rejected(self):
        """Test that a negative delay raises."""
        with pytest.raises(ValueError):
            RetryConfig(retry_delay_ms=-5)

    def test_zero_values_allowed(self):
        """Test that zero retries and zero delay are valid."""
        cfg = RetryConfig(max_retries=0, retry_delay_ms=0)
        assert cfg.max_retries == 0

    def test_from_config_applies_overrides(self, isolated_config):
        """Test that non-None overrides win over CONFIG."""
        isolated_config["retry_delay_ms"] = 750
        cfg = RetryConfig.from_config(max_retries=5, connectivity_enabled=None)
        assert cfg.max_retries == 5
        assert cfg.retry_delay_ms == 750
        assert cfg.connectivity_enabled is True


class TestLoadConfig:
    """Tests for YAML overrides."""

    def test_load_and_apply(self, tmp_path, isolated_config):
        """Test that overrides are merged into CONFIG."""
        path = tmp_path / "safe_image.yaml"
        path.write_text("max_retries: 5\nretry_delay_ms: 250\n")

        merged = load_config(path)

        assert merged["max_retries"] == 5
        assert config.get("retry_delay_ms") == 250

    def test_load_without_apply(self, tmp_path, isolated_config):
        """Test that apply=False leaves CONFIG untouched."""
        path = tmp_path / "safe_image.yaml"
        path.write_text("fit: contain\n")

        merged = load_config(path, apply=False)

        assert merged["fit"] == "contain"
        assert config.get("fit") == "cover"

    def test_empty_file_is_no_op(self, tmp_path, isolated_config):
        """Test that an empty file yields the current defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == config.get_config()

    @pytest.mark.parametrize("content", [
        "- just\n- a list\n",
        "bogus_key: 1\n",
        "max_retries: -2\n",
        "fit: stretch\n",
        "max_retries: [1\n",
    ])
    def test_invalid_files_rejected(self, tmp_path, isolated_config, content):
        """Test that bad files raise ConfigError and change nothing."""
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        before = config.get_config()

        with pytest.raises(ConfigError):
            load_config(path)

        assert config.get_config() == before

    def test_config_error_is_value_error(self):
        """Test that callers catching ValueError also catch ConfigError."""
        assert issubclass(ConfigError, ValueError)
