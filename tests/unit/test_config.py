"""Tests for configuration validation"""
import pytest

from temple_passport import config
from temple_passport.exceptions import ConfigurationError


class TestConfigValidation:
    """Test validate_config against environment-derived values"""

    def test_defaults_are_valid(self, monkeypatch):
        """Test the shipped defaults pass validation"""
        monkeypatch.setattr(config, "CHECK_IN_REWARD", 10)
        monkeypatch.setattr(config, "PRAYER_COST", 10)
        monkeypatch.setattr(config, "PRAYER_REWARD", 20)
        monkeypatch.setattr(config, "MAX_LEVEL", 100)
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")

        config.validate_config()

    @pytest.mark.parametrize("key", ["CHECK_IN_REWARD", "PRAYER_COST", "PRAYER_REWARD"])
    def test_non_positive_amount_rejected(self, monkeypatch, key):
        """Test merit amounts must be positive"""
        monkeypatch.setattr(config, key, 0)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == key

    def test_max_level_rejected(self, monkeypatch):
        """Test max level must be at least 1"""
        monkeypatch.setattr(config, "MAX_LEVEL", 0)

        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_unknown_log_level_rejected(self, monkeypatch):
        """Test unknown log level is rejected"""
        monkeypatch.setattr(config, "LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "LOG_LEVEL"
