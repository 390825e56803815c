"""Tests for environment-driven settings."""

import pytest

from tradepnl.config import Settings, get_settings
from tradepnl.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LEGACY_ENCODING", "FALLBACK_ENCODING", "LOG_LEVEL", "DISTRIBUTION_BUCKETS"):
        monkeypatch.delenv(f"TRADEPNL_{name}", raising=False)


class TestGetSettings:
    def test_defaults(self):
        assert get_settings() == Settings()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("TRADEPNL_LEGACY_ENCODING", "euc_jp")
        monkeypatch.setenv("TRADEPNL_LOG_LEVEL", "debug")
        monkeypatch.setenv("TRADEPNL_DISTRIBUTION_BUCKETS", "8")

        settings = get_settings()

        assert settings.legacy_encoding == "euc_jp"
        assert settings.log_level == "DEBUG"
        assert settings.distribution_buckets == 8

    def test_blank_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("TRADEPNL_LOG_LEVEL", "  ")
        assert get_settings().log_level == "WARNING"

    def test_unknown_fallback_codec(self, monkeypatch):
        monkeypatch.setenv("TRADEPNL_FALLBACK_ENCODING", "no-such-codec")
        with pytest.raises(ConfigError) as exc_info:
            get_settings()
        assert exc_info.value.name == "TRADEPNL_FALLBACK_ENCODING"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("TRADEPNL_LOG_LEVEL", "LOUD")
        with pytest.raises(ConfigError, match="unknown log level"):
            get_settings()

    @pytest.mark.parametrize("value", ["zero", "0", "-3"])
    def test_bad_bucket_count(self, monkeypatch, value):
        monkeypatch.setenv("TRADEPNL_DISTRIBUTION_BUCKETS", value)
        with pytest.raises(ConfigError):
            get_settings()
