"""Tests for signaldesk.config — environment variable loading and validation."""

import os

import pytest

from signaldesk.config import Config, load_config


_VARS = [
    "SYMBOL",
    "BINANCE_BASE_URL",
    "HOURLY_LIMIT",
    "MINUTE_LIMIT",
    "FIVE_MIN_LIMIT",
    "SUB_MINUTE_LIMIT",
    "EXTENDED_ANALYSIS",
    "CACHE_TTL_MS",
    "MAX_RETRIES",
    "RETRY_BASE_DELAY",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "HTTP_PORT",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure SignalDesk env vars are cleared between tests."""
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def env_path(tmp_path):
    # Non-existent file so load_dotenv doesn't pick up a developer .env
    return str(tmp_path / "nonexistent.env")


class TestLoadConfig:
    def test_defaults(self, env_path):
        cfg = load_config(env_path=env_path)
        assert isinstance(cfg, Config)
        assert cfg.symbol == "BTCUSDT"
        assert cfg.binance_base_url == "https://api.binance.com"
        assert cfg.hourly_limit == 100
        assert cfg.minute_limit == 30
        assert cfg.five_min_limit == 30
        assert cfg.sub_minute_limit == 600
        assert cfg.extended_analysis is False
        assert cfg.cache_ttl_ms == 2000
        assert cfg.max_retries == 3
        assert cfg.retry_base_delay == 0.5
        assert cfg.request_timeout == 10.0
        assert cfg.log_level == "INFO"
        assert cfg.http_port == 8080

    def test_overrides(self, monkeypatch, env_path):
        monkeypatch.setenv("SYMBOL", "ethusdt")
        monkeypatch.setenv("BINANCE_BASE_URL", "https://api.binance.us/")
        monkeypatch.setenv("HOURLY_LIMIT", "200")
        monkeypatch.setenv("EXTENDED_ANALYSIS", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        cfg = load_config(env_path=env_path)
        assert cfg.symbol == "ETHUSDT"
        assert cfg.binance_base_url == "https://api.binance.us"
        assert cfg.hourly_limit == 200
        assert cfg.extended_analysis is True
        assert cfg.log_level == "DEBUG"

    def test_dotenv_file_is_loaded(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SYMBOL=SOLUSDT\nCACHE_TTL_MS=5000\n")
        try:
            cfg = load_config(env_path=str(env_file))
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("SYMBOL", None)
            os.environ.pop("CACHE_TTL_MS", None)
        assert cfg.symbol == "SOLUSDT"
        assert cfg.cache_ttl_ms == 5000

    def test_invalid_integer_names_variable(self, monkeypatch, env_path):
        monkeypatch.setenv("HTTP_PORT", "eighty")
        with pytest.raises(ValueError, match="HTTP_PORT"):
            load_config(env_path=env_path)

    def test_invalid_float_names_variable(self, monkeypatch, env_path):
        monkeypatch.setenv("RETRY_BASE_DELAY", "soon")
        with pytest.raises(ValueError, match="RETRY_BASE_DELAY"):
            load_config(env_path=env_path)

    def test_invalid_bool_names_variable(self, monkeypatch, env_path):
        monkeypatch.setenv("EXTENDED_ANALYSIS", "maybe")
        with pytest.raises(ValueError, match="EXTENDED_ANALYSIS"):
            load_config(env_path=env_path)

    @pytest.mark.parametrize("value", ["0", "1001"])
    def test_kline_limit_range(self, monkeypatch, env_path, value):
        monkeypatch.setenv("MINUTE_LIMIT", value)
        with pytest.raises(ValueError, match="MINUTE_LIMIT"):
            load_config(env_path=env_path)

    def test_max_retries_at_least_one(self, monkeypatch, env_path):
        monkeypatch.setenv("MAX_RETRIES", "0")
        with pytest.raises(ValueError, match="MAX_RETRIES"):
            load_config(env_path=env_path)

    def test_config_is_frozen(self, env_path):
        cfg = load_config(env_path=env_path)
        with pytest.raises(AttributeError):
            cfg.symbol = "ETHUSDT"  # type: ignore[misc]
