"""SignalDesk — application configuration.

Loads .env variables into a typed config object.
Validates numeric variables on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


_MAX_KLINE_LIMIT = 1000  # Binance spot /api/v3/klines cap


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    symbol: str
    binance_base_url: str
    hourly_limit: int
    minute_limit: int
    five_min_limit: int
    sub_minute_limit: int  # 1-second klines resampled into 30s candles
    extended_analysis: bool
    cache_ttl_ms: int
    max_retries: int
    retry_base_delay: float  # seconds; doubles each attempt
    request_timeout: float
    log_level: str
    http_port: int


def _env_int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: str) -> bool:
    raw = os.environ.get(name, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got {raw!r}")


def _kline_limit(name: str, default: str) -> int:
    value = _env_int(name, default)
    if not 1 <= value <= _MAX_KLINE_LIMIT:
        raise ValueError(
            f"Environment variable {name} must be between 1 and "
            f"{_MAX_KLINE_LIMIT}, got {value}"
        )
    return value


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Every variable has a default.  Raises ``ValueError`` with a message
    naming the variable when a value cannot be parsed or is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    max_retries = _env_int("MAX_RETRIES", "3")
    if max_retries < 1:
        raise ValueError(f"Environment variable MAX_RETRIES must be at least 1, got {max_retries}")

    return Config(
        symbol=os.environ.get("SYMBOL", "BTCUSDT").upper(),
        binance_base_url=os.environ.get("BINANCE_BASE_URL", "https://api.binance.com").rstrip("/"),
        hourly_limit=_kline_limit("HOURLY_LIMIT", "100"),
        minute_limit=_kline_limit("MINUTE_LIMIT", "30"),
        five_min_limit=_kline_limit("FIVE_MIN_LIMIT", "30"),
        sub_minute_limit=_kline_limit("SUB_MINUTE_LIMIT", "600"),
        extended_analysis=_env_bool("EXTENDED_ANALYSIS", "false"),
        cache_ttl_ms=_env_int("CACHE_TTL_MS", "2000"),
        max_retries=max_retries,
        retry_base_delay=_env_float("RETRY_BASE_DELAY", "0.5"),
        request_timeout=_env_float("REQUEST_TIMEOUT", "10.0"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        http_port=_env_int("HTTP_PORT", "8080"),
    )
