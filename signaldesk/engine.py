"""SignalDesk — analysis orchestration.

``compose_analysis`` is the pure composition step: it runs every analyzer
against the series it covers and assembles one ``AnalysisResult``.
``SignalEngine`` wraps it with concurrent fetching and the response cache.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from signaldesk.config import Config
from signaldesk.market.binance_client import BinanceClient
from signaldesk.market.cache import ResponseCache
from signaldesk.strategy.levels import detect_support_resistance
from signaldesk.strategy.models import AnalysisResult, Candle
from signaldesk.strategy.pattern_scoring import analyze_patterns
from signaldesk.strategy.resample import SUB_MINUTE_BUCKET_MS, resample_candles
from signaldesk.strategy.scoring import FAST_PROFILE, STANDARD_PROFILE, analyze_trend

logger = logging.getLogger("signaldesk.engine")

RECENT_CANDLES = 10
HOURS_IN_DAY = 24


def price_change(closes: list[float], lookback: int = HOURS_IN_DAY) -> tuple[float, float]:
    """Absolute and percent change from ``closes[-lookback]`` to the last close.

    Falls back to the first close when fewer than *lookback* closes exist.
    """
    current = closes[-1]
    past = closes[-lookback] if len(closes) >= lookback else closes[0]
    change = current - past
    return change, change / past * 100.0


def compose_analysis(
    hourly: list[Candle],
    minute: list[Candle],
    five_min: list[Candle],
    sub_second: Optional[list[Candle]] = None,
    extended: bool = False,
) -> AnalysisResult:
    """Run all analyzers and assemble the aggregate result.

    Args:
        hourly: 1h candles, oldest-first.
        minute: 1m candles, oldest-first.
        five_min: 5m candles, oldest-first.
        sub_second: Optional 1s candles; resampled into 30s candles for the
            sub-minute signals (extended variant only).
        extended: Also produce the 5m pattern signal, support/resistance
            levels and the sub-minute signals.

    Raises:
        ValueError: if any of the three required series is empty.
    """
    for label, series in (("hourly", hourly), ("1m", minute), ("5m", five_min)):
        if not series:
            raise ValueError(f"Cannot compose analysis: {label} series is empty")

    closes = [c.close for c in hourly]
    current_price = closes[-1]
    change, change_pct = price_change(closes)

    five_min_patterns = None
    levels = None
    sub_minute_signal = None
    sub_minute_patterns = None
    if extended:
        five_min_patterns = analyze_patterns(five_min, timeframe="5 minutes")
        levels = detect_support_resistance(hourly, current_price)
        if sub_second:
            thirty_sec = resample_candles(sub_second, SUB_MINUTE_BUCKET_MS)
            sub_minute_signal = analyze_trend(thirty_sec, FAST_PROFILE, "30 seconds")
            sub_minute_patterns = analyze_patterns(thirty_sec, timeframe="30 seconds")

    return AnalysisResult(
        current_price=current_price,
        price_change_24h=change,
        price_change_percent_24h=change_pct,
        hourly_signal=analyze_trend(hourly, STANDARD_PROFILE, "1 hour"),
        recent_candles=tuple(hourly[-RECENT_CANDLES:]),
        short_term_signal=analyze_trend(minute, FAST_PROFILE, "1 minute"),
        five_min_signal=analyze_trend(five_min, FAST_PROFILE, "5 minutes"),
        pattern_signal=analyze_patterns(hourly, timeframe="1 hour"),
        five_min_pattern_signal=five_min_patterns,
        support_resistance=levels,
        sub_minute_signal=sub_minute_signal,
        sub_minute_pattern_signal=sub_minute_patterns,
    )


class SignalEngine:
    """Fetches the configured timeframes and produces one analysis per call.

    Args:
        config: Application configuration.
        client: A ``BinanceClient`` (or compatible duck-type / mock).
        cache: Response cache; one is created from ``config.cache_ttl_ms``
            when omitted.
        clock: Returns the current time in seconds (``time.time`` shape).
    """

    def __init__(
        self,
        config: Config,
        client: BinanceClient,
        cache: Optional[ResponseCache[AnalysisResult]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._client = client
        self._cache = cache if cache is not None else ResponseCache(config.cache_ttl_ms)
        self._clock = clock

    @property
    def cache(self) -> ResponseCache[AnalysisResult]:
        return self._cache

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def _fetch_series(self) -> tuple[list[Candle], list[Candle], list[Candle], Optional[list[Candle]]]:
        """Fetch all timeframes concurrently; the first failure propagates."""
        cfg = self._config
        requests = [
            self._client.fetch_klines(cfg.symbol, "1h", cfg.hourly_limit),
            self._client.fetch_klines(cfg.symbol, "1m", cfg.minute_limit),
            self._client.fetch_klines(cfg.symbol, "5m", cfg.five_min_limit),
        ]
        if cfg.extended_analysis:
            requests.append(
                self._client.fetch_klines(
                    cfg.symbol, "1s", cfg.sub_minute_limit, allow_empty=True
                )
            )

        results = await asyncio.gather(*requests)
        sub_second = results[3] if len(results) > 3 else None
        return results[0], results[1], results[2], sub_second

    async def analyze(self) -> AnalysisResult:
        """Return a fresh (or still-cached) ``AnalysisResult``.

        Raises:
            UpstreamUnavailable: if Binance could not be reached.
            MalformedInput: if Binance returned an invalid series.
        """
        cached = self._cache.get(self._now_ms())
        if cached is not None:
            logger.debug("Returning cached analysis")
            return cached

        logger.info("Fetching Binance %s data...", self._config.symbol)
        hourly, minute, five_min, sub_second = await self._fetch_series()
        logger.info(
            "Received %d hourly, %d 1m, %d 5m candles, analyzing...",
            len(hourly), len(minute), len(five_min),
        )

        result = compose_analysis(
            hourly,
            minute,
            five_min,
            sub_second=sub_second,
            extended=self._config.extended_analysis,
        )
        logger.info(
            "Hourly: %s, 1m: %s, 5m: %s, Pattern: %s",
            result.hourly_signal.signal.value,
            result.short_term_signal.signal.value,
            result.five_min_signal.signal.value,
            result.pattern_signal.signal.value,
        )

        self._cache.put(result, self._now_ms())
        return result
