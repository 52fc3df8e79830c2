"""Binance spot REST async client.

Fetches klines and turns them into validated ``Candle`` series.  Handles
rate limits (429) and transient server errors with exponential backoff.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from signaldesk.config import Config
from signaldesk.market.errors import MalformedInput, UpstreamUnavailable
from signaldesk.strategy.models import Candle

logger = logging.getLogger("signaldesk.market")

_RETRYABLE_STATUS_CODES = {429, 502, 503, 504}


def parse_kline_row(row: Any) -> Candle:
    """Convert one raw Binance kline array into a ``Candle``.

    Binance rows look like
    ``[openTime, "open", "high", "low", "close", "volume", closeTime, ...]``
    with prices and volume encoded as strings.
    """
    if not isinstance(row, (list, tuple)):
        raise MalformedInput(
            f"Unparseable kline row {row!r}: expected an array, got {type(row).__name__}"
        )
    try:
        return Candle(
            open_time=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
            close_time=int(row[6]) if len(row) > 6 else None,
        )
    except (TypeError, ValueError, IndexError, KeyError) as exc:
        raise MalformedInput(f"Unparseable kline row {row!r}: {exc}") from exc


def validate_series(
    candles: list[Candle],
    label: str = "series",
    allow_empty: bool = False,
) -> list[Candle]:
    """Check the candle invariants; raise ``MalformedInput`` on violation.

    Invariants:
        - at least one candle, unless *allow_empty*
        - open times strictly increasing (no duplicates)
        - prices positive, volume non-negative
        - low <= min(open, close) <= max(open, close) <= high
        - close_time, when present, not before open_time
    """
    if not candles and not allow_empty:
        raise MalformedInput(f"{label}: no candles returned")

    prev_time: Optional[int] = None
    for i, c in enumerate(candles):
        if prev_time is not None and c.open_time <= prev_time:
            raise MalformedInput(
                f"{label}: open times not strictly increasing at index {i} "
                f"({c.open_time} after {prev_time})"
            )
        prev_time = c.open_time

        if min(c.open, c.high, c.low, c.close) <= 0:
            raise MalformedInput(f"{label}: non-positive price at index {i}")
        if c.volume < 0:
            raise MalformedInput(f"{label}: negative volume at index {i}")
        if not (c.low <= min(c.open, c.close) and max(c.open, c.close) <= c.high):
            raise MalformedInput(
                f"{label}: OHLC envelope violated at index {i} "
                f"(o={c.open} h={c.high} l={c.low} c={c.close})"
            )
        if c.close_time is not None and c.close_time < c.open_time:
            raise MalformedInput(f"{label}: close time before open time at index {i}")
    return candles


class BinanceClient:
    """Async client wrapping the Binance spot klines endpoint."""

    def __init__(self, config: Config) -> None:
        self._base_url = config.binance_base_url
        self._max_retries = config.max_retries
        self._retry_base_delay = config.retry_base_delay
        self._timeout = config.request_timeout

    # ── Retry helper ─────────────────────────────────────────────────────

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> httpx.Response:
        """Execute an HTTP request with exponential-backoff retry.

        Retries on rate limits (429), transient server errors (502, 503,
        504) and transport errors.  Any other non-2xx response raises
        ``UpstreamUnavailable`` immediately, as does running out of retries.
        """
        last_error = ""
        last_status: Optional[int] = None

        for attempt in range(self._max_retries):
            delay = self._retry_base_delay * (2 ** attempt)
            try:
                async with httpx.AsyncClient() as client:
                    resp = await getattr(client, method)(
                        url,
                        timeout=self._timeout,
                        **kwargs,
                    )
            except httpx.TransportError as exc:
                logger.warning(
                    "Binance %s %s transport error (%s) — retry %d/%d in %.1fs",
                    method.upper(), url, exc,
                    attempt + 1, self._max_retries, delay,
                )
                last_error = f"transport error: {exc}"
                last_status = None
                await asyncio.sleep(delay)
                continue

            if resp.status_code in _RETRYABLE_STATUS_CODES:
                logger.warning(
                    "Binance %s %s returned %d — retry %d/%d in %.1fs",
                    method.upper(), url, resp.status_code,
                    attempt + 1, self._max_retries, delay,
                )
                last_error = f"HTTP {resp.status_code}"
                last_status = resp.status_code
                await asyncio.sleep(delay)
                continue

            if not resp.is_success:
                raise UpstreamUnavailable(
                    f"Binance API error: {resp.status_code}",
                    status_code=resp.status_code,
                )
            return resp

        if last_status == 429:
            message = (
                "Rate limited by Binance API. Please wait a moment and try again."
            )
        else:
            message = (
                f"Binance API unavailable after {self._max_retries} attempts "
                f"({last_error})"
            )
        raise UpstreamUnavailable(message, status_code=last_status)

    # ── Klines ───────────────────────────────────────────────────────────

    async def fetch_klines(
        self,
        symbol: str,
        interval: str,
        limit: int = 100,
        allow_empty: bool = False,
    ) -> list[Candle]:
        """Fetch kline data from Binance.

        Args:
            symbol: e.g. ``"BTCUSDT"``
            interval: e.g. ``"1h"``, ``"5m"``, ``"1m"``, ``"1s"``
            limit: number of klines to request (max 1000)
            allow_empty: accept an empty series instead of raising
                ``MalformedInput``

        Returns:
            Validated list of ``Candle`` objects ordered oldest-first.
        """
        url = f"{self._base_url}/api/v3/klines"
        params = {
            "symbol": symbol,
            "interval": interval,
            "limit": limit,
        }

        resp = await self._request_with_retry("get", url, params=params)

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedInput(f"Binance {interval} klines: response is not JSON") from exc
        if not isinstance(data, list):
            raise MalformedInput(f"Binance {interval} klines: expected a list, got {type(data).__name__}")

        candles = [parse_kline_row(row) for row in data]
        return validate_series(
            candles, label=f"{symbol} {interval}", allow_empty=allow_empty
        )
