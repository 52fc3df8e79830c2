"""Candle resampling — aggregate a fine series into coarser aligned buckets.

Used to build the synthetic 30-second series from 1-second klines.

Aggregation rules per bucket:
- open   = first candle's open
- high   = max of highs
- low    = min of lows
- close  = last candle's close
- volume = sum of volumes
"""

from signaldesk.strategy.models import Candle


SUB_MINUTE_BUCKET_MS = 30_000


def bucket_start(open_time: int, bucket_ms: int) -> int:
    """Start of the aligned bucket containing *open_time*."""
    return (open_time // bucket_ms) * bucket_ms


def resample_candles(candles: list[Candle], bucket_ms: int) -> list[Candle]:
    """Aggregate *candles* (oldest-first) into *bucket_ms* buckets.

    Buckets are aligned to multiples of *bucket_ms* since the epoch, so the
    first and last buckets may be partial.  Returns an empty list for an
    empty input.
    """
    if bucket_ms <= 0:
        raise ValueError(f"bucket_ms must be positive, got {bucket_ms}")

    buckets: list[list[Candle]] = []
    current_start = None
    for candle in candles:
        start = bucket_start(candle.open_time, bucket_ms)
        if start != current_start:
            buckets.append([])
            current_start = start
        buckets[-1].append(candle)

    result: list[Candle] = []
    for group in buckets:
        start = bucket_start(group[0].open_time, bucket_ms)
        result.append(
            Candle(
                open_time=start,
                open=group[0].open,
                high=max(c.high for c in group),
                low=min(c.low for c in group),
                close=group[-1].close,
                volume=sum(c.volume for c in group),
                close_time=start + bucket_ms - 1,
            )
        )
    return result
