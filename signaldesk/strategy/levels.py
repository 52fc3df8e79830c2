"""Support/Resistance level detection from hourly candles — pure functions."""

import operator
from typing import Callable

from signaldesk.strategy.models import Candle, SupportResistance


def _swing_points(
    values: list[float],
    window: int,
    beats: Callable[[float, float], bool],
) -> list[float]:
    """Values that strictly *beat* every neighbour within *window* positions.

    ``operator.gt`` picks swing highs, ``operator.lt`` swing lows.  The first
    and last *window* positions have incomplete neighbourhoods and are skipped.
    """
    points: list[float] = []
    for i in range(window, len(values) - window):
        neighbours = values[i - window:i] + values[i + 1:i + window + 1]
        if all(beats(values[i], other) for other in neighbours):
            points.append(values[i])
    return points


def _find_swing_highs(candles: list[Candle], window: int = 2) -> list[float]:
    return _swing_points([c.high for c in candles], window, operator.gt)


def _find_swing_lows(candles: list[Candle], window: int = 2) -> list[float]:
    return _swing_points([c.low for c in candles], window, operator.lt)


def _cluster_levels(
    levels: list[float], tolerance_pct: float = 0.3
) -> list[tuple[float, int]]:
    """Cluster nearby price levels.

    Consecutive sorted levels within *tolerance_pct* percent of the previous
    level share a cluster.  Returns ``(average_price, touch_count)`` tuples
    sorted by price.
    """
    if not levels:
        return []

    sorted_levels = sorted(levels)
    clusters: list[list[float]] = []
    current_cluster: list[float] = [sorted_levels[0]]

    for level in sorted_levels[1:]:
        tolerance = current_cluster[-1] * tolerance_pct / 100.0
        if abs(level - current_cluster[-1]) <= tolerance:
            current_cluster.append(level)
        else:
            clusters.append(current_cluster)
            current_cluster = [level]
    clusters.append(current_cluster)

    return [
        (sum(c) / len(c), len(c))
        for c in clusters
    ]


def _strongest(
    clusters: list[tuple[float, int]], current_price: float
) -> float:
    """Most-touched level; ties go to the one nearest *current_price*."""
    best = max(
        clusters,
        key=lambda c: (c[1], -abs(c[0] - current_price)),
    )
    return best[0]


def detect_support_resistance(
    candles: list[Candle],
    current_price: float,
    lookback: int = 50,
    swing_window: int = 2,
    tolerance_pct: float = 0.3,
    max_levels: int = 3,
) -> SupportResistance:
    """Detect horizontal support and resistance levels around *current_price*.

    Args:
        candles: Hourly candle data, oldest-first (must not be empty).
        current_price: Latest traded price.
        lookback: Number of most-recent candles to analyse.
        swing_window: Half-window size for swing detection.
        tolerance_pct: Clustering tolerance in percent of price.
        max_levels: Maximum levels reported on each side.

    Returns:
        ``SupportResistance`` with levels ordered nearest-first.  When a
        side has no swing level, its strongest level falls back to the
        window's lowest low (support) or highest high (resistance).
    """
    if not candles:
        raise ValueError("Cannot detect support/resistance on an empty series")

    recent = candles[-lookback:] if len(candles) > lookback else candles

    swing_levels = _find_swing_highs(recent, swing_window) + _find_swing_lows(
        recent, swing_window
    )
    clusters = _cluster_levels(swing_levels, tolerance_pct)

    below = [c for c in clusters if c[0] < current_price]
    above = [c for c in clusters if c[0] > current_price]
    below.sort(key=lambda c: current_price - c[0])
    above.sort(key=lambda c: c[0] - current_price)
    below = below[:max_levels]
    above = above[:max_levels]

    if below:
        strongest_support = _strongest(below, current_price)
    else:
        strongest_support = min(c.low for c in recent)
    if above:
        strongest_resistance = _strongest(above, current_price)
    else:
        strongest_resistance = max(c.high for c in recent)

    return SupportResistance(
        support=tuple(round(c[0], 5) for c in below),
        resistance=tuple(round(c[0], 5) for c in above),
        strongest_support=round(strongest_support, 5),
        strongest_resistance=round(strongest_resistance, 5),
    )
