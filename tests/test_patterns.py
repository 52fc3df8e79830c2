"""Deterministic tests for candlestick pattern classification."""

import pytest

from signaldesk.strategy.models import Candle, CandlePattern
from signaldesk.strategy.patterns import (
    classify_candle,
    detect_engulfing,
    detect_patterns,
)


def _make_candle(o: float, c: float, h: float, l: float, idx: int = 0) -> Candle:
    """Build a 1h candle from OHLC (argument order: open, close, high, low)."""
    open_time = 1_700_000_000_000 + idx * 3_600_000
    return Candle(
        open_time=open_time,
        open=o,
        high=h,
        low=l,
        close=c,
        volume=1.0,
        close_time=open_time + 3_599_999,
    )


def _mirror(candle: Candle, idx: int = 0) -> Candle:
    """Reflect a candle around 100 so bullish shapes become bearish."""
    return _make_candle(
        200.0 - candle.open,
        200.0 - candle.close,
        200.0 - candle.low,
        200.0 - candle.high,
        idx,
    )


# ── Single-candle cascade ────────────────────────────────────────────────


class TestClassifyCandle:
    @pytest.mark.parametrize(
        "ohlc, expected",
        [
            ((100.0, 100.01, 101.0, 99.0), CandlePattern.DOJI),
            ((100.0, 99.95, 105.0, 99.94), CandlePattern.GRAVESTONE_DOJI),
            ((100.0, 100.1, 102.0, 99.85), CandlePattern.DOJI),
            ((100.0, 101.0, 101.2, 97.0), CandlePattern.HAMMER),
            ((101.0, 100.0, 101.2, 97.0), CandlePattern.HANGING_MAN),
            ((100.0, 101.0, 104.0, 99.8), CandlePattern.INVERTED_HAMMER),
            ((101.0, 100.0, 104.0, 99.8), CandlePattern.SHOOTING_STAR),
            ((100.0, 110.0, 110.2, 99.9), CandlePattern.BULLISH_MARUBOZU),
            ((110.0, 100.0, 110.1, 99.8), CandlePattern.BEARISH_MARUBOZU),
            ((100.0, 108.0, 109.0, 99.0), CandlePattern.BIG_BULLISH),
            ((108.0, 100.0, 109.0, 99.0), CandlePattern.BIG_BEARISH),
            ((100.0, 101.0, 102.5, 98.5), CandlePattern.SPINNING_TOP),
        ],
    )
    def test_cascade(self, ohlc, expected):
        assert classify_candle(_make_candle(*ohlc)) == expected

    def test_tiny_body_with_long_lower_wick_is_dragonfly(self):
        """Doji check runs first, so a hammer-shaped doji is a dragonfly."""
        candle = _make_candle(100.0, 100.05, 100.06, 95.0)
        assert classify_candle(candle) == CandlePattern.DRAGONFLY_DOJI
        assert classify_candle(candle) != CandlePattern.HAMMER

    def test_no_pattern(self):
        assert classify_candle(_make_candle(100.0, 105.0, 106.0, 98.0)) is None

    def test_zero_range_candle_has_no_pattern(self):
        assert classify_candle(_make_candle(100.0, 100.0, 100.0, 100.0)) is None


# ── Engulfing ────────────────────────────────────────────────────────────


class TestEngulfing:
    def test_bullish_engulfing(self):
        prev = _make_candle(100.0, 95.0, 101.0, 94.0, 0)
        curr = _make_candle(94.0, 101.0, 102.0, 93.5, 1)
        assert detect_engulfing(prev, curr) == CandlePattern.BULLISH_ENGULFING

    def test_bearish_engulfing_is_mirror(self):
        prev = _mirror(_make_candle(100.0, 95.0, 101.0, 94.0), 0)
        curr = _mirror(_make_candle(94.0, 101.0, 102.0, 93.5), 1)
        assert prev.is_bullish and curr.is_bearish
        assert detect_engulfing(prev, curr) == CandlePattern.BEARISH_ENGULFING

    def test_smaller_body_does_not_engulf(self):
        prev = _make_candle(100.0, 95.0, 101.0, 94.0, 0)
        curr = _make_candle(95.0, 100.0, 101.0, 94.5, 1)  # equal body
        assert detect_engulfing(prev, curr) is None

    def test_same_colour_does_not_engulf(self):
        prev = _make_candle(100.0, 101.0, 101.5, 99.5, 0)
        curr = _make_candle(99.0, 103.0, 103.5, 98.5, 1)
        assert detect_engulfing(prev, curr) is None


# ── Window detection ─────────────────────────────────────────────────────


class TestDetectPatterns:
    def test_singles_then_engulfing(self):
        candles = [
            _make_candle(100.0, 95.0, 101.0, 94.0, 0),
            _make_candle(94.0, 101.0, 102.0, 93.5, 1),
        ]
        assert detect_patterns(candles) == [
            CandlePattern.BIG_BEARISH,
            CandlePattern.BIG_BULLISH,
            CandlePattern.BULLISH_ENGULFING,
        ]

    def test_repeats_are_kept(self):
        candles = [_make_candle(100.0, 101.0, 101.2, 97.0, i) for i in range(3)]
        assert detect_patterns(candles) == [CandlePattern.HAMMER] * 3

    def test_only_window_is_inspected(self):
        hammer = _make_candle(100.0, 101.0, 101.2, 97.0, 0)
        plain = [_make_candle(100.0, 105.0, 106.0, 98.0, i + 1) for i in range(10)]
        assert detect_patterns([hammer] + plain, window=10) == []
        assert detect_patterns([hammer] + plain, window=11) == [CandlePattern.HAMMER]

    def test_single_candle_has_no_pair(self):
        assert detect_patterns([_make_candle(100.0, 105.0, 106.0, 98.0)]) == []
