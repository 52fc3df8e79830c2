"""Candlestick pattern classification — pure functions, no I/O.

Single candles are classified through a fixed priority cascade (first match
wins).  Two-candle engulfing patterns are detected separately over every
adjacent pair, independent of how either candle was classified.
"""

from typing import Optional

from signaldesk.strategy.models import Candle, CandlePattern


PATTERN_WINDOW = 10


def _classify_doji(candle: Candle) -> CandlePattern:
    """Sub-classify a doji by wick asymmetry."""
    body = candle.body
    upper = candle.upper_wick
    lower = candle.lower_wick
    if upper > body * 2 and lower > body * 2:
        return CandlePattern.DOJI
    if lower > body * 3 and upper < body:
        return CandlePattern.DRAGONFLY_DOJI
    if upper > body * 3 and lower < body:
        return CandlePattern.GRAVESTONE_DOJI
    return CandlePattern.DOJI


def classify_candle(candle: Candle) -> Optional[CandlePattern]:
    """Classify a single candle, or return ``None`` when nothing matches.

    Cascade (evaluated in order):
        1. Doji family      — body < 10% of range
        2. Hammer family    — lower wick > 2× body, upper wick < ½ body
        3. Shooting star    — upper wick > 2× body, lower wick < ½ body
        4. Marubozu         — body > 90% of range
        5. Big candle       — body > 70% of range
        6. Spinning top     — body < 30% of range, wicks within 20% of range
    """
    body = candle.body
    rng = candle.range
    upper = candle.upper_wick
    lower = candle.lower_wick
    bullish = candle.is_bullish

    if body < rng * 0.1 and rng > 0:
        return _classify_doji(candle)

    if lower > body * 2 and upper < body * 0.5 and body > 0:
        return CandlePattern.HAMMER if bullish else CandlePattern.HANGING_MAN

    if upper > body * 2 and lower < body * 0.5 and body > 0:
        return CandlePattern.INVERTED_HAMMER if bullish else CandlePattern.SHOOTING_STAR

    if body > rng * 0.9 and rng > 0:
        return CandlePattern.BULLISH_MARUBOZU if bullish else CandlePattern.BEARISH_MARUBOZU

    if body > rng * 0.7 and rng > 0:
        return CandlePattern.BIG_BULLISH if bullish else CandlePattern.BIG_BEARISH

    if body < rng * 0.3 and abs(upper - lower) < rng * 0.2:
        return CandlePattern.SPINNING_TOP

    return None


def _is_bullish_engulfing(prev: Candle, curr: Candle) -> bool:
    """Return True if *curr* is a bullish engulfing relative to *prev*."""
    return (
        prev.is_bearish
        and curr.is_bullish
        and curr.open <= prev.close
        and curr.close >= prev.open
        and curr.body > prev.body
    )


def _is_bearish_engulfing(prev: Candle, curr: Candle) -> bool:
    """Return True if *curr* is a bearish engulfing relative to *prev*."""
    return (
        prev.is_bullish
        and curr.is_bearish
        and curr.open >= prev.close
        and curr.close <= prev.open
        and curr.body > prev.body
    )


def detect_engulfing(prev: Candle, curr: Candle) -> Optional[CandlePattern]:
    """Classify an adjacent candle pair as bullish/bearish engulfing."""
    if _is_bullish_engulfing(prev, curr):
        return CandlePattern.BULLISH_ENGULFING
    if _is_bearish_engulfing(prev, curr):
        return CandlePattern.BEARISH_ENGULFING
    return None


def detect_patterns(
    candles: list[Candle], window: int = PATTERN_WINDOW
) -> list[CandlePattern]:
    """Detect every pattern in the most recent *window* candles.

    Single-candle classifications come first (oldest to newest), followed
    by engulfing detections for each adjacent pair.  Repeats are kept so
    that every occurrence can be scored.
    """
    recent = candles[-window:]
    found: list[CandlePattern] = []

    for candle in recent:
        pattern = classify_candle(candle)
        if pattern is not None:
            found.append(pattern)

    for i in range(1, len(recent)):
        pattern = detect_engulfing(recent[i - 1], recent[i])
        if pattern is not None:
            found.append(pattern)

    return found
