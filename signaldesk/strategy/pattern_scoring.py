"""Pattern scoring — converts detected candlestick patterns into a signal.

Every ``CandlePattern`` maps to a side and a weight through
``PATTERN_SCORES``.  Neutral patterns (doji, spinning top) credit both
sides equally, so they pull the call towards HOLD without picking a side.
"""

from dataclasses import dataclass

from signaldesk.strategy.models import (
    Action,
    Candle,
    CandlePattern,
    PatternSignal,
    Side,
)
from signaldesk.strategy.patterns import PATTERN_WINDOW, detect_patterns
from signaldesk.strategy.scoring import decide_scores, round_half_up


@dataclass(frozen=True)
class PatternScore:
    """Side, weight and display reason for one pattern."""

    side: Side
    weight: int
    reason: str = ""


PATTERN_SCORES: dict[CandlePattern, PatternScore] = {
    CandlePattern.HAMMER: PatternScore(Side.BUY, 20, "Hammer pattern (bullish reversal)"),
    CandlePattern.INVERTED_HAMMER: PatternScore(Side.BUY, 15, "Inverted Hammer (potential bullish)"),
    CandlePattern.DRAGONFLY_DOJI: PatternScore(Side.BUY, 18, "Dragonfly Doji (bullish signal)"),
    CandlePattern.BULLISH_MARUBOZU: PatternScore(Side.BUY, 25, "Bullish Marubozu (strong buying)"),
    CandlePattern.BIG_BULLISH: PatternScore(Side.BUY, 20, "Big Bullish candle"),
    CandlePattern.BULLISH_ENGULFING: PatternScore(Side.BUY, 25, "Bullish Engulfing pattern"),
    CandlePattern.SHOOTING_STAR: PatternScore(Side.SELL, 20, "Shooting Star (bearish reversal)"),
    CandlePattern.HANGING_MAN: PatternScore(Side.SELL, 18, "Hanging Man (bearish warning)"),
    CandlePattern.GRAVESTONE_DOJI: PatternScore(Side.SELL, 18, "Gravestone Doji (bearish signal)"),
    CandlePattern.BEARISH_MARUBOZU: PatternScore(Side.SELL, 25, "Bearish Marubozu (strong selling)"),
    CandlePattern.BIG_BEARISH: PatternScore(Side.SELL, 20, "Big Bearish candle"),
    CandlePattern.BEARISH_ENGULFING: PatternScore(Side.SELL, 25, "Bearish Engulfing pattern"),
    CandlePattern.DOJI: PatternScore(Side.NEUTRAL, 5),
    CandlePattern.SPINNING_TOP: PatternScore(Side.NEUTRAL, 5),
}

# Both scores when the window holds no pattern at all
NO_PATTERN_SCORE = 50
MAX_REASONS = 3

NO_PATTERN_REASON = "No clear candlestick patterns detected"
BULLISH_FALLBACK_REASON = "Bullish patterns detected"
BEARISH_FALLBACK_REASON = "Bearish patterns detected"


def tally_patterns(
    patterns: list[CandlePattern],
) -> tuple[int, int, list[tuple[Side, str]]]:
    """Sum buy/sell weights over every detection.

    Returns ``(buy_score, sell_score, reasons)`` where *reasons* are
    side-tagged strings in detection order.  An empty list scores 50/50.
    """
    if not patterns:
        return NO_PATTERN_SCORE, NO_PATTERN_SCORE, []

    buy = 0
    sell = 0
    reasons: list[tuple[Side, str]] = []
    for pattern in patterns:
        score = PATTERN_SCORES[pattern]
        if score.side in (Side.BUY, Side.NEUTRAL):
            buy += score.weight
        if score.side in (Side.SELL, Side.NEUTRAL):
            sell += score.weight
        if score.reason:
            reasons.append((score.side, score.reason))
    return buy, sell, reasons


def _unique(items: list) -> list:
    """Deduplicate while keeping first-seen order."""
    return list(dict.fromkeys(items))


def _reason_for(side: Side, reasons: list[tuple[Side, str]], fallback: str) -> str:
    picked = _unique([text for s, text in reasons if s == side])[:MAX_REASONS]
    return ". ".join(picked) or fallback


def analyze_patterns(
    candles: list[Candle],
    timeframe: str = "1 hour",
    window: int = PATTERN_WINDOW,
) -> PatternSignal:
    """Detect patterns in the last *window* candles and score them.

    Args:
        candles: Candle series, oldest-first.  Must not be empty.
        timeframe: Label carried on the returned signal.
        window: Number of most-recent candles inspected.

    Returns:
        ``PatternSignal`` with the deduplicated pattern names found.
    """
    if not candles:
        raise ValueError(f"Cannot analyze patterns on an empty {timeframe} series")

    patterns = detect_patterns(candles, window)
    buy, sell, reasons = tally_patterns(patterns)

    action, confidence = decide_scores(buy, sell)
    if action == Action.BUY:
        reason = _reason_for(Side.BUY, reasons, BULLISH_FALLBACK_REASON)
    elif action == Action.SELL:
        reason = _reason_for(Side.SELL, reasons, BEARISH_FALLBACK_REASON)
    else:
        reason = NO_PATTERN_REASON

    return PatternSignal(
        signal=action,
        confidence=int(round_half_up(confidence)),
        reason=reason,
        timeframe=timeframe,
        patterns=tuple(_unique(patterns)),
    )
