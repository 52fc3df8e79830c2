"""Trend scoring — turns indicators into a weighted BUY/SELL/HOLD call.

One algorithm, two parameterizations:

- ``STANDARD_PROFILE``: hourly candles (SMA 7/25, RSI 14, momentum 10).
- ``FAST_PROFILE``: 1m / 5m / sub-minute candles (SMA 3/7, RSI 7,
  momentum 5).

Each rule credits a fixed weight to the buy or sell score and may attach a
reason.  The buy share of the total score is mapped through a 45–55 dead
zone: above 55 is BUY, below 45 is SELL, anything in between is HOLD.
"""

import math
from dataclasses import dataclass
from typing import Optional

from signaldesk.strategy.indicators import (
    calculate_momentum,
    calculate_rsi,
    calculate_sma,
)
from signaldesk.strategy.models import (
    Action,
    Candle,
    IndicatorSet,
    Side,
    Trend,
    TrendSignal,
)


BUY_THRESHOLD = 55.0
SELL_THRESHOLD = 45.0
NEUTRAL_CONFIDENCE = 50


@dataclass(frozen=True)
class ReasonText:
    """Human-readable phrases a profile attaches to its rules."""

    ma_above: str
    ma_below: str
    price_above: str
    price_below: str
    oversold: str
    overbought: str
    momentum_up: str
    momentum_down: str
    recent_up: str
    recent_down: str
    neutral: str  # reason for HOLD
    mixed: str  # reason when the winning side gave none


@dataclass(frozen=True)
class ScoringProfile:
    """Periods, thresholds and weights for one timeframe family."""

    name: str
    sma_short_period: int
    sma_long_period: int
    rsi_period: int
    momentum_period: int
    direction_lookback: int  # number of closes inspected
    ma_cross_weight: int
    price_vs_ma_weight: int  # 0 disables the rule
    rsi_oversold: float
    rsi_overbought: float
    rsi_extreme_weight: int
    rsi_bias_weight: int
    momentum_threshold: float  # percent
    momentum_weight: int
    momentum_drift_weight: int
    momentum_drift_split: bool  # True: credit both sides; False: credit the sign side
    direction_up_min: int  # up-steps needed for the buy bonus
    direction_down_max: int  # at most this many up-steps gives the sell bonus
    direction_weight: int
    reports_indicators: bool
    text: ReasonText


STANDARD_PROFILE = ScoringProfile(
    name="standard",
    sma_short_period=7,
    sma_long_period=25,
    rsi_period=14,
    momentum_period=10,
    direction_lookback=5,
    ma_cross_weight=20,
    price_vs_ma_weight=15,
    rsi_oversold=30.0,
    rsi_overbought=70.0,
    rsi_extreme_weight=25,
    rsi_bias_weight=10,
    momentum_threshold=2.0,
    momentum_weight=20,
    momentum_drift_weight=10,
    momentum_drift_split=False,
    direction_up_min=3,
    direction_down_max=1,
    direction_weight=15,
    reports_indicators=True,
    text=ReasonText(
        ma_above="Short-term MA above long-term MA",
        ma_below="Short-term MA below long-term MA",
        price_above="Price above 7-period MA",
        price_below="Price below 7-period MA",
        oversold="RSI indicates oversold",
        overbought="RSI indicates overbought",
        momentum_up="Strong positive momentum",
        momentum_down="Strong negative momentum",
        recent_up="Recent upward movement",
        recent_down="Recent downward movement",
        neutral="Market conditions are neutral",
        mixed="Mixed signals",
    ),
)

FAST_PROFILE = ScoringProfile(
    name="fast",
    sma_short_period=3,
    sma_long_period=7,
    rsi_period=7,
    momentum_period=5,
    direction_lookback=3,
    ma_cross_weight=25,
    price_vs_ma_weight=0,
    rsi_oversold=35.0,
    rsi_overbought=65.0,
    rsi_extreme_weight=25,
    rsi_bias_weight=10,
    momentum_threshold=0.1,
    momentum_weight=25,
    momentum_drift_weight=5,
    momentum_drift_split=True,
    direction_up_min=2,
    direction_down_max=0,
    direction_weight=20,
    reports_indicators=False,
    text=ReasonText(
        ma_above="3-min MA above 7-min MA",
        ma_below="3-min MA below 7-min MA",
        price_above="",
        price_below="",
        oversold="Short-term oversold",
        overbought="Short-term overbought",
        momentum_up="Positive short momentum",
        momentum_down="Negative short momentum",
        recent_up="Recent uptrend",
        recent_down="Recent downtrend",
        neutral="Short-term neutral",
        mixed="Mixed short-term signals",
    ),
)


# ── Decision helpers (shared with pattern scoring) ───────────────────────


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like JavaScript's ``Math.round`` (ties go up, not to even)."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def buy_confidence(buy_score: float, sell_score: float) -> float:
    """Buy share of the total score in percent; 50 when both are zero."""
    total = buy_score + sell_score
    if total <= 0:
        return 50.0
    return buy_score / total * 100.0


def sell_confidence(buy_score: float, sell_score: float) -> float:
    """Complement of :func:`buy_confidence`."""
    return 100.0 - buy_confidence(buy_score, sell_score)


def decide(buy_conf: float) -> tuple[Action, float]:
    """Map a buy confidence onto ``(action, confidence)``.

    ``> 55`` → BUY at *buy_conf*; ``< 45`` → SELL at ``100 - buy_conf``;
    the closed interval [45, 55] → HOLD at 50.
    """
    if buy_conf > BUY_THRESHOLD:
        return Action.BUY, buy_conf
    if buy_conf < SELL_THRESHOLD:
        return Action.SELL, 100.0 - buy_conf
    return Action.HOLD, float(NEUTRAL_CONFIDENCE)


def decide_scores(buy_score: float, sell_score: float) -> tuple[Action, float]:
    """:func:`decide` on raw scores; a SELL carries the sell share."""
    action, confidence = decide(buy_confidence(buy_score, sell_score))
    if action == Action.SELL:
        confidence = sell_confidence(buy_score, sell_score)
    return action, confidence


# ── Scoring ──────────────────────────────────────────────────────────────


class _ScoreCard:
    """Accumulates side-tagged weights and reasons."""

    def __init__(self) -> None:
        self.buy = 0
        self.sell = 0
        self.reasons: list[tuple[Side, str]] = []

    def credit(self, side: Side, weight: int, reason: str = "") -> None:
        if side == Side.BUY:
            self.buy += weight
        elif side == Side.SELL:
            self.sell += weight
        else:
            self.buy += weight
            self.sell += weight
        if reason:
            self.reasons.append((side, reason))

    def reasons_for(self, side: Side) -> list[str]:
        return [text for s, text in self.reasons if s == side]


def _count_up_steps(closes: list[float]) -> int:
    return sum(1 for i in range(1, len(closes)) if closes[i] > closes[i - 1])


def _classify_trend(price: float, sma_short: float, sma_long: float) -> Trend:
    if sma_short > sma_long and price > sma_short:
        return Trend.BULLISH
    if sma_short < sma_long and price < sma_short:
        return Trend.BEARISH
    return Trend.NEUTRAL


def score_trend(closes: list[float], profile: ScoringProfile) -> _ScoreCard:
    """Evaluate every rule of *profile* against *closes*."""
    p = profile
    text = p.text
    price = closes[-1]
    sma_short = calculate_sma(closes, p.sma_short_period)
    sma_long = calculate_sma(closes, p.sma_long_period)
    rsi = calculate_rsi(closes, p.rsi_period)
    momentum = calculate_momentum(closes, p.momentum_period)

    card = _ScoreCard()

    # Moving-average crossover
    if sma_short > sma_long:
        card.credit(Side.BUY, p.ma_cross_weight, text.ma_above)
    else:
        card.credit(Side.SELL, p.ma_cross_weight, text.ma_below)

    # Price vs short MA
    if p.price_vs_ma_weight:
        if price > sma_short:
            card.credit(Side.BUY, p.price_vs_ma_weight, text.price_above)
        else:
            card.credit(Side.SELL, p.price_vs_ma_weight, text.price_below)

    # RSI
    if rsi < p.rsi_oversold:
        card.credit(Side.BUY, p.rsi_extreme_weight, text.oversold)
    elif rsi > p.rsi_overbought:
        card.credit(Side.SELL, p.rsi_extreme_weight, text.overbought)
    elif rsi < 50:
        card.credit(Side.SELL, p.rsi_bias_weight)
    else:
        card.credit(Side.BUY, p.rsi_bias_weight)

    # Momentum
    if momentum > p.momentum_threshold:
        card.credit(Side.BUY, p.momentum_weight, text.momentum_up)
    elif momentum < -p.momentum_threshold:
        card.credit(Side.SELL, p.momentum_weight, text.momentum_down)
    elif p.momentum_drift_split:
        card.credit(Side.NEUTRAL, p.momentum_drift_weight)
    elif momentum > 0:
        card.credit(Side.BUY, p.momentum_drift_weight)
    else:
        card.credit(Side.SELL, p.momentum_drift_weight)

    # Recent direction
    up_steps = _count_up_steps(closes[-p.direction_lookback:])
    if up_steps >= p.direction_up_min:
        card.credit(Side.BUY, p.direction_weight, text.recent_up)
    elif up_steps <= p.direction_down_max:
        card.credit(Side.SELL, p.direction_weight, text.recent_down)

    return card


def analyze_trend(
    candles: list[Candle],
    profile: ScoringProfile = STANDARD_PROFILE,
    timeframe: str = "1 hour",
) -> TrendSignal:
    """Score *candles* with *profile* and return the resulting signal.

    Args:
        candles: Candle series, oldest-first.  Must not be empty.
        profile: Periods and weights to apply.
        timeframe: Label carried on the returned signal.

    Returns:
        ``TrendSignal``; ``indicators`` is set only when the profile
        reports them.
    """
    if not candles:
        raise ValueError(f"Cannot analyze an empty {timeframe} series")

    closes = [c.close for c in candles]
    card = score_trend(closes, profile)

    action, confidence = decide_scores(card.buy, card.sell)
    if action == Action.BUY:
        reason = ". ".join(card.reasons_for(Side.BUY)) or profile.text.mixed
    elif action == Action.SELL:
        reason = ". ".join(card.reasons_for(Side.SELL)) or profile.text.mixed
    else:
        reason = profile.text.neutral

    indicators: Optional[IndicatorSet] = None
    if profile.reports_indicators:
        indicators = build_indicator_set(closes, profile)

    return TrendSignal(
        signal=action,
        confidence=int(round_half_up(confidence)),
        reason=reason,
        timeframe=timeframe,
        indicators=indicators,
    )


def build_indicator_set(
    closes: list[float], profile: ScoringProfile = STANDARD_PROFILE
) -> IndicatorSet:
    """Indicator snapshot for display; RSI and momentum rounded to 2 dp."""
    sma_short = calculate_sma(closes, profile.sma_short_period)
    sma_long = calculate_sma(closes, profile.sma_long_period)
    rsi = calculate_rsi(closes, profile.rsi_period)
    momentum = calculate_momentum(closes, profile.momentum_period)
    return IndicatorSet(
        sma7=sma_short,
        sma25=sma_long,
        rsi=round_half_up(rsi, 2),
        momentum=round_half_up(momentum, 2),
        trend=_classify_trend(closes[-1], sma_short, sma_long),
    )
