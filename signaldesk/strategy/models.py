"""Strategy data models — typed representations for candles and signal outputs."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Candle:
    """A single candlestick bar (one Binance kline)."""

    open_time: int  # epoch ms
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: Optional[int] = None

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def upper_wick(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_wick(self) -> float:
        return min(self.open, self.close) - self.low

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    def to_dict(self) -> dict:
        return {
            "openTime": self.open_time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
            "closeTime": self.close_time,
        }


class Action(str, Enum):
    """Directional call produced by an analyzer."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class Trend(str, Enum):
    """Moving-average trend classification."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class Side(str, Enum):
    """Which score a rule or pattern credits."""

    BUY = "buy"
    SELL = "sell"
    NEUTRAL = "neutral"


class CandlePattern(str, Enum):
    """Every pattern the classifier can report."""

    DOJI = "DOJI"
    DRAGONFLY_DOJI = "DRAGONFLY_DOJI"
    GRAVESTONE_DOJI = "GRAVESTONE_DOJI"
    HAMMER = "HAMMER"
    HANGING_MAN = "HANGING_MAN"
    INVERTED_HAMMER = "INVERTED_HAMMER"
    SHOOTING_STAR = "SHOOTING_STAR"
    BULLISH_MARUBOZU = "BULLISH_MARUBOZU"
    BEARISH_MARUBOZU = "BEARISH_MARUBOZU"
    BIG_BULLISH = "BIG_BULLISH"
    BIG_BEARISH = "BIG_BEARISH"
    SPINNING_TOP = "SPINNING_TOP"
    BULLISH_ENGULFING = "BULLISH_ENGULFING"
    BEARISH_ENGULFING = "BEARISH_ENGULFING"


@dataclass(frozen=True)
class IndicatorSet:
    """Indicator snapshot reported alongside the hourly signal."""

    sma7: float
    sma25: float
    rsi: float
    momentum: float  # percent
    trend: Trend

    def to_dict(self) -> dict:
        return {
            "sma7": self.sma7,
            "sma25": self.sma25,
            "rsi": self.rsi,
            "momentum": self.momentum,
            "trend": self.trend.value,
        }


@dataclass(frozen=True)
class Signal:
    """A BUY/SELL/HOLD call for one timeframe."""

    signal: Action
    confidence: int  # 0..100
    reason: str
    timeframe: str

    def to_dict(self) -> dict:
        return {
            "signal": self.signal.value,
            "confidence": self.confidence,
            "reason": self.reason,
            "timeframe": self.timeframe,
        }


@dataclass(frozen=True)
class TrendSignal(Signal):
    """Indicator-scored signal.

    ``indicators`` is only populated by profiles that report them
    (the hourly standard profile); fast profiles leave it ``None``.
    """

    indicators: Optional[IndicatorSet] = None


@dataclass(frozen=True)
class PatternSignal(Signal):
    """Candlestick-pattern-scored signal."""

    patterns: tuple[CandlePattern, ...] = ()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["patterns"] = [p.value for p in self.patterns]
        return data


@dataclass(frozen=True)
class SupportResistance:
    """Horizontal levels around the current price."""

    support: tuple[float, ...]  # below price, nearest first
    resistance: tuple[float, ...]  # above price, nearest first
    strongest_support: float
    strongest_resistance: float

    def to_dict(self) -> dict:
        return {
            "support": list(self.support),
            "resistance": list(self.resistance),
            "strongestSupport": self.strongest_support,
            "strongestResistance": self.strongest_resistance,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate output of one analysis pass.

    The optional fields belong to the extended variant and stay ``None``
    when it is disabled.
    """

    current_price: float
    price_change_24h: float
    price_change_percent_24h: float
    hourly_signal: TrendSignal
    recent_candles: tuple[Candle, ...]
    short_term_signal: TrendSignal
    five_min_signal: TrendSignal
    pattern_signal: PatternSignal
    five_min_pattern_signal: Optional[PatternSignal] = None
    support_resistance: Optional[SupportResistance] = None
    sub_minute_signal: Optional[TrendSignal] = None
    sub_minute_pattern_signal: Optional[PatternSignal] = None

    def to_dict(self) -> dict:
        """Render the JSON payload served to the dashboard (camelCase keys)."""
        indicators = self.hourly_signal.indicators
        data = {
            "currentPrice": self.current_price,
            "priceChange24h": self.price_change_24h,
            "priceChangePercent24h": self.price_change_percent_24h,
            "signal": self.hourly_signal.signal.value,
            "confidence": self.hourly_signal.confidence,
            "reason": self.hourly_signal.reason,
            "indicators": indicators.to_dict() if indicators else None,
            "recentCandles": [c.to_dict() for c in self.recent_candles],
            "shortTermSignal": self.short_term_signal.to_dict(),
            "fiveMinSignal": self.five_min_signal.to_dict(),
            "patternSignal": self.pattern_signal.to_dict(),
        }
        if self.five_min_pattern_signal is not None:
            data["fiveMinPatternSignal"] = self.five_min_pattern_signal.to_dict()
        if self.support_resistance is not None:
            data["supportResistance"] = self.support_resistance.to_dict()
        if self.sub_minute_signal is not None:
            data["subMinuteSignal"] = self.sub_minute_signal.to_dict()
        if self.sub_minute_pattern_signal is not None:
            data["subMinutePatternSignal"] = self.sub_minute_pattern_signal.to_dict()
        return data
