"""Deterministic tests for the indicator library (SMA, RSI, momentum)."""

import pytest

from signaldesk.strategy.indicators import (
    calculate_momentum,
    calculate_rsi,
    calculate_sma,
)


class TestSMA:
    def test_mean_of_last_period(self):
        prices = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        assert calculate_sma(prices, 3) == pytest.approx(5.0)

    def test_full_length_window(self):
        prices = [10.0, 20.0, 30.0]
        assert calculate_sma(prices, 3) == pytest.approx(20.0)

    def test_short_series_returns_last_price(self):
        """Fewer prices than the period falls back to the latest price."""
        assert calculate_sma([101.0, 102.5], 7) == 102.5

    def test_empty_series_raises(self):
        with pytest.raises(ValueError, match="empty"):
            calculate_sma([], 7)


class TestRSI:
    def test_insufficient_history_is_neutral(self):
        prices = [100.0 + i for i in range(14)]  # needs 15 for RSI(14)
        assert calculate_rsi(prices, 14) == 50.0

    def test_strictly_rising_is_100(self):
        prices = [100.0 + i for i in range(30)]
        assert calculate_rsi(prices, 14) == 100.0

    def test_flat_series_is_100(self):
        """Zero average loss maps to the bullish bound, never divides by zero."""
        assert calculate_rsi([100.0] * 20, 14) == 100.0

    def test_strictly_falling_is_0(self):
        prices = [200.0 - i for i in range(30)]
        assert calculate_rsi(prices, 14) == pytest.approx(0.0)

    def test_known_value(self):
        # deltas: +2, -1, +2, -1 → gains 4, losses 2 → RS 2 → RSI 66.67
        prices = [10.0, 12.0, 11.0, 13.0, 12.0]
        assert calculate_rsi(prices, 4) == pytest.approx(100.0 - 100.0 / 3.0)

    def test_only_last_period_deltas_count(self):
        """An early crash outside the window does not affect the value."""
        prices = [100.0, 50.0, 51.0, 52.0]
        assert calculate_rsi(prices, 2) == 100.0

    def test_always_bounded(self):
        series = [
            [100.0, 99.0, 101.0, 98.0, 102.0, 97.0, 103.0, 96.0],
            [5.0, 5.5, 5.2, 5.9, 5.1, 5.0, 4.8, 4.9],
            [1.0, 1.0, 1.0, 2.0, 1.0, 1.0, 1.0, 1.0],
        ]
        for prices in series:
            value = calculate_rsi(prices, 5)
            assert 0.0 <= value <= 100.0


class TestMomentum:
    def test_short_history_is_zero(self):
        assert calculate_momentum([100.0, 101.0, 102.0], 10) == 0.0

    def test_positive_change(self):
        # past = prices[-3] = 100 → (110 - 100) / 100 × 100
        assert calculate_momentum([100.0, 105.0, 110.0], 3) == pytest.approx(10.0)

    def test_negative_change(self):
        assert calculate_momentum([200.0, 190.0, 150.0], 3) == pytest.approx(-25.0)

    def test_sign_follows_direction(self):
        rising = [100.0 + i for i in range(20)]
        falling = [200.0 - i for i in range(20)]
        assert calculate_momentum(rising, 10) > 0
        assert calculate_momentum(falling, 10) < 0

    def test_uses_price_period_positions_back(self):
        prices = [50.0, 100.0, 120.0, 130.0, 150.0]
        # prices[-4] is 100.0
        assert calculate_momentum(prices, 4) == pytest.approx(50.0)
