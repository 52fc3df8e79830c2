"""Technical indicators — SMA, RSI, momentum. Pure functions, no I/O.

All functions take a list of prices (oldest-first) and return a single
value for the most recent bar.  Short histories fall back to documented
neutral values instead of raising; an empty list is a caller bug.
"""


def _require_prices(prices: list[float], name: str) -> None:
    if not prices:
        raise ValueError(f"{name} needs at least one price, got an empty series")


def calculate_sma(prices: list[float], period: int) -> float:
    """Simple Moving Average of the last *period* prices.

    When fewer than *period* prices are available the most recent price is
    returned unchanged.
    """
    _require_prices(prices, f"SMA({period})")
    if len(prices) < period:
        return prices[-1]
    window = prices[-period:]
    return sum(window) / period


# ── RSI ──────────────────────────────────────────────────────────────────


def calculate_rsi(prices: list[float], period: int = 14) -> float:
    """Relative Strength Index over the last *period* deltas.

    Algorithm (simple averages, no Wilder smoothing from series start):
        1. delta = price[i] - price[i-1] for the last *period* steps
        2. avg_gain = sum(positive deltas) / period
        3. avg_loss = sum(|negative deltas|) / period
        4. RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    Returns ``50.0`` when fewer than ``period + 1`` prices are available and
    ``100.0`` when the average loss is exactly zero.
    """
    _require_prices(prices, f"RSI({period})")
    if len(prices) < period + 1:
        return 50.0

    gains = 0.0
    losses = 0.0
    for i in range(len(prices) - period, len(prices)):
        change = prices[i] - prices[i - 1]
        if change > 0:
            gains += change
        else:
            losses += abs(change)

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


# ── Momentum ─────────────────────────────────────────────────────────────


def calculate_momentum(prices: list[float], period: int = 10) -> float:
    """Percent change from ``prices[-period]`` to the latest price.

    Returns ``0.0`` when fewer than *period* prices are available.
    """
    _require_prices(prices, f"Momentum({period})")
    if len(prices) < period:
        return 0.0
    current = prices[-1]
    past = prices[-period]
    return (current - past) / past * 100.0
