"""Timeframe delta computation over snapshot history.

For a timeframe T, the reference snapshot is the nearest one taken before
``now - T`` (no interpolation). When history does not reach back that far,
or a symbol is missing from the reference, the exchange's native 24h
figures are used instead. For ``24h`` the native change is preferred
outright: it covers history from before the process started.
"""

from bisect import bisect_left
from collections.abc import Sequence

from scanner.exchange.adapter import ExchangeAdapter
from scanner.market_data.high_low import HighLowTracker
from scanner.models import Snapshot, Timeframe, TimeframeResult

# Dust filter: a pair is listed if EITHER threshold is met
MIN_VOLUME = 100.0
MIN_PRICE = 0.0001

NEAR_EXTREME_RATIO = 0.005  # within 0.5% of high/low
PERCENT_DECIMALS = 3


def find_reference_snapshot(history: Sequence[Snapshot], target_ts: float) -> Snapshot | None:
    """Return the snapshot immediately preceding the first one at or after ``target_ts``.

    Returns None when there is none usable: the oldest snapshot is never a
    reference (history does not provably reach back to the target), and
    every snapshot being older than the target means a stale exchange.
    """
    idx = bisect_left(history, target_ts, key=lambda s: s.timestamp)
    if idx <= 1 or idx == len(history):
        return None
    return history[idx - 1]


def is_near_high(price: float, high: float) -> bool:
    return high > 0 and (high - price) / high < NEAR_EXTREME_RATIO


def is_near_low(price: float, low: float) -> bool:
    return low > 0 and (price - low) / low < NEAR_EXTREME_RATIO


def resolve_timeframe(
    exchange_id: str,
    adapter: ExchangeAdapter,
    history: Sequence[Snapshot],
    tracker: HighLowTracker,
    timeframe: Timeframe,
    market: str,
    now: float,
) -> list[TimeframeResult]:
    """Compute per-symbol deltas for one exchange.

    Args:
        exchange_id: Exchange id stamped on each result.
        adapter: Used for display symbol formatting.
        history: Immutable snapshot view, oldest first.
        tracker: Running high/low fallback for exchanges reporting 0.
        timeframe: Lookback window.
        market: Quote-currency suffix filter on native symbols (e.g. "USDT").
        now: Evaluation time, Unix seconds.

    Returns:
        One result per qualifying symbol of the latest snapshot, in that
        snapshot's order. Empty if there is no history.
    """
    if not history:
        return []

    latest = history[-1]
    reference = find_reference_snapshot(history, now - timeframe.seconds)
    if reference is latest:
        reference = None

    results: list[TimeframeResult] = []
    for symbol, current in latest.tickers.items():
        if not symbol.endswith(market):
            continue
        if current.volume < MIN_VOLUME and current.price < MIN_PRICE:
            continue

        native_vol_change = current.vol_change_24h or 0.0
        past = reference.tickers.get(symbol) if reference is not None else None

        if timeframe is Timeframe.H24 and current.change_24h != 0:
            price_change = current.change_24h
            vol_change = native_vol_change
        elif past is not None and past.price > 0:
            price_change = (current.price - past.price) / past.price * 100
            vol_change = (
                (current.volume - past.volume) / past.volume * 100
                if past.volume > 0
                else 0.0
            )
        else:
            price_change = current.change_24h
            vol_change = native_vol_change

        high = current.high
        low = current.low
        entry = tracker.get(symbol)
        if entry is not None:
            if high == 0:
                high = entry.high
            if low == 0:
                low = entry.low

        results.append(
            TimeframeResult(
                symbol=symbol,
                display_symbol=adapter.symbol_to_display(symbol, market),
                price=current.price,
                price_change=round(price_change, PERCENT_DECIMALS),
                change_24h=round(current.change_24h, PERCENT_DECIMALS),
                vol_change=round(vol_change, PERCENT_DECIMALS),
                volume=current.volume,
                high=high,
                low=low,
                near_high=is_near_high(current.price, high),
                near_low=is_near_low(current.price, low),
                exchange=exchange_id,
            )
        )

    return results
