"""Cross-exchange merge of timeframe results."""

from collections.abc import Iterable
from dataclasses import asdict

from scanner.models import AggregatedResult, TimeframeResult


def aggregate_results(results: Iterable[TimeframeResult]) -> list[AggregatedResult]:
    """Merge results by native symbol, summing volume across exchanges.

    Non-volume fields (price, changes, high/low, near flags, exchange) come
    from the contributor with the largest single-exchange volume. Each item
    is compared against the current exchange-of-record's own volume, not the
    running total, so the winner does not depend on iteration order. Ties
    keep the first contributor seen.

    Output is in first-seen symbol order.
    """
    merged: dict[str, AggregatedResult] = {}
    record_volume: dict[str, float] = {}

    for item in results:
        existing = merged.get(item.symbol)
        if existing is None:
            merged[item.symbol] = AggregatedResult(**asdict(item), exchanges={item.exchange})
            record_volume[item.symbol] = item.volume
            continue

        total = existing.volume + item.volume
        existing.exchanges.add(item.exchange)
        if item.volume > record_volume[item.symbol]:
            for name, value in asdict(item).items():
                setattr(existing, name, value)
            record_volume[item.symbol] = item.volume
        existing.volume = total

    return list(merged.values())
