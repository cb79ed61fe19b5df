"""Tests for cross-exchange aggregation."""

import itertools

from scanner.market_data.aggregator import aggregate_results
from scanner.models import TimeframeResult


def _result(exchange: str, volume: float, price: float, symbol: str = "BTCUSDT") -> TimeframeResult:
    return TimeframeResult(
        symbol=symbol,
        display_symbol=symbol[:-4] + "/USDT",
        price=price,
        price_change=price / 1000,
        change_24h=price / 100,
        vol_change=volume / 100,
        volume=volume,
        high=price * 1.1,
        low=price * 0.9,
        near_high=False,
        near_low=exchange == "kraken",
        exchange=exchange,
    )


class TestAggregateResults:
    def test_single_exchange_passthrough(self) -> None:
        merged = aggregate_results([_result("mexc", 100.0, 50.0)])
        assert len(merged) == 1
        assert merged[0].exchanges == {"mexc"}
        assert merged[0].volume == 100.0

    def test_volume_summed_and_largest_contributor_wins(self) -> None:
        small = _result("mexc", 100.0, 50_000.0)
        large = _result("kucoin", 900.0, 50_100.0)
        merged = aggregate_results([small, large])

        assert len(merged) == 1
        btc = merged[0]
        assert btc.volume == 1000.0
        assert btc.price == large.price
        assert btc.price_change == large.price_change
        assert btc.change_24h == large.change_24h
        assert btc.vol_change == large.vol_change
        assert btc.high == large.high
        assert btc.low == large.low
        assert btc.exchange == "kucoin"
        assert btc.exchanges == {"mexc", "kucoin"}

    def test_largest_first_is_kept(self) -> None:
        merged = aggregate_results([_result("kucoin", 900.0, 2.0), _result("mexc", 100.0, 1.0)])
        assert merged[0].exchange == "kucoin"
        assert merged[0].price == 2.0
        assert merged[0].volume == 1000.0

    def test_winner_independent_of_order(self) -> None:
        items = [
            _result("coinbase", 100.0, 1.0),
            _result("kraken", 900.0, 2.0),
            _result("mexc", 950.0, 3.0),
            _result("kucoin", 40.0, 4.0),
        ]
        for perm in itertools.permutations(items):
            (merged,) = aggregate_results(list(perm))
            assert merged.exchange == "mexc"
            assert merged.price == 3.0
            assert merged.volume == 1990.0
            assert merged.exchanges == {"coinbase", "kraken", "mexc", "kucoin"}

    def test_tie_keeps_first_seen(self) -> None:
        merged = aggregate_results([_result("kraken", 500.0, 1.0), _result("mexc", 500.0, 2.0)])
        assert merged[0].exchange == "kraken"

    def test_distinct_symbols_kept_in_first_seen_order(self) -> None:
        merged = aggregate_results(
            [
                _result("mexc", 1.0, 1.0, symbol="ETHUSDT"),
                _result("mexc", 1.0, 1.0, symbol="BTCUSDT"),
                _result("kucoin", 1.0, 1.0, symbol="ETHUSDT"),
            ]
        )
        assert [m.symbol for m in merged] == ["ETHUSDT", "BTCUSDT"]

    def test_does_not_mutate_inputs(self) -> None:
        first = _result("mexc", 100.0, 1.0)
        aggregate_results([first, _result("kucoin", 900.0, 2.0)])
        assert first.volume == 100.0
        assert first.price == 1.0
