"""Tests for history freshness/coverage reporting."""

from conftest import ticker

from scanner.market_data.history import combine_history_info, history_info
from scanner.models import HistoryInfo, Snapshot

T0 = 1_700_000_000.0


class TestHistoryInfo:
    def test_empty(self) -> None:
        assert history_info([], pairs=0, now=T0) == HistoryInfo(0, 0, 0, 0)

    def test_ages_in_whole_seconds(self) -> None:
        history = [Snapshot(T0, {"A": ticker(1.0)}), Snapshot(T0 + 100.4, {"A": ticker(1.0)})]
        info = history_info(history, pairs=1, now=T0 + 110.0)
        assert info == HistoryInfo(snapshots=2, oldest_age=110, newest_age=10, pairs=1)

    def test_half_second_ages_round_up(self) -> None:
        history = [Snapshot(T0, {"A": ticker(1.0)}), Snapshot(T0 + 2.0, {"A": ticker(1.0)})]
        info = history_info(history, pairs=1, now=T0 + 4.5)
        assert (info.oldest_age, info.newest_age) == (5, 3)


class TestCombineHistoryInfo:
    def test_sums_and_conservative_bounds(self) -> None:
        combined = combine_history_info(
            [
                HistoryInfo(snapshots=10, oldest_age=100, newest_age=5, pairs=300),
                HistoryInfo(snapshots=0, oldest_age=0, newest_age=0, pairs=0),
                HistoryInfo(snapshots=4, oldest_age=900, newest_age=2, pairs=50),
            ]
        )
        assert combined == HistoryInfo(snapshots=14, oldest_age=900, newest_age=2, pairs=350)

    def test_no_data_defaults_to_zero(self) -> None:
        combined = combine_history_info([HistoryInfo(), HistoryInfo()])
        assert combined == HistoryInfo(0, 0, 0, 0)

    def test_empty_exchange_does_not_pull_newest_age_to_zero(self) -> None:
        combined = combine_history_info([HistoryInfo(), HistoryInfo(3, 60, 20, 7)])
        assert combined.newest_age == 20
