"""Tests for SnapshotStore append/evict and immutable views."""

from conftest import ticker

from scanner.market_data.snapshot_store import SnapshotStore

HOUR = 3600.0
MAX_AGE = 25 * HOUR


class TestSnapshotStore:
    def test_empty_store(self) -> None:
        store = SnapshotStore(MAX_AGE)
        assert len(store) == 0
        assert store.view() == ()
        assert store.latest() is None

    def test_append_keeps_time_order(self) -> None:
        store = SnapshotStore(MAX_AGE)
        for i in range(5):
            store.append({"BTCUSD": ticker(100.0 + i)}, timestamp=1000.0 + i * 10)
        view = store.view()
        assert [s.timestamp for s in view] == [1000.0, 1010.0, 1020.0, 1030.0, 1040.0]
        assert store.latest().tickers["BTCUSD"].price == 104.0

    def test_evicts_from_front_only(self) -> None:
        store = SnapshotStore(MAX_AGE)
        store.append({"A": ticker(1.0)}, timestamp=0.0)
        store.append({"A": ticker(2.0)}, timestamp=HOUR)
        store.append({"A": ticker(3.0)}, timestamp=MAX_AGE + HOUR / 2)
        # t=0 is older than 25h relative to the newest; t=1h is not
        assert [s.timestamp for s in store.view()] == [HOUR, MAX_AGE + HOUR / 2]

    def test_eviction_invariant_over_long_run(self) -> None:
        store = SnapshotStore(MAX_AGE)
        ts = 0.0
        for i in range(2000):
            ts += 60.0 if i % 3 else 170.0
            store.append({"A": ticker(float(i))}, timestamp=ts)
            view = store.view()
            newest = view[-1].timestamp
            assert all(newest - s.timestamp <= MAX_AGE for s in view)
        assert len(store) > 0

    def test_never_empty_after_first_append(self) -> None:
        store = SnapshotStore(MAX_AGE)
        store.append({"A": ticker(1.0)}, timestamp=0.0)
        store.append({"A": ticker(1.0)}, timestamp=10 * MAX_AGE)
        assert len(store) == 1

    def test_view_is_immutable_snapshot(self) -> None:
        store = SnapshotStore(MAX_AGE)
        store.append({"A": ticker(1.0)}, timestamp=0.0)
        before = store.view()
        store.append({"A": ticker(2.0)}, timestamp=10.0)
        assert len(before) == 1
        assert len(store.view()) == 2

    def test_view_cached_between_appends(self) -> None:
        store = SnapshotStore(MAX_AGE)
        store.append({"A": ticker(1.0)}, timestamp=0.0)
        assert store.view() is store.view()

    def test_stored_tickers_are_copied(self) -> None:
        store = SnapshotStore(MAX_AGE)
        tickers = {"A": ticker(1.0)}
        store.append(tickers, timestamp=0.0)
        tickers["B"] = ticker(2.0)
        assert "B" not in store.latest().tickers
