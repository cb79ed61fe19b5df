"""Market data layer -- snapshot history, high/low tracking, and query computations."""

from scanner.market_data.aggregator import aggregate_results
from scanner.market_data.high_low import HighLowEntry, HighLowTracker
from scanner.market_data.history import combine_history_info, history_info
from scanner.market_data.poller import ExchangePoller
from scanner.market_data.snapshot_store import SnapshotStore
from scanner.market_data.sparkline import sample_sparkline
from scanner.market_data.timeframe import resolve_timeframe

__all__ = [
    "ExchangePoller",
    "HighLowEntry",
    "HighLowTracker",
    "SnapshotStore",
    "aggregate_results",
    "combine_history_info",
    "history_info",
    "resolve_timeframe",
    "sample_sparkline",
]
