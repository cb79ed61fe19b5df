"""Down-sampled price trajectories for trend sparklines."""

from collections.abc import Iterator, Sequence

from scanner.models import Snapshot, SparkPoint

DEFAULT_MAX_POINTS = 30


def sample_indices(count: int, max_points: int = DEFAULT_MAX_POINTS) -> list[int]:
    """Evenly strided indices into a history of ``count`` snapshots.

    ``stride = max(1, count // max_points)``; the newest index is always
    last, replacing the final strided index if the sample would otherwise
    exceed ``max_points``.
    """
    if count <= 0 or max_points <= 0:
        return []
    stride = max(1, count // max_points)
    indices = list(range(0, count, stride))
    last = count - 1
    if indices[-1] != last:
        indices.append(last)
    if len(indices) > max_points:
        indices = indices[: max_points - 1] + [last]
    return indices


def sample_sparkline(
    history: Sequence[Snapshot],
    symbol: str,
    max_points: int = DEFAULT_MAX_POINTS,
) -> Iterator[SparkPoint]:
    """Yield at most ``max_points`` (ts, price) points for ``symbol``, oldest first.

    Sampled snapshots that don't contain the symbol are skipped. ``history``
    should be an immutable view; the generator reads it lazily.
    """
    for i in sample_indices(len(history), max_points):
        ticker = history[i].tickers.get(symbol)
        if ticker is not None:
            yield SparkPoint(ts=history[i].timestamp, price=ticker.price)


def count_snapshots_with(history: Sequence[Snapshot], symbol: str) -> int:
    """Number of snapshots that contain ``symbol``."""
    return sum(1 for snap in history if symbol in snap.tickers)
