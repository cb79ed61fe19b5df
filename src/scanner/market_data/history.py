"""Freshness and coverage statistics for snapshot history."""

from collections.abc import Iterable, Sequence

from scanner.models import HistoryInfo, Snapshot


def _age(now: float, timestamp: float) -> int:
    # Half-up, not round()'s half-to-even: 2.5 s reads as 3
    return int(now - timestamp + 0.5)


def history_info(history: Sequence[Snapshot], pairs: int, now: float) -> HistoryInfo:
    """Stats for one exchange. Zeros when there is no history yet."""
    if not history:
        return HistoryInfo()
    return HistoryInfo(
        snapshots=len(history),
        oldest_age=_age(now, history[0].timestamp),
        newest_age=_age(now, history[-1].timestamp),
        pairs=pairs,
    )


def combine_history_info(infos: Iterable[HistoryInfo]) -> HistoryInfo:
    """Combine per-exchange stats for the "all" view.

    Sums snapshots and pairs; takes the largest oldest-age and the smallest
    newest-age among exchanges with at least one snapshot.
    """
    combined = HistoryInfo()
    newest_ages: list[int] = []
    for info in infos:
        if info.snapshots == 0:
            continue
        combined.snapshots += info.snapshots
        combined.pairs += info.pairs
        combined.oldest_age = max(combined.oldest_age, info.oldest_age)
        newest_ages.append(info.newest_age)
    combined.newest_age = min(newest_ages) if newest_ages else 0
    return combined
