"""Pattern statistics bookkeeping for callers that track patterns across runs.

The engine itself keeps no history. These helpers compute the next
statistics row for a detected pattern and rank or rate stored rows, leaving
storage to the caller.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Sequence

from btc_signals.analysis.models import PatternRecord


@dataclass(frozen=True)
class PatternStats:
    """Accumulated occurrence statistics for one pattern name."""

    pattern_name: str
    count: int
    correct: int
    precision: float
    last_seen: datetime


def update_pattern_stats(
    existing: PatternStats | None,
    record: PatternRecord,
    now: datetime,
    min_accuracy: float = 0.8,
) -> PatternStats | None:
    """Compute the statistics row after observing ``record``.

    Only patterns whose accuracy rate reaches ``min_accuracy`` are tracked.
    A first occurrence seeds the precision with the rule's accuracy rate;
    later occurrences bump the count and recompute precision from the
    confirmed ``correct`` count, which only outcome labelling increases.

    Args:
        existing: Current row for this pattern, or None if untracked.
        record: The newly detected pattern.
        now: Observation time.
        min_accuracy: Minimum accuracy rate for a pattern to be tracked.

    Returns:
        The updated row, or None if the pattern is not tracked.
    """
    if record.accuracy_rate < min_accuracy:
        return None

    if existing is None:
        return PatternStats(
            pattern_name=record.pattern_name,
            count=1,
            correct=0,
            precision=record.accuracy_rate,
            last_seen=now,
        )

    count = existing.count + 1
    return replace(
        existing,
        count=count,
        precision=existing.correct / count,
        last_seen=now,
    )


def rate_pattern_quality(count: int, precision: float) -> str:
    """Rate a pattern's track record by sample size and precision."""
    if count >= 50 and precision >= 0.8:
        return "Excellent"
    elif count >= 20 and precision >= 0.7:
        return "Good"
    elif count >= 10 and precision >= 0.6:
        return "Fair"
    return "Insufficient Data"


def rank_patterns(stats: list[PatternStats], limit: int = 10) -> list[PatternStats]:
    """Return the best tracked patterns: precision desc, then count desc.

    Rows that were never counted are dropped.
    """
    counted = [s for s in stats if s.count != 0]
    counted.sort(key=lambda s: (s.precision, s.count), reverse=True)
    return counted[:limit]


def record_patterns(
    stats: dict[str, PatternStats],
    records: Sequence[PatternRecord],
    now: datetime,
    min_accuracy: float = 0.8,
) -> dict[str, PatternStats]:
    """Fold one run's detected patterns into a stats table keyed by name.

    Untracked patterns are skipped. The input table is not modified.
    """
    updated = dict(stats)
    for record in records:
        row = update_pattern_stats(
            updated.get(record.pattern_name), record, now, min_accuracy=min_accuracy
        )
        if row is not None:
            updated[record.pattern_name] = row
    return updated
