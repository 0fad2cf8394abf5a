"""Aggregation logic for chart points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List

from models.records import BucketMode, Metric, Point, RealtimeData
from services.clock import to_date

# Readings arrive every 5 seconds: 12 per minute, 720 per hour.
_NORMALIZATION_FACTORS: Dict[BucketMode, int] = {
    BucketMode.minute: 12,
    BucketMode.hour: 720,
}


@dataclass
class _Bucket:
    total: float = 0.0
    count: int = 0

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


def to_point(reading: RealtimeData) -> Point:
    """Map a live reading to a chart point."""
    return Point(
        date=to_date(reading.time),
        temperature=reading.temperature,
        energy=reading.power,
    )


def bucket_key(date: datetime, mode: BucketMode) -> datetime:
    """Truncate ``date`` to its minute or hour on a fixed reference day.

    Different calendar days fall into the same bucket so several days
    overlay onto a single daily profile.
    """
    if mode is BucketMode.minute:
        return datetime(1970, 1, 1, date.hour, date.minute)
    return datetime(1970, 1, 1, date.hour)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate(
        self,
        points: Iterable[Point],
        mode: BucketMode | str,
        metric: Metric | str,
    ) -> List[Point]:
        """Average ``metric`` per bucket, sorted by bucket start.

        Energy means are rescaled by the number of ticks in the bucket.
        Points without the metric are ignored.
        """
        mode = BucketMode(mode)
        metric = Metric(metric)

        buckets: Dict[datetime, _Bucket] = {}
        for point in points:
            value = point.temperature if metric is Metric.temperature else point.energy
            if value is None:
                continue
            bucket = buckets.setdefault(bucket_key(point.date, mode), _Bucket())
            bucket.total += value
            bucket.count += 1

        if metric is Metric.temperature:
            return [
                Point(date=key, temperature=buckets[key].mean) for key in sorted(buckets)
            ]

        factor = _NORMALIZATION_FACTORS[mode]
        return [
            Point(date=key, energy=buckets[key].mean * factor) for key in sorted(buckets)
        ]
