"""Orchestration of dataset loading, live replay and chart views."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from threading import Lock
from typing import AsyncIterator, List, Optional

from models.records import ChartView, Dataset, Metric, Point, Prefixes, RealtimeData
from services.aggregator import Aggregator
from services.clock import to_date
from services.converter import build_prefixes, mw_str_to_kwh, to_celsius, valid_temperature
from services.realtime import Clock, Sleep, realtime_readings
from settings import get_settings
from storage.dataset_source import DatasetSource, build_default_source

logger = logging.getLogger(__name__)


@dataclass
class FeedSummary:
    """Overall statistics of the loaded dataset."""

    temperature_samples: int
    power_samples: int
    first_time: Optional[str]
    last_time: Optional[str]
    mean_temperature: Optional[float]
    total_kwh: float


class FeedService:
    """Loads the dataset once and hands out independent replays over it."""

    def __init__(
        self,
        source: DatasetSource,
        aggregator: Aggregator,
        step_ms: int = 5000,
        step_seconds: int = 5,
        clock: Optional[Clock] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.source = source
        self.aggregator = aggregator
        self.step_ms = step_ms
        self.step_seconds = step_seconds
        self.clock = clock
        self.sleep = sleep
        self._dataset: Optional[Dataset] = None
        self._prefixes: Optional[Prefixes] = None
        self._lock = Lock()

    def dataset(self) -> Dataset:
        with self._lock:
            if self._dataset is None:
                self._dataset = self.source.load()
            return self._dataset

    def prefixes(self) -> Prefixes:
        dataset = self.dataset()
        with self._lock:
            if self._prefixes is None:
                self._prefixes = build_prefixes(dataset, self.step_seconds)
            return self._prefixes

    async def stream(self, limit: Optional[int] = None) -> AsyncIterator[RealtimeData]:
        """Yield a fresh replay, stopping after ``limit`` readings when given."""
        logger.debug("Opening realtime stream", extra={"limit": limit})
        readings = realtime_readings(
            self.dataset(),
            self.step_ms,
            self.step_seconds,
            clock=self.clock,
            sleep=self.sleep,
            prefixes=self.prefixes(),
        )
        emitted = 0
        try:
            async for reading in readings:
                yield reading
                emitted += 1
                if limit is not None and emitted >= limit:
                    break
        finally:
            await readings.aclose()

    def history_points(self) -> List[Point]:
        dataset = self.dataset()
        points: List[Point] = []
        for index, sample in enumerate(dataset.temperature):
            try:
                date = to_date(sample.time)
            except ValueError:
                logger.debug(
                    "Skipping sample with unparsable time %r",
                    sample.time,
                    extra={"reason": "invalid time"},
                )
                continue
            raw = valid_temperature(sample.value)
            power = dataset.power[index].value if index < len(dataset.power) else None
            points.append(
                Point(
                    date=date,
                    temperature=to_celsius(raw) if raw is not None else None,
                    energy=mw_str_to_kwh(power, self.step_seconds),
                )
            )
        return points

    def chart_points(self, view: ChartView | str, metric: Metric | str) -> List[Point]:
        view = ChartView(view)
        points = self.history_points()
        logger.debug(
            "Building chart series",
            extra={"view": view.value, "metric": Metric(metric).value},
        )
        if view is ChartView.tick:
            return points
        return self.aggregator.aggregate(points, view.value, metric)

    def summary(self) -> FeedSummary:
        dataset = self.dataset()
        prefixes = self.prefixes()
        times = prefixes.times
        count = prefixes.temp_cnt[-1] if prefixes.temp_cnt else 0
        return FeedSummary(
            temperature_samples=len(dataset.temperature),
            power_samples=len(dataset.power),
            first_time=times[0] if times else None,
            last_time=times[-1] if times else None,
            mean_temperature=prefixes.temp_sum[-1] / count if count else None,
            total_kwh=prefixes.kwh_sum[-1] if prefixes.kwh_sum else 0.0,
        )

    def reset(self) -> None:
        """Drop the cached dataset so the next access reloads it."""
        with self._lock:
            self._dataset = None
            self._prefixes = None


@lru_cache
def build_default_feed() -> FeedService:
    """Factory that wires the feed with settings-driven defaults."""
    settings = get_settings()
    return FeedService(
        source=build_default_source(),
        aggregator=Aggregator(),
        step_ms=settings.step_ms,
        step_seconds=settings.step_seconds,
    )
