from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List

import pytest

from models.records import Dataset, PowerSample, RealtimeData, TemperatureSample
from services.aggregator import Aggregator
from services.feed import FeedService
from storage.dataset_source import DatasetSource

TICK_KWH = 1000 * 5 / 3600


class StaticSource(DatasetSource):
    def __init__(self, dataset: Dataset) -> None:
        super().__init__("memory://dataset")
        self.dataset = dataset
        self.loads = 0

    def load(self) -> Dataset:
        self.loads += 1
        return self.dataset


async def _no_sleep(_seconds: float) -> None:
    return None


def _build_feed(dataset: Dataset) -> FeedService:
    moment = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    return FeedService(
        source=StaticSource(dataset),
        aggregator=Aggregator(),
        clock=lambda: moment,
        sleep=_no_sleep,
    )


@pytest.fixture()
def dataset() -> Dataset:
    times = ["10:00:00", "10:00:30", "10:01:00", "10:01:30"]
    temps = [2831.5, None, 2851.5, 2871.5]
    powers = ["1", "1", "2", "abc"]
    return Dataset(
        temperature=[TemperatureSample(time=t, value=v) for t, v in zip(times, temps)],
        power=[PowerSample(time=t, value=v) for t, v in zip(times, powers)],
    )


def test_dataset_is_loaded_once(dataset: Dataset) -> None:
    feed = _build_feed(dataset)

    feed.dataset()
    feed.prefixes()
    feed.summary()

    assert feed.source.loads == 1


def test_reset_forces_reload(dataset: Dataset) -> None:
    feed = _build_feed(dataset)
    feed.dataset()

    feed.reset()
    feed.dataset()

    assert feed.source.loads == 2


def test_summary(dataset: Dataset) -> None:
    summary = _build_feed(dataset).summary()

    assert summary.temperature_samples == 4
    assert summary.power_samples == 4
    assert summary.first_time == "10:00:00"
    assert summary.last_time == "10:01:30"
    assert summary.mean_temperature == pytest.approx((10.0 + 12.0 + 14.0) / 3)
    assert summary.total_kwh == pytest.approx(4 * TICK_KWH)


def test_summary_of_empty_dataset() -> None:
    summary = _build_feed(Dataset()).summary()

    assert summary.first_time is None
    assert summary.mean_temperature is None
    assert summary.total_kwh == 0.0


def test_history_points(dataset: Dataset) -> None:
    points = _build_feed(dataset).history_points()

    assert [point.date for point in points][:2] == [
        datetime(1970, 1, 1, 10, 0, 0),
        datetime(1970, 1, 1, 10, 0, 30),
    ]
    assert points[1].temperature is None
    assert points[0].temperature == pytest.approx(10.0)
    assert points[3].energy == 0.0


def test_chart_points_raw_view(dataset: Dataset) -> None:
    feed = _build_feed(dataset)

    assert feed.chart_points("5s", "temperature") == feed.history_points()


def test_chart_points_minute_view(dataset: Dataset) -> None:
    points = _build_feed(dataset).chart_points("minute", "temperature")

    assert [point.date for point in points] == [
        datetime(1970, 1, 1, 10, 0),
        datetime(1970, 1, 1, 10, 1),
    ]
    assert [point.temperature for point in points] == pytest.approx([10.0, 13.0])


def test_chart_points_hour_energy(dataset: Dataset) -> None:
    points = _build_feed(dataset).chart_points("hour", "energy")

    assert len(points) == 1
    assert points[0].energy == pytest.approx(TICK_KWH * 4 / 4 * 720)


def test_chart_points_rejects_unknown_view(dataset: Dataset) -> None:
    with pytest.raises(ValueError):
        _build_feed(dataset).chart_points("day", "energy")


def test_stream_respects_limit(dataset: Dataset) -> None:
    feed = _build_feed(dataset)

    async def run() -> List[RealtimeData]:
        return [reading async for reading in feed.stream(limit=2)]

    readings = asyncio.run(run())

    assert [reading.time for reading in readings] == ["10:00:00", "10:00:30"]


def test_each_stream_is_independent(dataset: Dataset) -> None:
    feed = _build_feed(dataset)

    async def run() -> tuple[List[RealtimeData], List[RealtimeData]]:
        first = [reading async for reading in feed.stream()]
        second = [reading async for reading in feed.stream()]
        return first, second

    first, second = asyncio.run(run())

    assert len(first) == 4
    assert first == second


def test_stream_reuses_cached_prefixes(dataset: Dataset, monkeypatch) -> None:
    feed = _build_feed(dataset)
    cached = feed.prefixes()

    def fail_rebuild(*_args, **_kwargs):
        raise AssertionError("prefixes rebuilt for the stream")

    monkeypatch.setattr("services.realtime.build_prefixes", fail_rebuild)
    monkeypatch.setattr("services.feed.build_prefixes", fail_rebuild)

    async def run() -> List[RealtimeData]:
        first = [reading async for reading in feed.stream()]
        second = [reading async for reading in feed.stream()]
        assert first == second
        return first

    readings = asyncio.run(run())

    assert len(readings) == 4
    assert readings[-1].total_power == pytest.approx(cached.kwh_sum[3])


def test_history_points_skip_out_of_range_clock_times() -> None:
    dataset = Dataset(
        temperature=[
            TemperatureSample(time="10:00:00", value=2831.5),
            TemperatureSample(time="25:00:00", value=2841.5),
            TemperatureSample(time="", value=None),
            TemperatureSample(time="10:00:10", value=2851.5),
        ],
        power=[
            PowerSample(time="10:00:00", value="1"),
            PowerSample(time="25:00:00", value="1"),
            PowerSample(time="", value=None),
            PowerSample(time="10:00:10", value="2"),
        ],
    )
    feed = _build_feed(dataset)

    points = feed.history_points()

    assert [point.date for point in points] == [
        datetime(1970, 1, 1, 10, 0, 0),
        datetime(1970, 1, 1, 10, 0, 10),
    ]
    assert points[1].energy == pytest.approx(2 * TICK_KWH)
    assert feed.chart_points("minute", "temperature")[0].temperature == pytest.approx(11.0)
