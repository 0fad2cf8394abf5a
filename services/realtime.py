"""Replay a historical dataset as a live feed, one reading per tick."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Optional

from models.records import Dataset, Prefixes, RealtimeData
from services.clock import format_actual_time, ms_to_next_step
from services.converter import build_prefixes, mw_str_to_kwh, to_celsius, valid_temperature
from services.time_index import find_closest_index

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[None]]


@dataclass
class StreamState:
    """Cumulative totals owned by a single running replay.

    The starting index is already accounted for by the prefix sums, so only
    strictly later indices are added incrementally.
    """

    start_index: int
    sum_temp: float
    count_temp: int
    total_kwh: float
    last_temp_c: Optional[float]

    @classmethod
    def seed(cls, dataset: Dataset, prefixes: Prefixes, index: int) -> "StreamState":
        last_temp_c: Optional[float] = None
        for j in range(index, -1, -1):
            raw = valid_temperature(dataset.temperature[j].value)
            if raw is not None:
                last_temp_c = to_celsius(raw)
                break
        return cls(
            start_index=index,
            sum_temp=prefixes.temp_sum[index],
            count_temp=prefixes.temp_cnt[index],
            total_kwh=prefixes.kwh_sum[index],
            last_temp_c=last_temp_c,
        )

    @property
    def avg_temperature(self) -> float:
        if self.count_temp > 0:
            return self.sum_temp / self.count_temp
        return self.last_temp_c if self.last_temp_c is not None else 0.0


def build_reading(
    dataset: Dataset,
    prefixes: Prefixes,
    state: StreamState,
    index: int,
    step_seconds: int = 5,
) -> RealtimeData:
    """Construct the reading for ``index`` and advance ``state`` past it."""
    advanced = index > state.start_index

    raw = valid_temperature(dataset.temperature[index].value)
    if raw is not None:
        temp_c = to_celsius(raw)
        state.last_temp_c = temp_c
        if advanced:
            state.sum_temp += temp_c
            state.count_temp += 1
    else:
        temp_c = state.last_temp_c if state.last_temp_c is not None else 0.0

    power = dataset.power[index].value if index < len(dataset.power) else None
    kwh = mw_str_to_kwh(power, step_seconds)
    if advanced:
        state.total_kwh += kwh

    return RealtimeData(
        time=prefixes.times[index],
        temperature=temp_c,
        power=kwh,
        avg_temperature=state.avg_temperature,
        total_power=state.total_kwh,
    )


async def realtime_readings(
    dataset: Dataset,
    step_ms: int = 5000,
    step_seconds: int = 5,
    *,
    clock: Optional[Clock] = None,
    sleep: Sleep = asyncio.sleep,
    prefixes: Optional[Prefixes] = None,
) -> AsyncIterator[RealtimeData]:
    """Yield readings starting at the sample matching the current time of day.

    The first reading is emitted immediately. The next one waits for the
    following ``step_ms`` boundary, and every later one waits a full step.
    The sequence ends at the last sample; it never wraps around.
    Pass ``prefixes`` to reuse totals already built for ``dataset``.
    """
    if not dataset.temperature:
        return

    now = clock or datetime.now
    if prefixes is None:
        prefixes = build_prefixes(dataset, step_seconds)
    target = format_actual_time(now(), step_seconds)
    index = find_closest_index(prefixes.times, target)
    state = StreamState.seed(dataset, prefixes, index)
    logger.info(
        "Starting realtime replay",
        extra={
            "target_time": target,
            "start_index": index,
            "sample_count": len(prefixes.times),
        },
    )

    yield build_reading(dataset, prefixes, state, index, step_seconds)
    await sleep(ms_to_next_step(now(), step_ms) / 1000)

    while index + 1 < len(prefixes.times):
        index += 1
        yield build_reading(dataset, prefixes, state, index, step_seconds)
        await sleep(step_ms / 1000)

    logger.info("Realtime replay exhausted", extra={"start_index": state.start_index})
