"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class BucketMode(str, Enum):
    """Calendar granularity used when rebucketing chart points."""

    minute = "minute"
    hour = "hour"


class Metric(str, Enum):
    """Which reading a chart series plots."""

    temperature = "temperature"
    energy = "energy"


class ChartView(str, Enum):
    """Chart resolution; ``5s`` is the raw tick series."""

    tick = "5s"
    minute = "minute"
    hour = "hour"


@dataclass(slots=True)
class TemperatureSample:
    """Raw temperature sample in decikelvin. ``value`` is None when absent."""

    time: str
    value: Optional[float]


@dataclass(slots=True)
class PowerSample:
    """Instantaneous power in megawatts, kept as the source decimal string."""

    time: str
    value: Optional[str]


@dataclass(slots=True)
class Dataset:
    """Two index-aligned series; the shorter one is implicitly padded with gaps."""

    temperature: List[TemperatureSample] = field(default_factory=list)
    power: List[PowerSample] = field(default_factory=list)


@dataclass(slots=True)
class Prefixes:
    """Running totals indexed in lockstep with the dataset.

    ``temp_sum``, ``temp_cnt`` and ``kwh_sum`` span ``max(len(temperature),
    len(power))`` entries. ``times`` only covers the temperature series.
    """

    times: List[str]
    temp_sum: List[float]
    temp_cnt: List[int]
    kwh_sum: List[float]


@dataclass(frozen=True, slots=True)
class RealtimeData:
    """One emitted reading of the live feed."""

    time: str
    temperature: float
    power: float
    avg_temperature: float
    total_power: float


@dataclass(slots=True)
class Point:
    """Chart-ready point."""

    date: datetime
    temperature: Optional[float] = None
    energy: Optional[float] = None
