"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models.records import Point, RealtimeData
from services.feed import FeedSummary


class RealtimeDataResponse(BaseModel):
    """One tick of the live feed."""

    time: str
    temperature: float = Field(..., description="Current temperature in °C.")
    power: float = Field(..., description="Energy delivered during this tick in kWh.")
    avg_temperature: float = Field(..., description="Running mean temperature in °C.")
    total_power: float = Field(..., description="Cumulative energy in kWh.")

    @classmethod
    def from_reading(cls, reading: RealtimeData) -> "RealtimeDataResponse":
        return cls(
            time=reading.time,
            temperature=reading.temperature,
            power=reading.power,
            avg_temperature=reading.avg_temperature,
            total_power=reading.total_power,
        )


class PointResponse(BaseModel):
    """Chart-ready point."""

    date: datetime
    temperature: Optional[float] = None
    energy: Optional[float] = None

    @classmethod
    def from_point(cls, point: Point) -> "PointResponse":
        return cls(date=point.date, temperature=point.temperature, energy=point.energy)


class DatasetSummaryResponse(BaseModel):
    """Overview of the dataset being replayed."""

    temperature_samples: int = Field(..., ge=0)
    power_samples: int = Field(..., ge=0)
    first_time: Optional[str] = None
    last_time: Optional[str] = None
    mean_temperature: Optional[float] = None
    total_kwh: float

    @classmethod
    def from_summary(cls, summary: FeedSummary) -> "DatasetSummaryResponse":
        return cls(
            temperature_samples=summary.temperature_samples,
            power_samples=summary.power_samples,
            first_time=summary.first_time,
            last_time=summary.last_time,
            mean_temperature=summary.mean_temperature,
            total_kwh=summary.total_kwh,
        )
