from __future__ import annotations

import logging
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Optional

import httpx
import yaml

from models.records import Dataset, PowerSample, TemperatureSample
from services.converter import valid_temperature
from settings import get_settings

logger = logging.getLogger(__name__)


class DatasetLoadError(RuntimeError):
    """The dataset could not be fetched or parsed."""


class DatasetSource:
    """Reads the historical YAML dataset from a file path or an HTTP URL."""

    def __init__(self, location: str, timeout: float = 30.0) -> None:
        self.location = location
        self.timeout = timeout

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://"))

    def read_text(self) -> str:
        if self.is_remote:
            try:
                response = httpx.get(self.location, timeout=self.timeout)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise DatasetLoadError(
                    f"Failed to fetch dataset from {self.location!r}: {exc}"
                ) from exc
            return response.text

        path = Path(self.location)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DatasetLoadError(f"Dataset file {str(path)!r} could not be read.") from exc

    def load(self) -> Dataset:
        text = self.read_text()
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DatasetLoadError(
                f"Dataset at {self.location!r} is not a valid YAML document."
            ) from exc

        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise DatasetLoadError(f"Dataset at {self.location!r} must be a mapping.")

        dataset = Dataset(
            temperature=[
                TemperatureSample(time=time, value=valid_temperature(value))
                for time, value in _series_entries(raw, "temperature")
            ],
            power=[
                PowerSample(time=time, value=None if value is None else str(value))
                for time, value in _series_entries(raw, "power")
            ],
        )
        logger.info(
            "Dataset loaded",
            extra={
                "dataset_path": self.location,
                "sample_count": len(dataset.temperature),
            },
        )
        return dataset


def _normalize_time(value: Any) -> str:
    # YAML 1.1 reads unquoted 10:00:00 as the base-60 integer 36000.
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        hours, remainder = divmod(value, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _series_entries(raw: Mapping[str, Any], name: str) -> List[tuple[str, Any]]:
    """Return ``(time, value)`` per position, keeping malformed entries as gaps.

    A gap without a usable time reuses the previous entry's time so the
    series stays sorted and index-aligned with its counterpart.
    """
    series = raw.get(name) or {}
    values = series.get("values") if isinstance(series, Mapping) else None
    entries: List[tuple[str, Any]] = []
    for position, entry in enumerate(values or []):
        if isinstance(entry, Mapping) and entry.get("time") is not None:
            entries.append((_normalize_time(entry["time"]), entry.get("value")))
            continue
        logger.warning(
            "Treating malformed %s sample at position %d as missing",
            name,
            position,
            extra={"reason": "not a mapping with a time"},
        )
        previous = entries[-1][0] if entries else ""
        entries.append((previous, None))
    return entries


@lru_cache
def build_default_source(location: Optional[str] = None) -> DatasetSource:
    settings = get_settings()
    return DatasetSource(settings.dataset_path if location is None else location)
