from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_DATASET_PATH_ENV = "FEED_DATASET_PATH"
_STEP_MS_ENV = "FEED_STEP_MS"
_STEP_SECONDS_ENV = "FEED_STEP_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    dataset_path: str
    step_ms: int
    step_seconds: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    return _read_str_env(_LOG_LEVEL_ENV, default).upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        dataset_path=_read_str_env(_DATASET_PATH_ENV, "./data/data.yml"),
        step_ms=_read_positive_int(_STEP_MS_ENV, 5000),
        step_seconds=_read_positive_int(_STEP_SECONDS_ENV, 5),
        log_level=_read_log_level("INFO"),
    )
