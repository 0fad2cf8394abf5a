"""Wall-clock helpers for aligning the replay to tick boundaries."""

from __future__ import annotations

from datetime import datetime, timezone

_REFERENCE_DAY = (1970, 1, 1)


def format_actual_time(now: datetime, step_seconds: int = 5) -> str:
    """Format ``now`` as ``HH:MM:SS`` with seconds floored to the step.

    12:00:07 with a 5 second step becomes ``"12:00:05"``.
    """
    floored = now.second - (now.second % step_seconds)
    return f"{now.hour:02d}:{now.minute:02d}:{floored:02d}"


def ms_to_next_step(now: datetime, step_ms: int = 5000) -> int:
    """Milliseconds remaining until the next multiple of ``step_ms`` since the epoch."""
    epoch_ms = int(now.timestamp() * 1000)
    return step_ms - (epoch_ms % step_ms)


def to_date(value: str) -> datetime:
    """Turn a sample timestamp into a datetime.

    ``HH:MM[:SS]`` strings land on 1970-01-01; anything else is parsed as
    ISO-8601 (a trailing ``Z`` is accepted).
    """
    candidate = value.strip()
    if "T" not in candidate and "-" not in candidate:
        parts = candidate.split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid clock time {value!r}")
        hours, minutes = int(parts[0]), int(parts[1])
        seconds = int(parts[2]) if len(parts) > 2 and parts[2] else 0
        return datetime(*_REFERENCE_DAY, hours, minutes, seconds)

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    parsed = datetime.fromisoformat(candidate)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed
