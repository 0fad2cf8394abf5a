from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services.clock import format_actual_time, ms_to_next_step, to_date


@pytest.mark.parametrize(
    ("now", "step", "expected"),
    [
        (datetime(2024, 5, 1, 12, 0, 7), 5, "12:00:05"),
        (datetime(2024, 5, 1, 12, 0, 5), 5, "12:00:05"),
        (datetime(2024, 5, 1, 9, 3, 59), 5, "09:03:55"),
        (datetime(2024, 5, 1, 0, 0, 29), 15, "00:00:15"),
        (datetime(2024, 5, 1, 23, 59, 59), 1, "23:59:59"),
    ],
)
def test_format_actual_time(now: datetime, step: int, expected: str) -> None:
    assert format_actual_time(now, step) == expected


def test_ms_to_next_step() -> None:
    now = datetime(2024, 5, 1, 12, 0, 7, 250000, tzinfo=timezone.utc)

    assert ms_to_next_step(now, 5000) == 2750
    assert ms_to_next_step(now, 1000) == 750


def test_ms_to_next_step_on_boundary_waits_full_step() -> None:
    now = datetime(2024, 5, 1, 12, 0, 5, tzinfo=timezone.utc)

    assert ms_to_next_step(now, 5000) == 5000


def test_to_date_clock_time() -> None:
    assert to_date("10:15:30") == datetime(1970, 1, 1, 10, 15, 30)
    assert to_date("10:15") == datetime(1970, 1, 1, 10, 15)


def test_to_date_iso_timestamp() -> None:
    assert to_date("2025-10-21T12:00:00Z") == datetime(
        2025, 10, 21, 12, 0, tzinfo=timezone.utc
    )
    assert to_date("2025-10-21T12:00:00") == datetime(2025, 10, 21, 12, 0)


@pytest.mark.parametrize("value", ["25:00:00", "10:61:00", "", "10", "not-a-time"])
def test_to_date_rejects_invalid_values(value: str) -> None:
    with pytest.raises(ValueError):
        to_date(value)
