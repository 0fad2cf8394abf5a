"""Unit conversion and prefix-sum accumulation over a dataset."""

from __future__ import annotations

import math
from typing import Optional

from models.records import Dataset, Prefixes

_ABSOLUTE_ZERO_C = 273.15
_SECONDS_PER_HOUR = 3600


def to_celsius(raw: float) -> float:
    """Convert a decikelvin sensor value to degrees Celsius."""
    return raw / 10 - _ABSOLUTE_ZERO_C


def valid_temperature(value: object) -> Optional[float]:
    """Return ``value`` as a float when it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def mw_str_to_kwh(value: Optional[str], step_seconds: int = 5) -> float:
    """Energy in kWh delivered during one tick at ``value`` megawatts.

    ``value`` may use a comma as decimal separator. Missing, unparsable or
    non-finite values contribute nothing.
    """
    candidate = (value if value is not None else "0").replace(",", ".", 1).strip()
    try:
        megawatts = float(candidate)
    except ValueError:
        return 0.0
    if not math.isfinite(megawatts):
        return 0.0
    return megawatts * 1000 * (step_seconds / _SECONDS_PER_HOUR)


def build_prefixes(dataset: Dataset, step_seconds: int = 5) -> Prefixes:
    """Compute running temperature sums/counts and cumulative energy in one pass."""
    temps = dataset.temperature
    powers = dataset.power
    n = max(len(temps), len(powers))

    times = [sample.time for sample in temps]
    temp_sum = [0.0] * n
    temp_cnt = [0] * n
    kwh_sum = [0.0] * n

    total = 0.0
    count = 0
    energy = 0.0
    for i in range(n):
        raw = valid_temperature(temps[i].value) if i < len(temps) else None
        if raw is not None:
            total += to_celsius(raw)
            count += 1

        power = powers[i].value if i < len(powers) else None
        energy += mw_str_to_kwh(power, step_seconds)

        temp_sum[i] = total
        temp_cnt[i] = count
        kwh_sum[i] = energy

    return Prefixes(times=times, temp_sum=temp_sum, temp_cnt=temp_cnt, kwh_sum=kwh_sum)
