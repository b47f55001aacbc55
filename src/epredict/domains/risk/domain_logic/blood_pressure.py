"""Summary statistics for repeated systolic blood pressure readings."""

from __future__ import annotations

import statistics
from typing import Iterable


def sample_standard_deviation(values: Iterable[float]) -> float | None:
    """Sample (n - 1) standard deviation, as QRisk3 expects.

    Returns ``None`` for a single reading, where the statistic is undefined,
    and ``0.0`` when there are no readings at all.
    """
    data = [float(v) for v in values]
    if len(data) == 1:
        return None
    if not data:
        return 0.0
    return statistics.stdev(data)


def summarise_systolic_readings(readings: Iterable[float]) -> tuple[float | None, float | None]:
    """Return ``(mean, standard deviation)`` for a series of systolic readings.

    Both values are ``None`` when no readings are supplied, so the engine
    reports the parameters as missing rather than zero.
    """
    data = [float(v) for v in readings]
    if not data:
        return None, None
    return statistics.fmean(data), sample_standard_deviation(data)
