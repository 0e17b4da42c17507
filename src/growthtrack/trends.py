"""
Trend classification between consecutive measurements.
"""

from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional
import math

import pandas as pd

from .ages import parse_date
from .config import TREND_THRESHOLD_PCT


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"
    NONE = "none"


def get_measurement_trend(current: float, previous: Optional[float]) -> Trend:
    """
    Bucket the percent change from previous to current.

    > +2% is UP, < -2% is DOWN, anything in between is STABLE. With no usable
    previous value (missing, NaN or zero) there is no trend: NONE.
    """
    if previous is None or math.isnan(previous) or previous == 0:
        return Trend.NONE

    pct_change = (current - previous) / previous * 100
    if pct_change > TREND_THRESHOLD_PCT:
        return Trend.UP
    if pct_change < -TREND_THRESHOLD_PCT:
        return Trend.DOWN
    return Trend.STABLE


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def measurement_trends(measurements: Iterable[Any], field: str) -> List[Trend]:
    """
    Trend of each measurement against the one before it, oldest first.

    Records may be Measurement models or mappings; they are ordered by their
    ``date`` and the first one has no trend.

    Args:
        measurements: Measurement history in any order
        field: Value to compare, e.g. 'weight_kg'

    Returns:
        One Trend per measurement, in date order
    """
    ordered = sorted(
        measurements,
        key=lambda m: parse_date(_field(m, "date")) or pd.Timestamp.min,
    )
    trends: List[Trend] = []
    previous = None
    for record in ordered:
        current = _field(record, field)
        if current is None:
            trends.append(Trend.NONE)
            continue
        trends.append(get_measurement_trend(current, previous))
        previous = current
    return trends
