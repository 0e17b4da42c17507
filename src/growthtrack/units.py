"""
Unit conversion utilities for growth measurements.

Measurements are stored in SI units (kg, cm). Conversions are applied on
input and display depending on the unit system the caller works in. All
conversions round, so a round trip is only approximately equal.
"""

import math
from types import SimpleNamespace

from .config import CM_PER_INCH, LB_PER_KG, MEASUREMENT_TYPES, UNITS


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round to the given decimals with halves going up, unlike the builtin round()."""
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def kg_to_lb(kg: float) -> float:
    return round_half_up(kg * LB_PER_KG, 2)


def lb_to_kg(lb: float) -> float:
    # Stored weights keep one more decimal than displayed pounds
    return round_half_up(lb / LB_PER_KG, 3)


def cm_to_in(cm: float) -> float:
    return round_half_up(cm / CM_PER_INCH, 1)


def in_to_cm(inches: float) -> float:
    return round_half_up(inches * CM_PER_INCH, 1)


convert_weight = SimpleNamespace(kg_to_lb=kg_to_lb, lb_to_kg=lb_to_kg)
convert_height = SimpleNamespace(cm_to_in=cm_to_in, in_to_cm=in_to_cm)


def _check(measurement_type: str, unit: str) -> None:
    if measurement_type not in MEASUREMENT_TYPES:
        raise ValueError(
            f"Measurement type must be one of {MEASUREMENT_TYPES}, got {measurement_type!r}"
        )
    if unit not in UNITS:
        raise ValueError(f"Unit must be one of {UNITS}, got {unit!r}")


def to_metric(value: float, measurement_type: str, unit: str) -> float:
    """
    Convert a value entered in the given unit system to kg (weight) or cm.

    Args:
        value: Entered value
        measurement_type: 'weight', 'height' or 'head'
        unit: 'metric' or 'imperial'

    Returns:
        Value in SI units; metric input is returned unchanged.

    Raises:
        ValueError: If measurement type or unit is unknown.
    """
    _check(measurement_type, unit)
    if unit == "metric":
        return value
    if measurement_type == "weight":
        return lb_to_kg(value)
    return in_to_cm(value)


def from_metric(value: float, measurement_type: str, unit: str) -> float:
    """Convert an SI value to the given unit system for display."""
    _check(measurement_type, unit)
    if unit == "metric":
        return value
    if measurement_type == "weight":
        return kg_to_lb(value)
    return cm_to_in(value)
