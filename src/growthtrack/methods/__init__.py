"""
Measurement plausibility detectors.
"""

from .base import BaseDetector
from .range.detector import (
    DEFAULT_MEASUREMENT_RANGES,
    FlatRange,
    RangeDetector,
    is_plausible,
    validate_measurement,
)

__all__ = [
    "BaseDetector",
    "DEFAULT_MEASUREMENT_RANGES",
    "FlatRange",
    "RangeDetector",
    "is_plausible",
    "validate_measurement",
]
