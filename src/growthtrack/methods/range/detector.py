from types import SimpleNamespace
from typing import Any, Callable, Dict, Optional

import pandas as pd
from pydantic import BaseModel, field_validator, StrictFloat

from growthtrack.config import MEASUREMENT_COLUMNS, MEASUREMENT_RANGES
from growthtrack.methods.base import BaseDetector


class FlatRange(BaseModel):
    """
    Open interval of plausible values: min < value < max.
    """

    min: StrictFloat
    max: StrictFloat

    @field_validator("max", mode="after")
    @classmethod
    def min_lt_max(cls, v: float, info: Any) -> float:
        """Validate that min < max."""
        lower = info.data.get("min", float("inf"))
        if v <= lower:
            raise ValueError("max must be > min")
        return v

    def contains(self, value: Any) -> bool:
        """True if value lies strictly inside the range; never raises."""
        try:
            return bool(self.min < value < self.max)
        except TypeError:
            return False


DEFAULT_MEASUREMENT_RANGES: Dict[str, Dict[str, float]] = {
    MEASUREMENT_COLUMNS[measure]: dict(bounds)
    for measure, bounds in MEASUREMENT_RANGES.items()
}


class RangeDetector(BaseDetector):
    """
    Detector for values outside plausibility gates.

    Bounds are exclusive on both sides: a value equal to min or max is
    implausible. These are data-entry gates, not clinical limits, and do not
    depend on age or sex.

    Config example (the default):
        {
            "weight_kg": {"min": 0.0, "max": 50.0},
            "height_cm": {"min": 0.0, "max": 200.0},
            "head_cm": {"min": 0.0, "max": 80.0},
        }
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize with range configs.

        Args:
            config: Column name to {"min", "max"} mapping; defaults to the
                measurement plausibility gates.

        Raises:
            ValueError: If config is invalid.
        """
        if config is None:
            config = DEFAULT_MEASUREMENT_RANGES
        if not isinstance(config, dict):
            raise ValueError("Config must be a dict")
        self.flat_configs: Dict[str, FlatRange] = {}
        for col, params in config.items():
            if not isinstance(params, dict):
                raise ValueError(f"Config for column '{col}' must be a dict")
            if "min" not in params or "max" not in params:
                raise ValueError(f"Config for column '{col}' must have min and max")
            self.flat_configs[col] = FlatRange(min=params["min"], max=params["max"])
        self.validate_config()

    def validate_config(self) -> None:
        """Validate the detector configuration."""
        if not self.flat_configs:
            raise ValueError("At least one column range is required")

    def detect(self, df: pd.DataFrame, columns: list[str]) -> Dict[str, pd.Series]:
        """Flag values outside the configured open intervals.

        Args:
            df: DataFrame to check.
            columns: List of column names to check (must have configs).

        Returns:
            Dict of boolean Series, one per column, where True indicates an
            implausible value. Missing values (NaN) are not flagged.

        Raises:
            ValueError: If column not in df or no config for column.
        """
        results = {}
        for col in columns:
            self._validate_column(df, col)
            if col not in self.flat_configs:
                raise ValueError(
                    f"No range configuration found for column '{col}'. "
                    "Expected {'min': ..., 'max': ...} (see RangeDetector docstring)."
                )
            lower = self.flat_configs[col].min
            upper = self.flat_configs[col].max
            flags = (df[col] <= lower) | (df[col] >= upper)
            results[col] = flags.astype(bool).rename(col)
        return results


_GATES: Dict[str, FlatRange] = {
    measure: FlatRange(**bounds) for measure, bounds in MEASUREMENT_RANGES.items()
}


def _gate(measure: str) -> Callable[[float], bool]:
    gate = _GATES[measure]

    def check(value: float) -> bool:
        return gate.contains(value)

    check.__name__ = measure
    check.__doc__ = f"True if {gate.min} < value < {gate.max}."
    return check


validate_measurement = SimpleNamespace(
    weight=_gate("weight"), height=_gate("height"), head=_gate("head")
)


def is_plausible(measurement_type: str, value: Any) -> bool:
    """Plausibility gate by measurement type; unknown types are never plausible."""
    gate = _GATES.get(measurement_type)
    return gate.contains(value) if gate is not None else False
