"""
Measurement records and the form-submission flow around them.

The core does not store anything: it builds records (age and percentiles
computed, values in SI units) and hands them back to the caller to persist.
"""

from typing import Any, Iterable, Literal, Mapping, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, field_validator

from .ages import DateLike, calculate_age_in_days, parse_date
from .config import (
    FORM_RANGES,
    MEASUREMENT_COLUMNS,
    MEASUREMENT_TYPES,
    PERCENTILE_COLUMNS,
    SEXES,
)
from .reference import load_reference_table
from .units import to_metric
from .zscores import calculate_percentile, calculate_percentiles

Sex = Literal["male", "female"]
MeasurementType = Literal["weight", "height", "head"]
Unit = Literal["metric", "imperial"]

_LABELS = {"weight": "weight", "height": "height", "head": "head circumference"}


class BabyProfile(BaseModel):
    """Child the measurements belong to."""

    id: str
    name: str
    birth_date: str
    sex: Sex
    birth_weight_kg: Optional[float] = None
    birth_height_cm: Optional[float] = None
    birth_head_cm: Optional[float] = None

    @field_validator("birth_date")
    @classmethod
    def validate_birth_date(cls, v: str) -> str:
        """Ensure the birth date is a parseable ISO-8601 date."""
        if parse_date(v) is None:
            raise ValueError("birth_date must be an ISO-8601 date")
        return v


class Measurement(BaseModel):
    """
    One growth measurement, SI units.

    age_in_days and the percentile fields are derived by the core; id and
    notes belong to the caller.
    """

    id: Optional[str] = None
    date: str
    age_in_days: int
    weight_kg: float
    height_cm: float
    head_cm: float
    weight_percentile: Optional[float] = None
    height_percentile: Optional[float] = None
    head_percentile: Optional[float] = None
    notes: Optional[str] = None


def _series_for(reference: Optional[Mapping], sex: str, measurement_type: str) -> Any:
    table = reference if reference is not None else load_reference_table()
    return table.get((sex, measurement_type), [])


def record_measurement(
    profile: BabyProfile,
    date: str,
    weight: float,
    height: float,
    head: float,
    unit: Unit = "metric",
    notes: Optional[str] = None,
    measurement_id: Optional[str] = None,
    reference: Optional[Mapping] = None,
) -> Measurement:
    """
    Build a measurement record from submitted form values.

    Converts the values to kg/cm, computes the age at measurement and the
    three percentiles. Empty notes are dropped.

    Args:
        profile: Child the measurement belongs to
        date: Measurement date (ISO-8601)
        weight, height, head: Entered values in the given unit system
        unit: 'metric' or 'imperial'
        notes: Free text
        measurement_id: Id of the record being edited, if any
        reference: Reference table; defaults to the packaged WHO table

    Returns:
        Measurement ready to be persisted by the caller

    Raises:
        ValueError: If unit is unknown.
    """
    values = {
        "weight": float(to_metric(weight, "weight", unit)),
        "height": float(to_metric(height, "height", unit)),
        "head": float(to_metric(head, "head", unit)),
    }
    age_in_days = calculate_age_in_days(profile.birth_date, date)
    percentiles = {
        measure: calculate_percentile(
            values[measure],
            age_in_days,
            measure,
            profile.sex,
            _series_for(reference, profile.sex, measure),
        )
        for measure in MEASUREMENT_TYPES
    }
    notes = notes.strip() if notes else None

    return Measurement(
        id=measurement_id,
        date=date,
        age_in_days=age_in_days,
        weight_kg=values["weight"],
        height_cm=values["height"],
        head_cm=values["head"],
        weight_percentile=percentiles["weight"],
        height_percentile=percentiles["height"],
        head_percentile=percentiles["head"],
        notes=notes or None,
    )


def history_frame(measurements: Iterable[Measurement]) -> pd.DataFrame:
    """Measurement history as a DataFrame sorted by age."""
    frame = pd.DataFrame(
        [m.model_dump() for m in measurements],
        columns=list(Measurement.model_fields),
    )
    return frame.sort_values("age_in_days", kind="stable").reset_index(drop=True)


def annotate_percentiles(
    df: pd.DataFrame, sex: str, reference: Optional[Mapping] = None
) -> pd.DataFrame:
    """
    Add percentile columns to a measurement history.

    Computes weight_percentile, height_percentile and head_percentile for
    every row that has the matching measurement column. Rows that cannot be
    computed get the median fallback.

    Args:
        df: History with an age_in_days column and any of weight_kg,
            height_cm, head_cm
        sex: 'male' or 'female'
        reference: Reference table; defaults to the packaged WHO table

    Returns:
        Copy of df with the percentile columns added

    Raises:
        ValueError: If sex is unknown or age_in_days is missing.
    """
    if sex not in SEXES:
        raise ValueError(f"Sex must be one of {SEXES}, got {sex!r}")
    if "age_in_days" not in df.columns:
        raise ValueError("Column 'age_in_days' does not exist in DataFrame")

    result = df.copy()
    ages = result["age_in_days"].to_numpy(dtype=np.float64)
    for measure, column in MEASUREMENT_COLUMNS.items():
        if column not in result.columns:
            continue
        result[PERCENTILE_COLUMNS[measure]] = calculate_percentiles(
            result[column].to_numpy(dtype=np.float64),
            ages,
            _series_for(reference, sex, measure),
        )
    return result


def form_value_error(value: Any, measurement_type: str, unit: str) -> Optional[str]:
    """
    Input-time message for an entered value, or None if it is acceptable.

    Bounds here are the form's (inclusive, per unit system), tighter than the
    plausibility gates in methods.range.

    Raises:
        ValueError: If measurement type or unit is unknown.
    """
    if unit not in FORM_RANGES:
        raise ValueError(f"Unit must be one of {tuple(FORM_RANGES)}, got {unit!r}")
    if measurement_type not in FORM_RANGES[unit]:
        raise ValueError(
            f"Measurement type must be one of {MEASUREMENT_TYPES}, got {measurement_type!r}"
        )
    label = _LABELS[measurement_type]
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float("nan")
    if np.isnan(number) or number <= 0:
        return f"Please enter a valid {label}"

    low, high, unit_label = FORM_RANGES[unit][measurement_type]
    if number < low or number > high:
        return f"{label.capitalize()} should be between {low:g}-{high:g} {unit_label}"
    return None


def measurement_date_error(
    measurement_date: DateLike,
    birth_date: DateLike,
    today: Optional[DateLike] = None,
) -> Optional[str]:
    """Input-time message for a measurement date, or None if it is acceptable."""
    measured = parse_date(measurement_date)
    born = parse_date(birth_date)
    if measured is None or born is None:
        return "Please enter a valid date"
    now = parse_date(today) if today is not None else pd.Timestamp.today().normalize()
    if measured < born:
        return "Date cannot be before birth date"
    if now is not None and measured > now:
        return "Date cannot be in the future"
    return None

