"""
WHO Growth Standard Reference Table

Loads the packaged LMS reference series (0-24 months) and exposes them as
read-only numpy structured arrays keyed by (sex, measurement type).

The shipped table is a simplified 25-point subset per series taken from the
WHO Child Growth Standards (https://www.who.int/tools/child-growth-standards).
Each point carries:
- L (lambda): Box-Cox power transformation
- M (mu): median
- S (sigma): coefficient of variation
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, NamedTuple, Tuple
import functools
import logging
from importlib import resources
from types import MappingProxyType

import numpy as np
import pandas as pd

from .config import MEASUREMENT_TYPES, REFERENCE_FILE, REFERENCE_PACKAGE, SEXES

REFERENCE_FIELDS = ("age_in_days", "L", "M", "S")
REFERENCE_DTYPE = np.dtype(
    [
        ("age_in_days", np.float64),
        ("L", np.float64),
        ("M", np.float64),
        ("S", np.float64),
    ]
)


class ReferencePoint(NamedTuple):
    """One LMS point of a reference series."""

    age_in_days: int
    L: float
    M: float
    S: float


SeriesKey = Tuple[str, str]


def _freeze(series: np.ndarray) -> np.ndarray:
    series = np.sort(series, order="age_in_days", kind="stable")
    series.flags.writeable = False
    return series


def as_series(points: Any) -> np.ndarray:
    """
    Coerce reference points into a sorted, read-only structured array.

    Accepts a structured array with the reference fields, a sequence of
    ReferencePoint (or plain 4-tuples), or a sequence of mappings keyed by
    ``age_in_days`` (or ``ageInDays``), ``L``, ``M`` and ``S``.

    Raises:
        ValueError: If the points cannot be read as LMS reference points.
    """
    if isinstance(points, np.ndarray) and points.dtype.names is not None:
        missing = [f for f in REFERENCE_FIELDS if f not in points.dtype.names]
        if missing:
            raise ValueError(f"Reference array is missing fields: {missing}")
        series = np.empty(points.shape[0], dtype=REFERENCE_DTYPE)
        for field in REFERENCE_FIELDS:
            series[field] = points[field]
        return _freeze(series)

    rows = []
    for point in points:
        if isinstance(point, Mapping):
            age = point.get("age_in_days", point.get("ageInDays"))
            rows.append((age, point["L"], point["M"], point["S"]))
        else:
            age, L, M, S = point
            rows.append((age, L, M, S))
    return _freeze(np.array(rows, dtype=REFERENCE_DTYPE))


class ReferenceTable(Mapping):
    """
    Immutable mapping of (sex, measurement type) to LMS reference series.

    Loaded once per process and shared freely: the wrapped arrays are marked
    read-only and the mapping itself cannot be mutated.
    """

    def __init__(self, series: Mapping[SeriesKey, Any]) -> None:
        self._series: Mapping[SeriesKey, np.ndarray] = MappingProxyType(
            {key: as_series(points) for key, points in series.items()}
        )

    def __getitem__(self, key: SeriesKey) -> np.ndarray:
        return self._series[key]

    def __iter__(self) -> Iterator[SeriesKey]:
        return iter(self._series)

    def __len__(self) -> int:
        return len(self._series)

    def series(self, sex: str, measurement_type: str) -> np.ndarray:
        """
        Return the reference series for a sex and measurement type.

        Raises:
            ValueError: If sex or measurement type is unknown.
        """
        if sex not in SEXES:
            raise ValueError(f"Sex must be one of {SEXES}, got {sex!r}")
        if measurement_type not in MEASUREMENT_TYPES:
            raise ValueError(
                f"Measurement type must be one of {MEASUREMENT_TYPES}, got {measurement_type!r}"
            )
        key = (sex, measurement_type)
        if key not in self._series:
            raise ValueError(f"Reference data not found for {sex}/{measurement_type}")
        return self._series[key]


def _read_reference_frame() -> pd.DataFrame:
    source = resources.files(REFERENCE_PACKAGE).joinpath(REFERENCE_FILE)
    with source.open("rb") as f:
        return pd.read_csv(f)


@functools.lru_cache(maxsize=1)
def load_reference_table() -> ReferenceTable:
    """
    Load the packaged WHO LMS reference table.

    Uses importlib.resources so the CSV is found wherever the package is
    installed. The table is cached for the lifetime of the process.

    Returns:
        ReferenceTable with one series per (sex, measurement type).

    Raises:
        FileNotFoundError: If the packaged reference file cannot be found.
        ValueError: If the file cannot be parsed into LMS series.
    """
    try:
        frame = _read_reference_frame()
    except FileNotFoundError:
        raise FileNotFoundError(
            f"Growth reference data file {REFERENCE_FILE} not found. "
            "Ensure growthtrack is properly installed with its package data."
        ) from None
    except Exception as e:
        raise ValueError(f"Failed to load growth reference data: {e}") from e

    missing = [c for c in ("sex", "measure") + REFERENCE_FIELDS if c not in frame.columns]
    if missing:
        raise ValueError(f"Growth reference data is missing columns: {missing}")

    series: Dict[SeriesKey, np.ndarray] = {}
    for (sex, measure), group in frame.groupby(["sex", "measure"], sort=False):
        records = group.loc[:, list(REFERENCE_FIELDS)].to_records(index=False)
        series[(str(sex), str(measure))] = as_series(records)
    return ReferenceTable(series)


def validate_reference_integrity(table: Mapping[SeriesKey, np.ndarray]) -> bool:
    """
    Validate integrity of a loaded reference table.

    Checks for the six expected series, structured array fields, strictly
    increasing non-negative ages and positive M and S values. Logs a warning
    for any issue found but doesn't raise.

    Args:
        table: Reference table (or any mapping of the same shape)

    Returns:
        True if the table passes all checks, False otherwise
    """
    try:
        if not table:
            logging.warning("Loaded reference table is empty")
            return False

        expected_keys = [(sex, m) for sex in SEXES for m in MEASUREMENT_TYPES]
        missing_keys = [key for key in expected_keys if key not in table]
        if missing_keys:
            logging.warning(f"Missing expected reference series: {missing_keys}")
            return False

        valid = True
        for key in expected_keys:
            series = table[key]
            if not hasattr(series, "dtype") or series.dtype.names != REFERENCE_FIELDS:
                logging.warning(f"Reference series {key} has unexpected fields")
                valid = False
                continue
            ages = series["age_in_days"]
            if ages.size == 0:
                logging.warning(f"Reference series {key} is empty")
                valid = False
            elif np.any(ages < 0):
                logging.warning(f"Negative ages found in reference series {key}")
                valid = False
            elif np.any(np.diff(ages) <= 0):
                logging.warning(f"Ages not strictly increasing in reference series {key}")
                valid = False
            if np.any(series["M"] <= 0):
                logging.warning(f"Non-positive M values in reference series {key}")
                valid = False
            if np.any(series["S"] <= 0):
                logging.warning(f"Non-positive S values in reference series {key}")
                valid = False
        return valid

    except Exception as e:
        logging.warning(f"Error validating reference data integrity: {e}")
        return False


def iter_points(series: np.ndarray) -> Iterator[ReferencePoint]:
    """Yield the points of a structured reference series as ReferencePoint."""
    for row in series:
        yield ReferencePoint(int(row["age_in_days"]), float(row["L"]), float(row["M"]), float(row["S"]))
