import pytest
import pandas as pd

from growthtrack.measurements import BabyProfile
from growthtrack.reference import ReferencePoint, load_reference_table


@pytest.fixture
def reference():
    """Packaged WHO LMS reference table."""
    return load_reference_table()


@pytest.fixture
def male_weight(reference):
    """Male weight-for-age series."""
    return reference.series("male", "weight")


@pytest.fixture
def tiny_series() -> list[ReferencePoint]:
    """Three-point series with round numbers for hand-checked interpolation."""
    return [
        ReferencePoint(0, 1.0, 10.0, 0.1),
        ReferencePoint(100, 0.5, 20.0, 0.2),
        ReferencePoint(200, 0.0, 30.0, 0.1),
    ]


@pytest.fixture
def profile() -> BabyProfile:
    return BabyProfile(id="b1", name="Ada", birth_date="2024-01-01", sex="male")


@pytest.fixture
def sample_history() -> pd.DataFrame:
    """Male history with the reference medians at tabulated ages."""
    return pd.DataFrame(
        {
            "age_in_days": [0, 30, 61],
            "weight_kg": [3.3464, 4.4709, 5.5675],
            "height_cm": [49.8842, 54.7244, 58.4249],
            "head_cm": [34.4618, 37.2759, 39.1285],
        }
    )
