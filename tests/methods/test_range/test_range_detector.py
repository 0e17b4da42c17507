# Tests for RangeDetector and the measurement plausibility gates

import pytest
import pandas as pd
import numpy as np
from hypothesis import given, strategies as st, settings
from growthtrack.methods.range.detector import (
    FlatRange,
    RangeDetector,
    is_plausible,
    validate_measurement,
)


class TestRangeDetector:
    """Tests for RangeDetector class"""

    @pytest.fixture
    def sample_df(self) -> pd.DataFrame:  # type: ignore
        """History with one implausible value per measurement column"""
        return pd.DataFrame(
            {
                "weight_kg": [3.4, 4.5, 55.0, np.nan, 0.0],
                "height_cm": [50.0, 200.0, 61.0, 58.0, np.nan],
                "head_cm": [34.0, 37.0, -1.0, 39.0, 40.0],
            }
        )

    def test_tc001_default_config_covers_measurement_columns(self):
        detector = RangeDetector()
        assert set(detector.flat_configs) == {"weight_kg", "height_cm", "head_cm"}
        assert detector.flat_configs["weight_kg"] == FlatRange(min=0.0, max=50.0)

    def test_tc002_detect_flags_out_of_range(self, sample_df: pd.DataFrame):
        result = RangeDetector().detect(sample_df, ["weight_kg", "height_cm", "head_cm"])
        pd.testing.assert_series_equal(
            result["weight_kg"], pd.Series([False, False, True, False, True], name="weight_kg")
        )
        pd.testing.assert_series_equal(
            result["height_cm"], pd.Series([False, True, False, False, False], name="height_cm")
        )
        pd.testing.assert_series_equal(
            result["head_cm"], pd.Series([False, False, True, False, False], name="head_cm")
        )

    def test_tc003_custom_config(self, sample_df: pd.DataFrame):
        detector = RangeDetector({"weight_kg": {"min": 2.0, "max": 5.0}})
        result = detector.detect(sample_df, ["weight_kg"])
        assert list(result["weight_kg"]) == [False, False, True, False, True]

    def test_tc004_bounds_are_exclusive(self):
        df = pd.DataFrame({"col": [10.0, 10.5, 99.5, 100.0]})
        detector = RangeDetector({"col": {"min": 10.0, "max": 100.0}})
        assert list(detector.detect(df, ["col"])["col"]) == [True, False, False, True]

    def test_tc005_config_invalid_min_ge_max(self):
        with pytest.raises(ValueError):
            RangeDetector({"col": {"min": 20.0, "max": 10.0}})
        with pytest.raises(ValueError):
            RangeDetector({"col": {"min": 10.0, "max": 10.0}})

    def test_tc006_config_missing_bound(self):
        with pytest.raises(ValueError, match="must have min and max"):
            RangeDetector({"col": {"max": 20.0}})

    def test_tc007_config_non_float_values(self):
        with pytest.raises(ValueError):  # Pydantic ValidationError
            RangeDetector({"col": {"min": "10", "max": 20.0}})

    def test_tc008_config_shape_errors(self):
        with pytest.raises(ValueError, match="Config must be a dict"):
            RangeDetector([("col", 1.0)])  # type: ignore
        with pytest.raises(ValueError, match="must be a dict"):
            RangeDetector({"col": [0.0, 1.0]})
        with pytest.raises(ValueError, match="At least one column range"):
            RangeDetector({})

    def test_tc009_detect_raises_for_missing_column(self, sample_df: pd.DataFrame):
        with pytest.raises(ValueError, match="Column 'bmi' does not exist in DataFrame"):
            RangeDetector().detect(sample_df, ["bmi"])

    def test_tc010_detect_raises_for_missing_config(self):
        df = pd.DataFrame({"notes": [1.0]})
        with pytest.raises(ValueError, match="No range configuration found for column 'notes'"):
            RangeDetector().detect(df, ["notes"])

    def test_tc011_detect_does_not_modify_dataframe(self, sample_df: pd.DataFrame):
        original = sample_df.copy(deep=True)
        RangeDetector().detect(sample_df, ["weight_kg"])
        pd.testing.assert_frame_equal(sample_df, original)

    def test_tc012_empty_dataframe_and_columns(self):
        df = pd.DataFrame({"weight_kg": pd.Series([], dtype=float)})
        result = RangeDetector().detect(df, ["weight_kg"])
        assert result["weight_kg"].empty
        assert RangeDetector().detect(df, []) == {}

    def test_tc013_all_nan_not_flagged(self):
        df = pd.DataFrame({"head_cm": [np.nan, np.nan]})
        assert not RangeDetector().detect(df, ["head_cm"])["head_cm"].any()


class TestPlausibilityGates:
    @pytest.mark.parametrize(
        "measure, value, expected",
        [
            ("weight", 3.5, True),
            ("weight", 0.0, False),
            ("weight", 50.0, False),
            ("weight", 49.99, True),
            ("weight", 100.0, False),
            ("height", 200.0, False),
            ("height", 0.1, True),
            ("head", 80.0, False),
            ("head", -1.0, False),
            ("head", 35.0, True),
        ],
    )
    def test_tc014_is_plausible(self, measure: str, value: float, expected: bool):
        assert is_plausible(measure, value) is expected
        assert getattr(validate_measurement, measure)(value) is expected

    def test_tc015_unknown_type_is_never_plausible(self):
        assert is_plausible("bmi", 20.0) is False

    def test_tc016_non_numeric_and_nan(self):
        assert validate_measurement.weight("heavy") is False
        assert validate_measurement.height(None) is False
        assert validate_measurement.head(float("nan")) is False

    def test_tc017_gates_expose_bounds(self):
        assert validate_measurement.head.__name__ == "head"
        assert "80.0" in validate_measurement.head.__doc__


@settings(max_examples=100, deadline=None)
@given(
    values=st.lists(
        st.one_of(st.floats(min_value=-10, max_value=300), st.just(float("nan"))), min_size=1, max_size=20
    )
)
def test_tc018_hypothesis_detector_agrees_with_gate(values):  # type: ignore[no-untyped-def]
    """Detector flags exactly the non-NaN values the scalar gate rejects"""
    df = pd.DataFrame({"height_cm": values})
    flags = RangeDetector().detect(df, ["height_cm"])["height_cm"]
    for value, flagged in zip(values, flags):
        if np.isnan(value):
            assert not flagged
        else:
            assert flagged == (not is_plausible("height", value))
