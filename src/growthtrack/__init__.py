"""
Infant growth percentiles against the WHO Child Growth Standards (0-24 months).

Pure functions for age calculation and display, unit conversion, the LMS
percentile estimator, measurement plausibility gates and trend buckets.
"""

from .ages import calculate_age_in_days, format_age, format_date
from .measurements import (
    BabyProfile,
    Measurement,
    MeasurementType,
    Sex,
    Unit,
    annotate_percentiles,
    form_value_error,
    history_frame,
    measurement_date_error,
    record_measurement,
)
from .methods.range.detector import RangeDetector, is_plausible, validate_measurement
from .reference import (
    ReferencePoint,
    ReferenceTable,
    as_series,
    iter_points,
    load_reference_table,
    validate_reference_integrity,
)
from .trends import Trend, get_measurement_trend, measurement_trends
from .units import (
    cm_to_in,
    convert_height,
    convert_weight,
    from_metric,
    in_to_cm,
    kg_to_lb,
    lb_to_kg,
    to_metric,
)
from .zscores import (
    PercentileResult,
    calculate_percentile,
    calculate_percentiles,
    estimate_percentile,
    interpolate_lms,
    lms_value,
    lms_zscore,
    median_curve,
    normal_cdf,
    percentile_curve,
)

__all__ = [
    "BabyProfile",
    "Measurement",
    "MeasurementType",
    "PercentileResult",
    "RangeDetector",
    "ReferencePoint",
    "ReferenceTable",
    "Sex",
    "Trend",
    "Unit",
    "annotate_percentiles",
    "as_series",
    "calculate_age_in_days",
    "calculate_percentile",
    "calculate_percentiles",
    "cm_to_in",
    "convert_height",
    "convert_weight",
    "estimate_percentile",
    "form_value_error",
    "format_age",
    "format_date",
    "from_metric",
    "get_measurement_trend",
    "history_frame",
    "in_to_cm",
    "interpolate_lms",
    "iter_points",
    "is_plausible",
    "kg_to_lb",
    "lb_to_kg",
    "lms_value",
    "lms_zscore",
    "load_reference_table",
    "measurement_date_error",
    "measurement_trends",
    "median_curve",
    "normal_cdf",
    "percentile_curve",
    "record_measurement",
    "to_metric",
    "validate_measurement",
    "validate_reference_integrity",
]
