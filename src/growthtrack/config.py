"""
Configuration constants for growth percentile and measurement calculations.
"""

# Reference data
REFERENCE_PACKAGE = "growthtrack.data"
REFERENCE_FILE = "who_lms_0_24m.csv"
SEXES = ("male", "female")
MEASUREMENT_TYPES = ("weight", "height", "head")

# LMS / percentile estimator
L_ZERO_THRESHOLD = 1e-6
PERCENTILE_MIN = 0.1
PERCENTILE_MAX = 99.9
FALLBACK_PERCENTILE = 50.0

# Age handling
FALLBACK_AGE_IN_DAYS = 0
DAYS_PER_MONTH = 30
MONTHS_PER_YEAR = 12
DATE_DISPLAY_FORMAT = "%b %d, %Y"  # e.g. "Jan 05, 2024"

# Unit conversion
LB_PER_KG = 2.20462
CM_PER_INCH = 2.54
UNITS = ("metric", "imperial")

# Plausibility gates (exclusive on both sides), SI units
MEASUREMENT_RANGES = {
    "weight": {"min": 0.0, "max": 50.0},
    "height": {"min": 0.0, "max": 200.0},
    "head": {"min": 0.0, "max": 80.0},
}

# Input-time bounds used for form messages (inclusive), per unit system
FORM_RANGES = {
    "metric": {
        "weight": (0.5, 50.0, "kg"),
        "height": (20.0, 200.0, "cm"),
        "head": (20.0, 80.0, "cm"),
    },
    "imperial": {
        "weight": (1.0, 110.0, "lbs"),
        "height": (8.0, 79.0, "inches"),
        "head": (8.0, 31.0, "inches"),
    },
}

# Trend classification
TREND_THRESHOLD_PCT = 2.0

# Record columns
MEASUREMENT_COLUMNS = {
    "weight": "weight_kg",
    "height": "height_cm",
    "head": "head_cm",
}
PERCENTILE_COLUMNS = {
    "weight": "weight_percentile",
    "height": "height_percentile",
    "head": "head_percentile",
}
