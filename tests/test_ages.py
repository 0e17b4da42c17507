import logging

import pandas as pd
import pytest
from hypothesis import given, strategies as st, settings

from growthtrack.ages import calculate_age_in_days, format_age, format_date, parse_date


class TestCalculateAgeInDays:
    def test_tc001_whole_days(self) -> None:
        assert calculate_age_in_days("2024-01-01", "2024-01-31") == 30
        assert calculate_age_in_days("2024-01-01", "2025-01-01") == 366

    def test_tc015_leap_year(self) -> None:
        assert calculate_age_in_days("2020-02-28", "2020-03-01") == 2
        assert calculate_age_in_days("invalid", "invalid") == 0

    def test_tc002_same_day(self) -> None:
        assert calculate_age_in_days("2024-03-10", "2024-03-10") == 0

    def test_tc003_time_of_day_is_ignored(self) -> None:
        assert calculate_age_in_days("2024-01-01T23:30:00", "2024-01-02T00:10:00") == 1
        assert calculate_age_in_days("2024-01-01T23:30:00Z", "2024-01-02") == 1

    def test_tc004_offset_keeps_written_date(self) -> None:
        assert calculate_age_in_days("2024-01-01", "2024-01-15T01:00:00+05:00") == 14

    def test_tc005_negative_when_measured_before_birth(self) -> None:
        assert calculate_age_in_days("2024-01-10", "2024-01-05") == -5

    @pytest.mark.parametrize(
        "birth, measured", [("not-a-date", "2024-01-01"), ("2024-01-01", ""), (None, "2024-01-01")]
    )
    def test_tc006_invalid_date_falls_back_to_zero(self, birth, measured, caplog) -> None:
        caplog.set_level(logging.WARNING)
        assert calculate_age_in_days(birth, measured) == 0
        assert "Invalid date format" in caplog.text

    def test_tc007_accepts_timestamps(self) -> None:
        assert calculate_age_in_days(pd.Timestamp("2024-02-01"), "2024-03-01") == 29


class TestParseDate:
    def test_tc008_midnight(self) -> None:
        assert parse_date("2024-05-06T13:14:15") == pd.Timestamp("2024-05-06")

    def test_tc009_invalid(self) -> None:
        assert parse_date("2024-13-45") is None
        assert parse_date("yesterday") is None


class TestFormatAge:
    @pytest.mark.parametrize(
        "days, expected",
        [
            (0, "0 days"),
            (1, "1 day"),
            (15, "15 days"),
            (29, "29 days"),
            (30, "1 month"),
            (45, "1m 15d"),
            (60, "2 months"),
            (100, "3m 10d"),
            (359, "11m 29d"),
            (360, "1 year"),
            (365, "1 year"),
            (395, "1y 1m"),
            (730, "2 years"),
        ],
    )
    def test_tc010_examples(self, days: int, expected: str) -> None:
        assert format_age(days) == expected

    def test_tc011_negative_reads_zero_days(self) -> None:
        assert format_age(-3) == "0 days"


class TestFormatDate:
    def test_tc012_display_form(self) -> None:
        assert format_date("2024-01-05") == "Jan 05, 2024"
        assert format_date("2023-12-25T08:00:00Z") == "Dec 25, 2023"

    def test_tc013_invalid_returned_unchanged(self) -> None:
        assert format_date("someday") == "someday"


@settings(max_examples=100, deadline=None)
@given(
    birth=st.dates(min_value=pd.Timestamp("1990-01-01").date(), max_value=pd.Timestamp("2100-01-01").date()),
    offset=st.integers(min_value=-1000, max_value=3000),
)
def test_tc014_hypothesis_age_matches_offset(birth, offset: int) -> None:  # type: ignore[no-untyped-def]
    measured = pd.Timestamp(birth) + pd.Timedelta(days=offset)
    assert calculate_age_in_days(birth.isoformat(), measured.date().isoformat()) == offset
