"""Tests for validation helper functions."""

from __future__ import annotations

import pandas as pd
import pytest

from ingestr.schemas.daily_drivers import validate_daily_drivers
from ingestr.schemas.validate import (
    require_columns,
    require_date_no_time,
    require_no_nulls,
    require_range,
    require_unique,
)


class TestRequireColumns:
    """Tests for require_columns helper."""

    def test_all_columns_present_passes(self) -> None:
        """Should pass when all required columns are present."""
        require_columns(["sitename", "date", "temp"], ["sitename", "date"])

    def test_missing_column_raises(self) -> None:
        """Should raise and name the missing column."""
        with pytest.raises(ValueError, match=r"Missing columns: \['date'\]"):
            require_columns(["sitename"], ["sitename", "date"])

    def test_dataset_name_in_error(self) -> None:
        """Dataset name should appear in error message."""
        with pytest.raises(ValueError, match=r"\[siteinfo\]"):
            require_columns(["lon"], ["sitename"], dataset="siteinfo")


class TestRequireNoNulls:
    """Tests for require_no_nulls helper."""

    def test_no_nulls_passes(self) -> None:
        df = pd.DataFrame({"sitename": ["A", "B"], "temp": [1.0, 2.0]})
        require_no_nulls(df, ["sitename", "temp"])

    def test_null_raises_with_count(self) -> None:
        """Error message should include count and sample indices."""
        df = pd.DataFrame({"temp": [None, None, 3.0]})
        with pytest.raises(ValueError, match=r"2 rows\) \| sample indices: \[0, 1\]"):
            require_no_nulls(df, ["temp"])

    def test_absent_column_ignored(self) -> None:
        require_no_nulls(pd.DataFrame({"a": [1]}), ["b"])


class TestRequireUnique:
    """Tests for require_unique helper."""

    def test_unique_passes(self) -> None:
        df = pd.DataFrame({"sitename": ["A", "A", "B"], "month": [1, 2, 1]})
        require_unique(df, ["sitename", "month"])

    def test_duplicate_raises(self) -> None:
        """Should raise when a key combination repeats."""
        df = pd.DataFrame({"sitename": ["A", "A"], "month": [1, 1]})
        with pytest.raises(ValueError, match="Duplicate keys"):
            require_unique(df, ["sitename", "month"])

    def test_empty_df_passes(self) -> None:
        """Empty DataFrame should pass."""
        require_unique(pd.DataFrame({"sitename": [], "month": []}), ["sitename", "month"])


class TestRequireRange:
    """Tests for require_range helper."""

    def test_in_range_passes(self) -> None:
        require_range(pd.DataFrame({"lat": [-90.0, 0.0, 90.0]}), "lat", lo=-90, hi=90)

    def test_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match="Out of range"):
            require_range(pd.DataFrame({"lat": [0.0, 91.0]}), "lat", lo=-90, hi=90)

    def test_null_allowed(self) -> None:
        """Nulls should be skipped when allow_null=True."""
        df = pd.DataFrame({"lat": [0.0, None]})
        require_range(df, "lat", lo=-90, hi=90, allow_null=True)


class TestRequireDateNoTime:
    """Tests for require_date_no_time helper."""

    def test_midnight_passes(self) -> None:
        df = pd.DataFrame({"date": pd.date_range("2001-01-01", periods=3, freq="D")})
        require_date_no_time(df, "date")

    def test_time_of_day_raises(self) -> None:
        """Should raise for timestamps carrying a time of day."""
        df = pd.DataFrame(
            {"date": [pd.Timestamp("2001-01-01"), pd.Timestamp("2001-01-02 06:00")]}
        )
        with pytest.raises(ValueError, match="Time component found"):
            require_date_no_time(df, "date")


class TestValidateDailyDrivers:
    """Tests for the daily driver key checks."""

    def test_valid_table(self, make_daily_drivers) -> None:
        validate_daily_drivers(make_daily_drivers())

    def test_duplicate_site_date(self, make_daily_drivers) -> None:
        """The same date twice for one site is rejected."""
        df = make_daily_drivers()
        df = pd.concat([df, df.iloc[[10]]], ignore_index=True)
        with pytest.raises(ValueError, match=r"\[daily_drivers\]Duplicate keys"):
            validate_daily_drivers(df)

    def test_same_date_different_sites(self, make_daily_drivers) -> None:
        df = pd.concat([make_daily_drivers("A"), make_daily_drivers("B")], ignore_index=True)
        validate_daily_drivers(df)

    def test_missing_date_column(self) -> None:
        with pytest.raises(ValueError, match="Missing columns"):
            validate_daily_drivers(pd.DataFrame({"sitename": ["A"], "temp": [1.0]}))
