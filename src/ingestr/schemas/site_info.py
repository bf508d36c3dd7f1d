"""Site metadata schema.

One row per site. `sitename` is the key everything else joins on.

Temporal coverage comes in two interchangeable forms:
- date_start / date_end (calendar dates)
- year_start / year_end (integers; Jan 1 and Dec 31 are implied)

Either form is enough for each boundary; normalize_siteinfo derives the
other one.
"""

from __future__ import annotations

from typing import TypedDict

import pandas as pd

from ingestr.schemas.validate import (
    require_columns,
    require_no_nulls,
    require_range,
    require_unique,
)


class SiteInfo(TypedDict):
    """Metadata for one simulation site."""

    sitename: str  # Unique site identifier (e.g., "CH-Lae")
    lon: float  # Longitude, degrees east
    lat: float  # Latitude, degrees north
    elv: float  # Elevation above sea level, m
    date_start: pd.Timestamp  # First day of the series
    date_end: pd.Timestamp  # Last day of the series
    year_start: int
    year_end: int


SITEINFO_FIELDS = [
    "sitename",
    "lon",
    "lat",
    "elv",
    "date_start",
    "date_end",
    "year_start",
    "year_end",
]

# Only the key is needed by every source; coordinates are adapter business.
REQUIRED_COLUMNS = ["sitename"]

_DATASET_NAME = "siteinfo"


def validate_siteinfo(df: pd.DataFrame) -> None:
    """Validate that a site table can be ingested.

    Checks performed:
    - sitename present, non-null and unique
    - lon in [-180, 180] and lat in [-90, 90] where given

    Raises:
        ValueError: If any check fails
    """
    require_columns(df.columns, REQUIRED_COLUMNS, dataset=_DATASET_NAME)

    if df.empty:
        return

    require_no_nulls(df, ["sitename"], dataset=_DATASET_NAME)
    require_unique(df, ["sitename"], dataset=_DATASET_NAME)
    require_range(df, "lon", lo=-180, hi=180, allow_null=True, dataset=_DATASET_NAME)
    require_range(df, "lat", lo=-90, hi=90, allow_null=True, dataset=_DATASET_NAME)
