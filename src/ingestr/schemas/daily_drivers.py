"""Daily driver schema.

This is the table every source is reshaped into before grouping by site.

Key rules:
- (sitename, date) is the primary key; a date appears once per site
- date is a calendar day stored as a midnight timestamp
- variable columns use the standard names below, in model units

Sources only fill the variables they provide, so none of the variable
columns is required.
"""

from __future__ import annotations

from typing import TypedDict

import pandas as pd

from ingestr.schemas.validate import (
    require_columns,
    require_date_no_time,
    require_no_nulls,
    require_unique,
)


class DailyDriver(TypedDict, total=False):
    """One site-day of forcing data."""

    sitename: str
    date: pd.Timestamp
    temp: float  # Daily mean air temperature, deg C
    tmin: float  # Daily minimum air temperature, deg C
    tmax: float  # Daily maximum air temperature, deg C
    prec: float  # Precipitation (rain + snow), mm s-1
    rain: float  # Liquid precipitation, mm s-1
    snow: float  # Solid precipitation, mm s-1
    patm: float  # Atmospheric pressure, Pa
    qair: float  # Specific humidity, kg kg-1
    vapr: float  # Actual vapor pressure, Pa
    vpd: float  # Vapor pressure deficit, Pa
    wind: float  # Wind speed, m s-1
    ppfd: float  # Photosynthetic photon flux density, mol m-2 s-1
    netrad: float  # Net radiation, W m-2
    swin: float  # Shortwave incoming radiation, W m-2
    co2: float  # Atmospheric CO2, ppm
    fapar: float  # Fraction of absorbed PAR, unitless


KEY_COLUMNS = ["sitename", "date"]

# Standard variable vocabulary, in the order columns are reported
DRIVER_VARIABLES = [
    "temp",
    "tmin",
    "tmax",
    "prec",
    "rain",
    "snow",
    "patm",
    "qair",
    "vapr",
    "vpd",
    "wind",
    "ppfd",
    "netrad",
    "swin",
    "co2",
    "fapar",
]

DAILY_DRIVER_FIELDS = KEY_COLUMNS + DRIVER_VARIABLES

_DATASET_NAME = "daily_drivers"


def validate_daily_drivers(df: pd.DataFrame) -> None:
    """Validate the primary-key invariants of a daily driver table.

    Checks performed:
    - sitename and date present and non-null
    - (sitename, date) unique
    - date has no time component

    Raises:
        ValueError: If any check fails
    """
    require_columns(df.columns, KEY_COLUMNS, dataset=_DATASET_NAME)

    if df.empty:
        return

    require_no_nulls(df, KEY_COLUMNS, dataset=_DATASET_NAME)
    require_unique(df, KEY_COLUMNS, dataset=_DATASET_NAME)
    require_date_no_time(df, "date", dataset=_DATASET_NAME)
