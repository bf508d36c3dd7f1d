"""Daily date scaffolds.

The scaffold is the backbone every site series is built on: one row per
calendar day from January 1 of the first year through December 31 of the
last year. Time-invariant sources (annual CO2, constant fAPAR) are
expanded onto it by joining on `year` or by broadcasting a constant.
"""

from __future__ import annotations

import pandas as pd


def init_dates_dataframe(
    year_start: int,
    year_end: int,
    noleap: bool = False,
) -> pd.DataFrame:
    """Build a complete daily calendar for a range of years.

    Args:
        year_start: First year (inclusive)
        year_end: Last year (inclusive)
        noleap: Drop February 29 so every year has 365 days

    Returns:
        DataFrame with columns date, year, month, one row per day,
        strictly increasing in date

    Raises:
        ValueError: If year_end is before year_start
    """
    year_start = int(year_start)
    year_end = int(year_end)
    if year_end < year_start:
        raise ValueError(
            f"year_end ({year_end}) must not be before year_start ({year_start})"
        )

    dates = pd.date_range(
        start=f"{year_start}-01-01",
        end=f"{year_end}-12-31",
        freq="D",
    )
    if noleap:
        dates = dates[~((dates.month == 2) & (dates.day == 29))]

    return pd.DataFrame(
        {
            "date": dates,
            "year": dates.year,
            "month": dates.month,
        }
    )


def expand_bysite(
    sitename: str,
    year_start: int,
    year_end: int,
    noleap: bool = False,
) -> pd.DataFrame:
    """Date scaffold for one site, columns sitename and date."""
    ddf = init_dates_dataframe(year_start, year_end, noleap=noleap)
    ddf.insert(0, "sitename", sitename)
    return ddf[["sitename", "date"]]


def expand_constant_bysite(
    sitename: str,
    year_start: int,
    year_end: int,
    **values: float,
) -> pd.DataFrame:
    """Date scaffold for one site with constant variable columns.

    Example:
        >>> expand_constant_bysite("X", 2001, 2001, fapar=1.0).shape
        (365, 3)
    """
    ddf = expand_bysite(sitename, year_start, year_end)
    for name, value in values.items():
        ddf[name] = value
    return ddf


def expand_co2_bysite(
    df_co2: pd.DataFrame,
    sitename: str,
    year_start: int,
    year_end: int,
) -> pd.DataFrame:
    """Give each day of a site's years the annual CO2 concentration.

    Args:
        df_co2: Annual record with columns year and co2_avg
        sitename: Site identifier
        year_start: First year (inclusive)
        year_end: Last year (inclusive)

    Returns:
        DataFrame with columns sitename, date, co2. Years missing from
        the record get NaN.
    """
    annual = df_co2[["year", "co2_avg"]].drop_duplicates(subset="year")

    ddf = init_dates_dataframe(year_start, year_end).merge(
        annual,
        on="year",
        how="left",
    )
    ddf.insert(0, "sitename", sitename)
    return ddf[["sitename", "date", "co2_avg"]].rename(columns={"co2_avg": "co2"})
