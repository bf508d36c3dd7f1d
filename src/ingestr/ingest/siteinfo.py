"""Site metadata normalization.

Each temporal boundary can be given as a date or as a year. After
normalization both forms are present:

    year_start <- year(date_start)       date_start <- Jan 1 of year_start
    year_end   <- year(date_end)         date_end   <- Dec 31 of year_end

Each site may use a different form. A boundary given in neither form,
for any site, is a fatal input error.
"""

from __future__ import annotations

import pandas as pd

from ingestr.errors import SiteInfoError
from ingestr.schemas.site_info import validate_siteinfo

_BOUNDARIES = (
    # (year column, date column, month-day used when deriving the date)
    ("year_start", "date_start", "01-01"),
    ("year_end", "date_end", "12-31"),
)


def _missing_pair_message(year_col: str, date_col: str) -> str:
    return (
        f"ingest(): Columns '{year_col}' and '{date_col}' missing in object "
        "provided by argument 'siteinfo'"
    )


def normalize_siteinfo(siteinfo: pd.DataFrame) -> pd.DataFrame:
    """Complete the date and year columns of a site table.

    Args:
        siteinfo: Site table with sitename and, per boundary, a year or a
            date column

    Returns:
        New DataFrame with date_start, date_end (midnight timestamps) and
        year_start, year_end (int) all present. The input is not modified.

    Raises:
        SiteInfoError: If a boundary has neither its year nor its date,
            either as a column or for a single site
        ValueError: If sitename is missing or not unique
    """
    validate_siteinfo(siteinfo)
    df = siteinfo.copy()

    for year_col, date_col, month_day in _BOUNDARIES:
        if year_col not in df.columns and date_col not in df.columns:
            raise SiteInfoError(_missing_pair_message(year_col, date_col))

        if date_col in df.columns:
            dates = pd.to_datetime(df[date_col]).dt.normalize()
        else:
            dates = pd.Series(pd.NaT, index=df.index, dtype="datetime64[ns]")
        if year_col in df.columns:
            years = pd.to_numeric(df[year_col], errors="coerce")
        else:
            years = pd.Series(float("nan"), index=df.index)

        years = years.fillna(dates.dt.year)
        implied = pd.to_datetime(
            years.astype("Int64").astype(str) + "-" + month_day,
            format="%Y-%m-%d",
            errors="coerce",
        )
        dates = dates.fillna(implied)

        missing = years.isna() | dates.isna()
        if missing.any():
            raise SiteInfoError(
                _missing_pair_message(year_col, date_col)
                + f" for sites {df.loc[missing, 'sitename'].tolist()}"
            )

        df[year_col] = years.astype(int)
        df[date_col] = dates

    bad = df["year_end"] < df["year_start"]
    if bad.any():
        raise SiteInfoError(
            "ingest(): year_end before year_start for sites "
            f"{df.loc[bad, 'sitename'].tolist()}"
        )

    return df
