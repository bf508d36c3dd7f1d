"""Group a flat driver table into one series per site.

The final pipeline output is a dict sitename -> DataFrame. Time series
are sorted by date (stable, so rows with equal dates keep their order)
and checked for duplicate (sitename, date) keys before grouping.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from ingestr.schemas.daily_drivers import validate_daily_drivers
from ingestr.schemas.validate import require_columns


def bind_rows(frames: Iterable[pd.DataFrame]) -> pd.DataFrame:
    """Concatenate partial tables, tolerating an empty list."""
    frames = [f for f in frames if f is not None]
    if not frames:
        return pd.DataFrame(columns=["sitename"])
    return pd.concat(frames, ignore_index=True, sort=False)


def collect_sites(ddf: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """Split a flat table into per-site tables keyed by sitename.

    Sites appear in order of first occurrence. The sitename column is
    dropped from the per-site tables.

    Raises:
        ValueError: If sitename is missing, or (sitename, date) is not unique
    """
    require_columns(ddf.columns, ["sitename"], dataset="ingest")

    has_dates = "date" in ddf.columns
    if has_dates:
        validate_daily_drivers(ddf)

    out: dict[str, pd.DataFrame] = {}
    for sitename, group in ddf.groupby("sitename", sort=False):
        if has_dates:
            group = group.sort_values("date", kind="mergesort")
        out[sitename] = group.drop(columns="sitename").reset_index(drop=True)
    return out
