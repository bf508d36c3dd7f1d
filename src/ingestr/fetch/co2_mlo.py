"""Fetch the Mauna Loa atmospheric CO2 record from NOAA GML.

The monthly mean record is downloaded once and cached on disk; the
pipeline uses annual means, which are the same at every site.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
import requests

from ingestr.config import co2_cache_path

if TYPE_CHECKING:
    from ingestr.ingest.adapters import AdapterRequest

CO2_MM_MLO_URL = "https://gml.noaa.gov/webdata/ccgg/trends/co2/co2_mm_mlo.csv"

# Older releases flag missing monthly means with negative fill values
_MISSING_THRESHOLD = 0.0


def download_csv(
    url: str,
    out_path: Path,
    force: bool = False,
    use_cache: bool = True,
) -> Path:
    if use_cache and out_path.exists() and not force:
        return out_path
    out_path.parent.mkdir(parents=True, exist_ok=True)
    response = requests.get(url, stream=True, timeout=60)
    response.raise_for_status()
    tmp_path = out_path.with_suffix(".csv.tmp")
    try:
        with tmp_path.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=1024 * 1024):
                if chunk:
                    handle.write(chunk)
        tmp_path.replace(out_path)
    finally:
        tmp_path.unlink(missing_ok=True)
    return out_path


def parse_co2_mm_mlo(text: str) -> pd.DataFrame:
    """Parse the NOAA monthly CO2 CSV into year, month, co2 columns.

    Comment lines start with '#'. Negative monthly means are fill values
    and become NaN.
    """
    raw = pd.read_csv(io.StringIO(text), comment="#", skipinitialspace=True)
    raw.columns = [str(col).strip().lower() for col in raw.columns]

    df = pd.DataFrame(
        {
            "year": raw["year"].astype(int),
            "month": raw["month"].astype(int),
            "co2": pd.to_numeric(raw["average"], errors="coerce"),
        }
    )
    df.loc[df["co2"] < _MISSING_THRESHOLD, "co2"] = float("nan")
    return df


def annual_co2(df_monthly: pd.DataFrame) -> pd.DataFrame:
    """Average a monthly CO2 record to one value per year (NaNs skipped)."""
    return (
        df_monthly.groupby("year", as_index=False)["co2"]
        .mean()
        .rename(columns={"co2": "co2_avg"})
    )


def fetch_co2_mlo(
    cache_path: Path | str | None = None,
    force: bool = False,
    verbose: bool = False,
) -> pd.DataFrame:
    """Fetch the Mauna Loa record and return annual means.

    Args:
        cache_path: Where to keep the downloaded CSV (default under data/raw)
        force: Re-download even if the cache exists
        verbose: Print progress

    Returns:
        DataFrame with columns year, co2_avg (ppm)

    Raises:
        requests.HTTPError: If the download fails
    """
    path = Path(cache_path) if cache_path else co2_cache_path()
    if verbose:
        print(f"[co2_mlo] reading {CO2_MM_MLO_URL} (cache: {path})")
    download_csv(CO2_MM_MLO_URL, path, force=force)
    df = annual_co2(parse_co2_mm_mlo(path.read_text(encoding="utf-8")))
    if verbose:
        print(f"[co2_mlo] {len(df)} years, {df['year'].min()}-{df['year'].max()}")
    return df


def co2_mlo_adapter(sites: pd.DataFrame, request: AdapterRequest) -> pd.DataFrame:
    """Adapter for Source.CO2_MLO; the record is global, `sites` is unused.

    A `data_dir` in the request points at a directory holding the cached CSV.
    """
    cache_path = Path(request.data_dir) / "co2_mm_mlo.csv" if request.data_dir else None
    return fetch_co2_mlo(cache_path=cache_path)
