"""Monthly bias correction against a fine-resolution climatology.

The ingested daily series is compared, site by site and month by month,
with a long-term monthly reference (WorldClim layout: one row per site,
columns <layer>_<month>). Each variable gets its own correction:

    temp            additive        temp - (mean - ref)
    prec/rain/snow  multiplicative  x * ref / mean   (same factor for all three)
    ppfd            multiplicative  reference from srad
    wind            multiplicative
    vapr            multiplicative  recomputed from qair, temp, patm first
                                    (patm from site elevation if absent)

VPD, when requested, is recomputed last from the corrected vapor
pressure and temperature.

A site-month whose ingested mean is zero or undefined, or which has no
reference value, is left as is (bias 0, scale 1).
"""

from __future__ import annotations

import re
import warnings
from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from ingestr.physics.units import kpa_to_pa, prec_mm_month_to_mm_s, srad_kj_day_to_ppfd
from ingestr.physics.vapor_pressure import calc_vp, calc_vpd
from ingestr.schemas.validate import require_columns, require_unique

# Requested standard variable -> reference layer, in correction order
WORLDCLIM_LAYERS = {
    "temp": "tavg",
    "prec": "prec",
    "ppfd": "srad",
    "wind": "wind",
    "vpd": "vapr",
}

_KEYS = ["sitename", "month"]


def worldclim_layers(getvars: Iterable[str]) -> list[str]:
    """Reference layers needed to correct the requested variables."""
    requested = set(getvars)
    return [layer for var, layer in WORLDCLIM_LAYERS.items() if var in requested]


def available_layers(df_fine: pd.DataFrame) -> set[str]:
    """Layers for which the reference table has monthly columns."""
    found = set()
    for col in df_fine.columns:
        match = re.fullmatch(r"([a-z]+)_(\d{1,2})", str(col))
        if match:
            found.add(match.group(1))
    return found


def fine_to_long(df_fine: pd.DataFrame, layer: str) -> pd.DataFrame:
    """Reshape <layer>_<month> columns to rows.

    Returns:
        DataFrame with columns sitename, month (1-12), <layer>_fine
    """
    pattern = re.compile(rf"{re.escape(layer)}_(\d{{1,2}})")
    cols = [c for c in df_fine.columns if pattern.fullmatch(str(c))]
    value_col = f"{layer}_fine"

    long = df_fine.melt(
        id_vars="sitename",
        value_vars=cols,
        var_name="month",
        value_name=value_col,
    )
    long["month"] = long["month"].str.slice(len(layer) + 1).astype(int)
    require_unique(long, _KEYS, dataset=f"worldclim_{layer}")
    return long[_KEYS + [value_col]]


def monthly_means(ddf: pd.DataFrame, col: str) -> pd.DataFrame:
    """Mean of `col` per site and calendar month (NaNs skipped)."""
    return (
        ddf.assign(month=ddf["date"].dt.month.astype(int))
        .groupby(_KEYS, as_index=False)[col]
        .mean()
    )


def additive_bias(ddf: pd.DataFrame, fine: pd.DataFrame, col: str, fine_col: str) -> pd.DataFrame:
    """Monthly offset `mean - reference` per site; missing pairs give 0."""
    df = monthly_means(ddf, col).merge(fine, on=_KEYS, how="left")
    df["bias"] = (df[col] - df[fine_col]).fillna(0.0)
    return df[_KEYS + ["bias"]]


def multiplicative_scale(
    ddf: pd.DataFrame,
    fine: pd.DataFrame,
    col: str,
    fine_col: str,
) -> pd.DataFrame:
    """Monthly factor `reference / mean` per site.

    Zero or undefined means and missing references give 1.0 (no correction).
    """
    df = monthly_means(ddf, col).merge(fine, on=_KEYS, how="left")
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = df[fine_col] / df[col]
    valid = np.isfinite(scale) & (df[col] != 0)
    df["scale"] = scale.where(valid, 1.0)
    return df[_KEYS + ["scale"]]


def _factor_by_row(ddf: pd.DataFrame, factors: pd.DataFrame, name: str, fill: float) -> np.ndarray:
    # Left merge on unique keys keeps the row order and count of ddf.
    keys = pd.DataFrame(
        {
            "sitename": ddf["sitename"].to_numpy(),
            "month": ddf["date"].dt.month.astype(int).to_numpy(),
        }
    )
    merged = keys.merge(factors[_KEYS + [name]], on=_KEYS, how="left")
    return merged[name].fillna(fill).to_numpy()


def apply_additive(ddf: pd.DataFrame, cols: Iterable[str], bias: pd.DataFrame) -> pd.DataFrame:
    """Subtract the monthly `bias` from each of `cols`."""
    out = ddf.copy()
    offset = _factor_by_row(out, bias, "bias", 0.0)
    for col in cols:
        out[col] = out[col] - offset
    return out


def apply_multiplicative(ddf: pd.DataFrame, cols: Iterable[str], scale: pd.DataFrame) -> pd.DataFrame:
    """Multiply each of `cols` by the monthly `scale`."""
    out = ddf.copy()
    factor = _factor_by_row(out, scale, "scale", 1.0)
    for col in cols:
        out[col] = out[col] * factor
    return out


def _column_or_nan(ddf: pd.DataFrame, col: str) -> np.ndarray:
    if col in ddf.columns:
        return ddf[col].to_numpy(dtype=float)
    return np.full(len(ddf), np.nan)


def _elevation_by_row(ddf: pd.DataFrame, siteinfo: pd.DataFrame | None) -> np.ndarray:
    """Site elevation for each row of `ddf`, NaN where unknown."""
    if siteinfo is None or "elv" not in siteinfo.columns:
        return np.full(len(ddf), np.nan)
    elv = siteinfo.set_index("sitename")["elv"]
    return ddf["sitename"].map(elv).to_numpy(dtype=float)


def _report(layer: str, factors: pd.DataFrame, name: str, neutral: float) -> None:
    uncorrected = int((factors[name] == neutral).sum())
    print(
        f"[bias] {layer}: {len(factors)} site-months, "
        f"{uncorrected} left uncorrected"
    )


def correct_bias_worldclim(
    ddf: pd.DataFrame,
    df_fine: pd.DataFrame,
    getvars: Mapping[str, str] | Iterable[str],
    siteinfo: pd.DataFrame | None = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """Correct daily drivers against a monthly reference climatology.

    Args:
        ddf: Daily drivers with sitename, date and the requested variables
        df_fine: Reference table, one row per site, columns <layer>_<month>
            in source units (tavg deg C, prec mm month-1, srad kJ m-2 d-1,
            wind m s-1, vapr kPa)
        getvars: Requested standard variables (mapping keys or names)
        siteinfo: Site table with sitename and elv; where patm is absent,
            vapor pressure uses the pressure implied by elevation
        verbose: Print a summary per corrected variable

    Returns:
        Corrected copy of `ddf`, same rows in the same order. Variables
        whose layer is absent from `df_fine` are not touched.
    """
    require_columns(ddf.columns, ["sitename", "date"], dataset="daily_drivers")
    require_columns(df_fine.columns, ["sitename"], dataset="worldclim")

    requested = list(getvars)
    layers = [layer for layer in worldclim_layers(requested) if layer in available_layers(df_fine)]
    out = ddf.copy()

    if "tavg" in layers and "temp" in out.columns:
        fine = fine_to_long(df_fine, "tavg")
        bias = additive_bias(out, fine, "temp", "tavg_fine")
        out = apply_additive(out, ["temp"], bias)
        if verbose:
            _report("tavg", bias, "bias", 0.0)

    if "prec" in layers and "prec" in out.columns:
        fine = fine_to_long(df_fine, "prec")
        fine["prec_fine"] = prec_mm_month_to_mm_s(fine["prec_fine"], fine["month"])
        scale = multiplicative_scale(out, fine, "prec", "prec_fine")
        out = apply_multiplicative(
            out, [c for c in ("prec", "rain", "snow") if c in out.columns], scale
        )
        if verbose:
            _report("prec", scale, "scale", 1.0)

    if "srad" in layers and "ppfd" in out.columns:
        fine = fine_to_long(df_fine, "srad")
        fine["ppfd_fine"] = srad_kj_day_to_ppfd(fine["srad_fine"])
        scale = multiplicative_scale(out, fine, "ppfd", "ppfd_fine")
        out = apply_multiplicative(out, ["ppfd"], scale)
        if verbose:
            _report("srad", scale, "scale", 1.0)

    if "wind" in layers and "wind" in out.columns:
        fine = fine_to_long(df_fine, "wind")
        scale = multiplicative_scale(out, fine, "wind", "wind_fine")
        out = apply_multiplicative(out, ["wind"], scale)
        if verbose:
            _report("wind", scale, "scale", 1.0)

    if "vpd" in requested:
        if {"qair", "temp"} <= set(out.columns):
            out["vapr"] = calc_vp(
                qair=out["qair"].to_numpy(dtype=float),
                tc=out["temp"].to_numpy(dtype=float),
                patm=_column_or_nan(out, "patm"),
                elv=_elevation_by_row(out, siteinfo),
            )
        elif "vapr" not in out.columns:
            warnings.warn(
                "correct_bias_worldclim(): vpd requested but neither vapr nor "
                "qair and temp are available; vpd is not recomputed",
                UserWarning,
                stacklevel=2,
            )

    if "vapr" in layers and "vapr" in out.columns:
        fine = fine_to_long(df_fine, "vapr")
        fine["vapr_fine"] = kpa_to_pa(fine["vapr_fine"])
        scale = multiplicative_scale(out, fine, "vapr", "vapr_fine")
        out = apply_multiplicative(out, ["vapr"], scale)
        if verbose:
            _report("vapr", scale, "scale", 1.0)

    if "vpd" in requested and {"vapr", "temp"} <= set(out.columns):
        out["vpd"] = calc_vpd(
            out["vapr"].to_numpy(dtype=float),
            tc=out["temp"].to_numpy(dtype=float),
        )

    return out
