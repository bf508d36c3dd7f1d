"""Elevation-anchored atmospheric pressure correction.

Coarse reanalysis cells rarely sit at the elevation of the site, which
biases their surface pressure. Each site's pressure series is rescaled
so that its mean equals the standard-atmosphere pressure at the site's
elevation; day-to-day variations keep their relative shape.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from ingestr.physics.vapor_pressure import calc_patm
from ingestr.schemas.validate import require_columns


def patm_scale_by_site(ddf: pd.DataFrame, siteinfo: pd.DataFrame) -> pd.Series:
    """Per-site factor calc_patm(elv) / mean(patm).

    Sites whose mean pressure is zero or undefined, or whose elevation is
    unknown, get a factor of 1.0.

    Returns:
        Series of scale factors indexed by sitename
    """
    patm_base = pd.Series(
        np.asarray(calc_patm(siteinfo["elv"].to_numpy(dtype=float)), dtype=float).reshape(-1),
        index=siteinfo["sitename"].to_numpy(),
    )
    patm_mean = ddf.groupby("sitename")["patm"].mean()
    patm_base = patm_base.reindex(patm_mean.index)

    with np.errstate(divide="ignore", invalid="ignore"):
        scale = patm_base / patm_mean
    valid = np.isfinite(scale) & (patm_mean != 0)
    return scale.where(valid, 1.0)


def correct_patm_bias(
    ddf: pd.DataFrame,
    siteinfo: pd.DataFrame,
    verbose: bool = False,
) -> pd.DataFrame:
    """Rescale each site's pressure to its elevation-implied mean.

    Args:
        ddf: Daily drivers with sitename and patm (Pa)
        siteinfo: Site table with sitename and elv (m)
        verbose: Print per-site factors

    Returns:
        Copy of `ddf` with corrected patm; rows and order unchanged
    """
    require_columns(ddf.columns, ["sitename", "patm"], dataset="daily_drivers")
    require_columns(siteinfo.columns, ["sitename", "elv"], dataset="siteinfo")

    scale = patm_scale_by_site(ddf, siteinfo)
    if verbose:
        for sitename, factor in scale.items():
            print(f"[bias] patm scale for {sitename}: {factor:.4f}")

    out = ddf.copy()
    out["patm"] = out["patm"] * out["sitename"].map(scale).to_numpy()
    return out
