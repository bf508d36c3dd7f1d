"""Depth-weighted aggregation of soil layers.

GSDE reports soil properties for eight layers with fixed bottom depths.
A property over a subset of layers is the thickness-weighted mean:

    value = sum(value_i * thickness_i) / sum(thickness_i)
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from ingestr.schemas.validate import require_columns

# Bottom depth (cm) of GSDE layers 1-8
GSDE_LAYER_BOTTOMS = [4.5, 9.1, 16.6, 28.9, 49.3, 82.9, 138.3, 229.6]


def layer_thickness(bottoms: list[float] | None = None) -> pd.DataFrame:
    """Thickness of each layer from cumulative bottom depths.

    Returns:
        DataFrame with columns layer (1-based) and depth (cm)
    """
    if bottoms is None:
        bottoms = GSDE_LAYER_BOTTOMS
    bottom = np.asarray(bottoms, dtype=float)
    top = np.concatenate([[0.0], bottom[:-1]])
    return pd.DataFrame(
        {
            "layer": np.arange(1, len(bottom) + 1),
            "depth": bottom - top,
        }
    )


def aggregate_layers(
    df: pd.DataFrame,
    varnam: str,
    layers: Iterable[int],
    bottoms: list[float] | None = None,
) -> pd.DataFrame:
    """Thickness-weighted mean of `varnam` over the selected layers, per site.

    Args:
        df: Long table with columns sitename, layer, <varnam>
        varnam: Property column to aggregate
        layers: Layer numbers to include
        bottoms: Layer bottom depths (default GSDE)

    Returns:
        DataFrame with columns sitename, <varnam>, one row per site
    """
    require_columns(df.columns, ["sitename", "layer", varnam], dataset="soil_layers")
    selected = {int(x) for x in layers}

    thickness = layer_thickness(bottoms)
    thickness = thickness[thickness["layer"].isin(selected)]
    depth_total = thickness["depth"].sum()

    weighted = (
        df[df["layer"].astype(int).isin(selected)]
        .assign(layer=lambda d: d["layer"].astype(int))
        .merge(thickness, on="layer", how="left")
    )
    weighted["value_wgt"] = weighted[varnam] * weighted["depth"] / depth_total

    return (
        weighted.groupby("sitename", as_index=False, sort=False)["value_wgt"]
        .sum(min_count=1)
        .rename(columns={"value_wgt": varnam})
    )
