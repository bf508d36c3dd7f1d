"""Aggregation: soil layer weighting and per-site grouping."""

from ingestr.aggregate.collect import bind_rows, collect_sites
from ingestr.aggregate.soil_layers import (
    GSDE_LAYER_BOTTOMS,
    aggregate_layers,
    layer_thickness,
)

__all__ = [
    "bind_rows",
    "collect_sites",
    "GSDE_LAYER_BOTTOMS",
    "aggregate_layers",
    "layer_thickness",
]
