"""Bias correction of ingested driver series."""

from ingestr.bias.pressure import correct_patm_bias, patm_scale_by_site
from ingestr.bias.worldclim import (
    WORLDCLIM_LAYERS,
    additive_bias,
    apply_additive,
    apply_multiplicative,
    correct_bias_worldclim,
    fine_to_long,
    monthly_means,
    multiplicative_scale,
    worldclim_layers,
)

__all__ = [
    "correct_patm_bias",
    "patm_scale_by_site",
    "WORLDCLIM_LAYERS",
    "additive_bias",
    "apply_additive",
    "apply_multiplicative",
    "correct_bias_worldclim",
    "fine_to_long",
    "monthly_means",
    "multiplicative_scale",
    "worldclim_layers",
]
