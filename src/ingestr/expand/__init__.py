"""Expansion of time-invariant sources onto daily date scaffolds."""

from ingestr.expand.dates import (
    expand_bysite,
    expand_co2_bysite,
    expand_constant_bysite,
    init_dates_dataframe,
)

__all__ = [
    "init_dates_dataframe",
    "expand_bysite",
    "expand_constant_bysite",
    "expand_co2_bysite",
]
