"""Physical unit functions: vapor pressure, VPD, pressure, conversions."""

from ingestr.physics.units import (
    K_FEC,
    days_in_month,
    kpa_to_pa,
    prec_mm_month_to_mm_s,
    srad_kj_day_to_ppfd,
)
from ingestr.physics.vapor_pressure import (
    calc_esat,
    calc_patm,
    calc_vp,
    calc_vp_inst,
    calc_vpd,
    calc_vpd_inst,
)

__all__ = [
    "calc_esat",
    "calc_patm",
    "calc_vp",
    "calc_vp_inst",
    "calc_vpd",
    "calc_vpd_inst",
    "K_FEC",
    "days_in_month",
    "kpa_to_pa",
    "prec_mm_month_to_mm_s",
    "srad_kj_day_to_ppfd",
]
