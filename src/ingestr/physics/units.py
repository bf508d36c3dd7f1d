"""Unit conversions for reference climatologies.

Monthly climatologies report totals and daily sums; the daily driver
schema uses rates per second. Months are taken from a non-leap year.
"""

from __future__ import annotations

import numpy as np

from ingestr.physics.vapor_pressure import ArrayLike

SECONDS_PER_DAY = 60 * 60 * 24

# Days per month of a non-leap year, indexed by month - 1
DAYS_IN_MONTH = np.array([31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31])

# Energy-to-quanta conversion for PAR, mol MJ-1 (Meek et al., 1984)
K_FEC = 2.04


def days_in_month(month: ArrayLike) -> np.ndarray:
    """Number of days in calendar month(s) 1-12 of a non-leap year."""
    return DAYS_IN_MONTH[np.asarray(month, dtype=int) - 1]


def prec_mm_month_to_mm_s(prec: ArrayLike, month: ArrayLike) -> np.ndarray:
    """Convert a monthly precipitation total (mm) to a rate (mm s-1)."""
    return np.asarray(prec, dtype=float) / days_in_month(month) / SECONDS_PER_DAY


def srad_kj_day_to_ppfd(srad: ArrayLike) -> np.ndarray:
    """Convert shortwave radiation (kJ m-2 d-1) to PPFD (mol m-2 s-1)."""
    return 1e3 * np.asarray(srad, dtype=float) * K_FEC * 1.0e-6 / SECONDS_PER_DAY


def kpa_to_pa(value: ArrayLike) -> np.ndarray:
    return np.asarray(value, dtype=float) * 1e3
