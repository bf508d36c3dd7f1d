"""Vapor pressure, vapor pressure deficit and standard-atmosphere pressure.

All functions are vectorized: they accept scalars, numpy arrays or pandas
Series and broadcast them against each other. Scalar inputs give a float,
anything else gives a numpy array, so results can be assigned straight
back into a DataFrame column.

Units follow the daily driver schema: deg C, Pa, kg kg-1, m.

References:
- Abtew and Melesse (2013), Evaporation and Evapotranspiration:
  Measurements and Estimations, Ch. 5, Eq. 5.1
- Allen (1973) for the universal gas constant
- Tsilingiris (2008) for molecular weights of water vapor and dry air
"""

from __future__ import annotations

import warnings
from typing import Callable, Union

import numpy as np
import pandas as pd

ArrayLike = Union[float, np.ndarray, pd.Series]

# Universal gas constant, J mol-1 K-1 (Allen, 1973)
K_R_VP = 8.3143
# Molecular weight of water vapor, g mol-1 (Tsilingiris, 2008)
K_MV = 18.02
# Molecular weight of dry air, g mol-1 (Tsilingiris, 2008)
K_MA_VP = 28.963

# Standard atmosphere (Berberan-Santos et al., 1997)
K_PO = 101325.0  # sea level pressure, Pa
K_TO = 298.15  # base temperature, K
K_L = 0.0065  # temperature lapse rate, K m-1
K_G = 9.80665  # gravitational acceleration, m s-2
K_R = 8.3145  # universal gas constant, J mol-1 K-1
K_MA = 0.028963  # molecular weight of dry air, kg mol-1


def _as_array(value: ArrayLike | None) -> np.ndarray:
    if value is None:
        return np.asarray(np.nan)
    return np.asarray(value, dtype=float)


def _unwrap(result: np.ndarray) -> float | np.ndarray:
    if result.ndim == 0:
        return float(result)
    return result


def _minmax_mean(
    evaluate: Callable[[np.ndarray], np.ndarray],
    tc: np.ndarray,
    tmin: np.ndarray,
    tmax: np.ndarray,
) -> np.ndarray:
    """Mean of evaluations at tmin and tmax where both exist, else at tc."""
    has_minmax = ~np.isnan(tmin) & ~np.isnan(tmax)
    at_minmax = 0.5 * (evaluate(tmin) + evaluate(tmax))
    return np.where(has_minmax, at_minmax, evaluate(tc))


def calc_patm(elv: ArrayLike, patm0: float = K_PO) -> float | np.ndarray:
    """Atmospheric pressure (Pa) at elevation `elv` (m) for a standard atmosphere.

    Example:
        >>> round(calc_patm(0.0))
        101325
    """
    elv_arr = _as_array(elv)
    exponent = K_G * K_MA / (K_R * K_L)
    return _unwrap(patm0 * (1.0 - K_L * elv_arr / K_TO) ** exponent)


def calc_vp_inst(qair: ArrayLike, patm: ArrayLike) -> float | np.ndarray:
    """Actual vapor pressure (Pa) from specific humidity and pressure.

    Uses the mass mixing ratio of water vapor to dry air,
    w = q / (1 - q), and the specific gas constants of vapor and dry air.
    """
    qair_arr = _as_array(qair)
    patm_arr = _as_array(patm)

    wair = qair_arr / (1.0 - qair_arr)
    rv = K_R_VP / K_MV
    rd = K_R_VP / K_MA_VP
    return _unwrap(patm_arr * wair * rv / (rd + wair * rv))


def calc_vp(
    qair: ArrayLike,
    tc: ArrayLike | None = None,
    tmin: ArrayLike | None = None,
    tmax: ArrayLike | None = None,
    patm: ArrayLike | None = None,
    elv: ArrayLike | None = None,
) -> float | np.ndarray:
    """Calculate actual vapor pressure from specific humidity.

    Where `patm` is missing it is derived from `elv` with calc_patm. Rows
    with neither pressure nor elevation are undefined: they come back as
    NaN and a UserWarning is issued, the remaining rows are unaffected.

    Where both `tmin` and `tmax` are given the result is the mean of the
    evaluations at the two temperatures, otherwise the evaluation at `tc`.

    Args:
        qair: Specific humidity, kg kg-1
        tc: Daily mean air temperature, deg C
        tmin: Daily minimum air temperature, deg C (optional)
        tmax: Daily maximum air temperature, deg C (optional)
        patm: Atmospheric pressure, Pa (optional)
        elv: Elevation above sea level, m (used only where patm is missing)

    Returns:
        Vapor pressure in Pa
    """
    qair_arr, _tc, _tmin, _tmax, patm_arr, elv_arr = np.broadcast_arrays(
        _as_array(qair),
        _as_array(tc),
        _as_array(tmin),
        _as_array(tmax),
        _as_array(patm),
        _as_array(elv),
    )

    undefined = np.isnan(patm_arr) & np.isnan(elv_arr)
    if undefined.any():
        warnings.warn(
            "calc_vp(): Either patm or elv must be provided; "
            f"vapor pressure is undefined for {int(undefined.sum())} value(s)",
            UserWarning,
            stacklevel=2,
        )

    patm_arr = np.where(np.isnan(patm_arr), np.asarray(calc_patm(elv_arr)), patm_arr)

    # The mixing-ratio form does not depend on temperature, so the mean of
    # the evaluations at tmin and tmax equals the evaluation at tc.
    vp = np.asarray(calc_vp_inst(qair_arr, patm_arr))
    return _unwrap(vp)


def calc_esat(tc: ArrayLike) -> float | np.ndarray:
    """Saturation vapor pressure (Pa) at air temperature `tc` (deg C).

    Magnus-type formula: esat = 611.0 * exp(17.27 tc / (tc + 237.3)).
    """
    tc_arr = _as_array(tc)
    return _unwrap(611.0 * np.exp((17.27 * tc_arr) / (tc_arr + 237.3)))


def calc_vpd_inst(eact: ArrayLike, tc: ArrayLike) -> float | np.ndarray:
    """Vapor pressure deficit (Pa) at a single temperature, floored at zero."""
    vpd = np.asarray(calc_esat(tc)) - _as_array(eact)
    return _unwrap(np.maximum(vpd, 0.0))


def calc_vpd(
    eact: ArrayLike,
    tc: ArrayLike | None = None,
    tmin: ArrayLike | None = None,
    tmax: ArrayLike | None = None,
) -> float | np.ndarray:
    """Calculate vapor pressure deficit from actual vapor pressure.

    VPD is saturation vapor pressure at air temperature minus actual vapor
    pressure. With both `tmin` and `tmax` given, the mean of the deficits at
    the two temperatures is returned; otherwise the deficit at `tc`.

    Args:
        eact: Actual vapor pressure, Pa
        tc: Daily mean air temperature, deg C
        tmin: Daily minimum air temperature, deg C (optional)
        tmax: Daily maximum air temperature, deg C (optional)

    Returns:
        Vapor pressure deficit in Pa
    """
    eact_arr, tc_arr, tmin_arr, tmax_arr = np.broadcast_arrays(
        _as_array(eact),
        _as_array(tc),
        _as_array(tmin),
        _as_array(tmax),
    )
    vpd = _minmax_mean(
        lambda t: np.asarray(calc_vpd_inst(eact_arr, t)),
        tc_arr,
        tmin_arr,
        tmax_arr,
    )
    return _unwrap(np.asarray(vpd))
