"""
Parametric solar resource model.

Monthly average peak sun hours (PSH, kWh/m^2/day) are looked up from
reference curves for a few well-characterised Australian sites.  Any other
latitude falls back to a generic southern-hemisphere curve, shifted six
months for northern latitudes and attenuated with distance from the
equator.

Hourly PV output within a day is approximated by a half-sine between
sunrise (06:00) and sunset (18:00) whose integral equals the day's PSH.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

# ---------------------------------------------------------------------------
# Reference curves (index 0 = January)
# Each row: (reference latitude, match tolerance in degrees, 12 monthly PSH)
# ---------------------------------------------------------------------------
_REFERENCE_CURVES: list[tuple[float, float, NDArray[np.float64]]] = [
    # Perth, WA
    (-31.95, 1.0, np.array(
        [7.4, 6.6, 5.9, 4.8, 3.9, 3.6, 3.8, 4.6, 5.7, 6.8, 7.5, 7.7],
        dtype=np.float64,
    )),
    # Darwin, NT
    (-12.46, 2.0, np.array(
        [5.8, 5.5, 5.9, 6.3, 6.0, 5.8, 6.2, 6.8, 7.2, 7.2, 6.8, 6.1],
        dtype=np.float64,
    )),
    # Alice Springs, NT
    (-23.70, 2.0, np.array(
        [7.2, 6.8, 6.5, 5.8, 5.0, 4.5, 5.0, 5.8, 6.8, 7.5, 7.6, 7.5],
        dtype=np.float64,
    )),
]

# Generic southern-hemisphere curve.
_GENERIC_CURVE = np.array(
    [5.5, 6.0, 5.5, 4.5, 3.5, 3.0, 3.2, 4.0, 5.0, 6.0, 6.5, 6.0],
    dtype=np.float64,
)

# Fractional PSH loss at the poles relative to the equator.
_POLAR_ATTENUATION = 0.4

SUNRISE_HOUR = 6
SUNSET_HOUR = 18


def peak_sun_hours(month: int, latitude: float) -> float:
    """Average daily peak sun hours for *month* (0-11) at *latitude*.

    Parameters
    ----------
    month : int
        Month index, 0 = January.
    latitude : float
        Site latitude in degrees (positive north).

    Returns
    -------
    float
        Peak sun hours, always finite and > 0 for latitudes in [-90, 90].
    """
    if not 0 <= month <= 11:
        raise ValueError(f"month must be in [0, 11], got {month}")

    for ref_lat, tolerance, curve in _REFERENCE_CURVES:
        if abs(latitude - ref_lat) < tolerance:
            return float(curve[month])

    # Seasonal inversion for the northern hemisphere.
    idx = month if latitude < 0 else (month + 6) % 12
    attenuation = 1.0 - abs(latitude) / 90.0 * _POLAR_ATTENUATION
    return float(_GENERIC_CURVE[idx] * attenuation)


def monthly_psh(latitude: float) -> NDArray[np.float64]:
    """All 12 monthly PSH values for *latitude*, shape (12,)."""
    return np.array(
        [peak_sun_hours(m, latitude) for m in range(12)], dtype=np.float64
    )


def annual_average_psh(latitude: float) -> float:
    """Mean of the 12 monthly PSH values."""
    return float(np.mean(monthly_psh(latitude)))


def solar_potential_kw(
    hour: int,
    pv_kwp: float,
    psh: float,
    effective_pr: float,
) -> float:
    """DC PV output (kW) during *hour* of a representative day.

    A half-sine is active from sunrise to sunset inclusive and zero
    elsewhere.  The amplitude ``psh * pi / 24`` makes the daily integral of
    the curve equal to ``pv_kwp * psh * effective_pr``.
    """
    if not SUNRISE_HOUR <= hour <= SUNSET_HOUR:
        return 0.0
    day_length = SUNSET_HOUR - SUNRISE_HOUR
    shape = math.sin((hour - SUNRISE_HOUR) / day_length * math.pi)
    return max(0.0, pv_kwp * (psh * math.pi / 24.0) * shape * effective_pr)
