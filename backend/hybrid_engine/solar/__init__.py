"""
Solar resource module.

Provides parametric monthly peak-sun-hour curves by latitude and the
half-sine hourly PV potential used by the dispatch simulator.
"""

from .resource import (
    annual_average_psh,
    monthly_psh,
    peak_sun_hours,
    solar_potential_kw,
)

__all__ = [
    "peak_sun_hours",
    "monthly_psh",
    "annual_average_psh",
    "solar_potential_kw",
]
