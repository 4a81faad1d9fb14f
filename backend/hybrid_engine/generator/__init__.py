"""Diesel generator engine module."""

from .fuel_curve import (
    CO2_KG_PER_LITRE_DIESEL,
    FuelCurve,
    co2_tonnes,
    diesel_load_factor,
    diesel_run_hours,
)

__all__ = [
    "CO2_KG_PER_LITRE_DIESEL",
    "FuelCurve",
    "co2_tonnes",
    "diesel_load_factor",
    "diesel_run_hours",
]
