"""Annual energy, fuel and emissions accounting."""

from .energy import (
    MONTH_NAMES,
    EnergySummary,
    MonthlyEnergy,
    account_energy,
    annual_diesel_energy,
)

__all__ = [
    "MONTH_NAMES",
    "EnergySummary",
    "MonthlyEnergy",
    "account_energy",
    "annual_diesel_energy",
]
