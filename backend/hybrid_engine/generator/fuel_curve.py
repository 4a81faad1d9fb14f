"""Banded specific-fuel-consumption model for diesel gensets.

Reciprocating engines burn more fuel per kWh at light loading.  The model
uses three bands on the annual diesel load factor (LF):

    LF < 0.30           SFC = sfc_partial
    0.30 <= LF < 0.50   SFC = (sfc_partial + sfc_base) / 2
    LF >= 0.50          SFC = sfc_base

SFC is expressed in litres of diesel per kWh of electrical output.
"""

from __future__ import annotations

from dataclasses import dataclass

from hybrid_engine.catalog import DieselClass
from hybrid_engine.load.load_profile import HOURS_PER_YEAR

PARTIAL_LOAD_THRESHOLD = 0.30
BASE_LOAD_THRESHOLD = 0.50

# kg CO2 released per litre of diesel burned.
CO2_KG_PER_LITRE_DIESEL = 2.7


@dataclass
class FuelCurve:
    """Specific fuel consumption at base and partial load.

    Parameters
    ----------
    sfc_base : float
        L/kWh at or above 50 % load factor.
    sfc_partial : float
        L/kWh below 30 % load factor.  Expected to be >= ``sfc_base``.
    """

    sfc_base: float = 0.24
    sfc_partial: float = 0.30

    def __post_init__(self) -> None:
        if self.sfc_base <= 0:
            raise ValueError(f"sfc_base must be > 0, got {self.sfc_base}")
        if self.sfc_partial < self.sfc_base:
            raise ValueError(
                f"sfc_partial ({self.sfc_partial}) must be >= "
                f"sfc_base ({self.sfc_base})"
            )

    @classmethod
    def from_class(cls, diesel: DieselClass) -> "FuelCurve":
        return cls(sfc_base=diesel.sfc_base, sfc_partial=diesel.sfc_partial)

    def sfc(self, load_factor: float) -> float:
        """Effective SFC (L/kWh) at an annual diesel *load_factor*."""
        if load_factor < PARTIAL_LOAD_THRESHOLD:
            return self.sfc_partial
        if load_factor < BASE_LOAD_THRESHOLD:
            return (self.sfc_base + self.sfc_partial) / 2.0
        return self.sfc_base

    def fuel_litres(self, energy_kwh: float, load_factor: float) -> float:
        """Litres of fuel to generate *energy_kwh* at *load_factor*."""
        return energy_kwh * self.sfc(load_factor)


def diesel_load_factor(annual_energy_kwh: float, capacity_kw: float) -> float:
    """Average output over rated capacity across a year (0.0 with no diesel)."""
    if capacity_kw <= 0:
        return 0.0
    return annual_energy_kwh / HOURS_PER_YEAR / capacity_kw


def diesel_run_hours(
    annual_energy_kwh: float, capacity_kw: float, load_factor: float
) -> float:
    """Equivalent running hours at the average load factor.

    When ``capacity_kw * load_factor`` is zero the divisor falls back to 1.
    """
    divisor = capacity_kw * load_factor
    return annual_energy_kwh / (divisor or 1.0)


def co2_tonnes(fuel_litres: float) -> float:
    """Tonnes of CO2 from burning *fuel_litres* of diesel."""
    return fuel_litres * CO2_KG_PER_LITRE_DIESEL / 1000.0
