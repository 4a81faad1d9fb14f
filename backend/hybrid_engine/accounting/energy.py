"""Annual energy, fuel, and emissions accounting.

Rolls the sizing outputs up into monthly and annual energy totals, derives
the diesel load factor and effective specific fuel consumption, and compares
fuel burn and CO2 emissions against a diesel-only supply of the same load.
Seasonal dispatch results, when supplied, are summarised alongside.

All energy values are in kWh, fuel in litres, emissions in tonnes CO2.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hybrid_engine.config import SystemConfig
from hybrid_engine.dispatch.seasonal import SeasonalProfile
from hybrid_engine.generator.fuel_curve import (
    PARTIAL_LOAD_THRESHOLD,
    FuelCurve,
    co2_tonnes,
    diesel_load_factor,
    diesel_run_hours,
)
from hybrid_engine.load.load_profile import HOURS_PER_DAY, HOURS_PER_YEAR
from hybrid_engine.sizing.capacity import SizingResult
from hybrid_engine.solar.resource import peak_sun_hours

# ======================================================================
# Constants
# ======================================================================

MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
DAYS_PER_MONTH = 30

# Share of the autonomy window's energy credited against diesel per day.
AUTONOMY_DIESEL_CREDIT = 0.8

# Renewable target (%) above which a low diesel load factor is flagged.
HIGH_RENEWABLE_TARGET_PCT = 70.0

# Annual CO2 uptake of one mature tree (kg).
CO2_KG_PER_TREE = 22.0


@dataclass
class MonthlyEnergy:
    month: str
    peak_sun_hours: float
    solar_kwh: float
    load_kwh: float
    diesel_kwh: float
    fuel_litres: float
    fuel_cost: float

    @property
    def renewable_pct(self) -> float:
        return self.solar_kwh / self.load_kwh * 100.0 if self.load_kwh > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "peak_sun_hours": round(self.peak_sun_hours, 2),
            "solar_kwh": round(self.solar_kwh),
            "load_kwh": round(self.load_kwh),
            "diesel_kwh": round(self.diesel_kwh),
            "fuel_litres": round(self.fuel_litres),
            "fuel_cost": round(self.fuel_cost),
            "renewable_pct": round(self.renewable_pct),
        }


@dataclass
class EnergySummary:
    """Annual energy and fuel balance for the hybrid and diesel-only cases."""
    annual_demand_kwh: float
    renewable_kwh: float
    diesel_kwh: float
    diesel_load_factor: float
    sfc_l_per_kwh: float
    hybrid_fuel_litres: float
    diesel_only_fuel_litres: float
    diesel_run_hours: float
    co2_diesel_only_t: float
    co2_hybrid_t: float
    pv_capacity_factor: float
    battery_hours: float
    pv_to_peak_ratio: float
    monthly: list[MonthlyEnergy] = field(default_factory=list)
    dispatch_renewable_fraction: float = 0.0
    dispatch_curtailed_kwh_per_day: float = 0.0
    advisories: list[str] = field(default_factory=list)

    @property
    def co2_saved_t(self) -> float:
        return self.co2_diesel_only_t - self.co2_hybrid_t

    @property
    def trees_equivalent(self) -> float:
        return self.co2_saved_t * 1000.0 / CO2_KG_PER_TREE

    def to_dict(self) -> dict[str, Any]:
        return {
            "annual_demand_kwh": round(self.annual_demand_kwh),
            "renewable_kwh": round(self.renewable_kwh),
            "diesel_kwh": round(self.diesel_kwh),
            "diesel_load_factor_pct": round(self.diesel_load_factor * 100.0, 1),
            "sfc_l_per_kwh": round(self.sfc_l_per_kwh, 3),
            "hybrid_fuel_litres": round(self.hybrid_fuel_litres),
            "diesel_only_fuel_litres": round(self.diesel_only_fuel_litres),
            "diesel_run_hours": round(self.diesel_run_hours),
            "co2_diesel_only_t": round(self.co2_diesel_only_t),
            "co2_hybrid_t": round(self.co2_hybrid_t),
            "co2_saved_t": round(self.co2_saved_t),
            "trees_equivalent": round(self.trees_equivalent),
            "pv_capacity_factor_pct": round(self.pv_capacity_factor * 100.0, 1),
            "battery_hours": round(self.battery_hours, 1),
            "pv_to_peak_ratio": round(self.pv_to_peak_ratio, 1),
            "dispatch_renewable_fraction_pct": round(
                self.dispatch_renewable_fraction * 100.0, 1
            ),
            "dispatch_curtailed_kwh_per_day": round(
                self.dispatch_curtailed_kwh_per_day, 1
            ),
            "monthly": [m.to_dict() for m in self.monthly],
        }


# ======================================================================
# Helpers
# ======================================================================

def annual_diesel_energy(config: SystemConfig, sizing: SizingResult) -> float:
    """Diesel-served energy per year after the renewable target is met."""
    diesel_kwh = sizing.annual_demand_kwh - sizing.target_renewable_kwh
    days = config.advanced.diesel_free_days
    if days > 0:
        diesel_kwh = max(
            0.0,
            diesel_kwh - sizing.autonomy_window_kwh * days * AUTONOMY_DIESEL_CREDIT,
        )
    return diesel_kwh


def _monthly_table(
    config: SystemConfig, sizing: SizingResult, sfc: float
) -> list[MonthlyEnergy]:
    average_kw = config.load.average_kw
    fuel_price = config.capex.fuel_price_per_l
    rows: list[MonthlyEnergy] = []

    for m, label in enumerate(MONTH_NAMES):
        psh = peak_sun_hours(m, config.location.latitude)
        solar = psh * sizing.pv_kwp * DAYS_PER_MONTH * sizing.effective_pr
        load = average_kw * HOURS_PER_DAY * DAYS_PER_MONTH
        diesel = max(0.0, load - solar)
        fuel = diesel * sfc
        rows.append(MonthlyEnergy(
            month=label,
            peak_sun_hours=psh,
            solar_kwh=solar,
            load_kwh=load,
            diesel_kwh=diesel,
            fuel_litres=fuel,
            fuel_cost=fuel * fuel_price,
        ))

    return rows


# ======================================================================
# Main entry point
# ======================================================================

def account_energy(
    config: SystemConfig,
    sizing: SizingResult,
    seasons: list[SeasonalProfile] | None = None,
) -> EnergySummary:
    """Compute annual energy, fuel and emissions totals.

    Parameters
    ----------
    config : SystemConfig
        Run configuration (load, diesel class, fuel price, targets).
    sizing : SizingResult
        Output of :func:`hybrid_engine.sizing.size_system`.
    seasons : list of SeasonalProfile, optional
        Seasonal dispatch results to summarise.

    Returns
    -------
    EnergySummary
    """
    advisories: list[str] = []
    fuel_curve = FuelCurve.from_class(config.technology.diesel_spec)

    diesel_kwh = annual_diesel_energy(config, sizing)
    load_factor = diesel_load_factor(diesel_kwh, sizing.diesel_kw)
    sfc = fuel_curve.sfc(load_factor)

    hybrid_fuel = diesel_kwh * sfc
    diesel_only_fuel = sizing.annual_demand_kwh * sfc

    if (
        load_factor < PARTIAL_LOAD_THRESHOLD
        and config.renewable_target_pct > HIGH_RENEWABLE_TARGET_PCT
    ):
        advisories.append(f"Low diesel load factor: {load_factor * 100:.0f}%")

    load = config.load
    pv_cf = (
        sizing.target_renewable_kwh / sizing.pv_kwp / HOURS_PER_YEAR
        if sizing.pv_kwp > 0 else 0.0
    )

    dispatch_rf = 0.0
    curtailed_per_day = 0.0
    if seasons:
        dispatch_rf = sum(s.renewable_fraction for s in seasons) / len(seasons)
        curtailed_per_day = sum(s.total_curtailed for s in seasons) / len(seasons)

    return EnergySummary(
        annual_demand_kwh=sizing.annual_demand_kwh,
        renewable_kwh=sizing.target_renewable_kwh,
        diesel_kwh=diesel_kwh,
        diesel_load_factor=load_factor,
        sfc_l_per_kwh=sfc,
        hybrid_fuel_litres=hybrid_fuel,
        diesel_only_fuel_litres=diesel_only_fuel,
        diesel_run_hours=diesel_run_hours(diesel_kwh, sizing.diesel_kw, load_factor),
        co2_diesel_only_t=co2_tonnes(diesel_only_fuel),
        co2_hybrid_t=co2_tonnes(hybrid_fuel),
        pv_capacity_factor=pv_cf,
        battery_hours=sizing.battery_kwh / load.average_kw if load.average_kw > 0 else 0.0,
        pv_to_peak_ratio=sizing.pv_kwp / load.peak_kw if load.peak_kw > 0 else 0.0,
        monthly=_monthly_table(config, sizing, sfc),
        dispatch_renewable_fraction=dispatch_rf,
        dispatch_curtailed_kwh_per_day=curtailed_per_day,
        advisories=advisories,
    )
