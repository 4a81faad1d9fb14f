"""Sensitivity tables for fuel price and renewable-energy target.

Two fixed sweeps, each varied independently of the other:

* **Fuel price** -- the lifetime cash-flow loop is re-run at each price with
  sizing and energy volumes held at the base case.
* **Renewable target** -- the PV and battery sizing formulas are re-applied
  (unclamped, no dispatch) at each target to show how capacity and CAPEX
  scale.  The sized diesel capacity is held fixed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hybrid_engine.accounting.energy import EnergySummary
from hybrid_engine.config import SystemConfig
from hybrid_engine.economics.cashflow import (
    CapexBreakdown,
    levelised_costs,
    net_present_costs,
    project_cash_flows,
)
from hybrid_engine.sizing.capacity import (
    SizingResult,
    battery_energy_for_storage,
    pv_capacity_for_target,
)

FUEL_PRICE_SCENARIOS = (1.20, 1.50, 1.85, 2.20, 2.60, 3.00)
RENEWABLE_TARGET_SCENARIOS = (30, 50, 70, 85, 95)

# Targets above this get the longer storage duration.
HIGH_TARGET_PCT = 80
HIGH_TARGET_STORAGE_HOURS = 6.0
BASE_STORAGE_HOURS = 4.0


@dataclass
class FuelPricePoint:
    fuel_price: float
    hybrid_lcoe: float
    diesel_lcoe: float
    lifetime_savings: float
    npv_benefit: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "fuel_price": round(self.fuel_price, 2),
            "hybrid_lcoe": round(self.hybrid_lcoe, 3),
            "diesel_lcoe": round(self.diesel_lcoe, 3),
            "lifetime_savings": round(self.lifetime_savings),
            "npv_benefit": round(self.npv_benefit),
        }


@dataclass
class RenewableTargetPoint:
    renewable_pct: float
    pv_kwp: float
    battery_kwh: float
    capex: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "renewable_pct": self.renewable_pct,
            "pv_kwp": round(self.pv_kwp),
            "battery_kwh": round(self.battery_kwh),
            "capex": round(self.capex),
        }


@dataclass
class SensitivityTables:
    fuel_price: list[FuelPricePoint] = field(default_factory=list)
    renewable_target: list[RenewableTargetPoint] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fuel_price": [p.to_dict() for p in self.fuel_price],
            "renewable_target": [p.to_dict() for p in self.renewable_target],
        }


# ======================================================================
# Sweeps
# ======================================================================

def fuel_price_sensitivity(
    config: SystemConfig,
    sizing: SizingResult,
    energy: EnergySummary,
    capex: CapexBreakdown,
    prices: tuple[float, ...] = FUEL_PRICE_SCENARIOS,
) -> list[FuelPricePoint]:
    """Re-run the cash-flow loop at each fuel price."""
    years = config.finance.project_life_years
    points: list[FuelPricePoint] = []

    for price in prices:
        rows = project_cash_flows(config, sizing, energy, capex, fuel_price=price)
        npv_h, npv_d = net_present_costs(rows, capex)
        lcoe_h, lcoe_d = levelised_costs(rows, energy.annual_demand_kwh, years)
        points.append(FuelPricePoint(
            fuel_price=price,
            hybrid_lcoe=lcoe_h,
            diesel_lcoe=lcoe_d,
            lifetime_savings=rows[-1].cumulative_savings,
            npv_benefit=npv_d - npv_h,
        ))

    return points


def renewable_target_sensitivity(
    config: SystemConfig,
    sizing: SizingResult,
    targets: tuple[float, ...] = RENEWABLE_TARGET_SCENARIOS,
) -> list[RenewableTargetPoint]:
    """Re-apply the PV and battery sizing formulas at each renewable target."""
    c = config.capex
    dod = config.technology.battery_spec.dod
    average_kw = config.load.average_kw
    points: list[RenewableTargetPoint] = []

    for pct in targets:
        pv = pv_capacity_for_target(
            sizing.annual_demand_kwh * pct / 100.0, sizing.yield_per_kwp
        )
        hours = HIGH_TARGET_STORAGE_HOURS if pct > HIGH_TARGET_PCT else BASE_STORAGE_HOURS
        battery = battery_energy_for_storage(average_kw, hours, dod)
        capex = (
            pv * c.pv_per_kwp
            + battery * c.battery_per_kwh
            + sizing.diesel_kw * c.diesel_per_kw
        )
        points.append(RenewableTargetPoint(
            renewable_pct=pct, pv_kwp=pv, battery_kwh=battery, capex=capex,
        ))

    return points


def sensitivity_analysis(
    config: SystemConfig,
    sizing: SizingResult,
    energy: EnergySummary,
    capex: CapexBreakdown,
) -> SensitivityTables:
    """Build both sensitivity tables for one run."""
    return SensitivityTables(
        fuel_price=fuel_price_sensitivity(config, sizing, energy, capex),
        renewable_target=renewable_target_sensitivity(config, sizing),
    )
