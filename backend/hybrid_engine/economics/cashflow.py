"""Lifetime cash-flow model for the hybrid system and a diesel-only baseline.

Computes the CAPEX breakdown, a year-by-year nominal and discounted cost
schedule, Net Present Value benefit, simple payback and Levelised Cost of
Energy for both systems.

Cost escalation per year ``y`` (1-based):

* general costs (O&M, insurance, site costs, replacement) are inflated by
  ``(1 + inflation) ** (y - 1)``
* fuel is escalated by ``(1 + fuel_escalation) ** (y - 1)``
* NPV discounts each year's outflow by ``1 / (1 + r) ** y``

The diesel-only baseline is sized at 1.2x peak load, carries 10 % extra
installation cost and 1.5x the class maintenance rate, and has no renewable
offset.

All monetary values are in USD ($).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hybrid_engine.accounting.energy import EnergySummary
from hybrid_engine.config import SystemConfig
from hybrid_engine.sizing.capacity import SizingResult

# ======================================================================
# Constants
# ======================================================================

DIESEL_ONLY_SIZING_MARGIN = 1.2
DIESEL_ONLY_INSTALL_FACTOR = 1.1
DIESEL_ONLY_MAINTENANCE_FACTOR = 1.5
BATTERY_REPLACEMENT_FRACTION = 0.7


# ======================================================================
# Result types
# ======================================================================

@dataclass
class CapexBreakdown:
    pv: float
    battery: float
    diesel: float
    bos: float
    epc: float
    land: float
    diesel_only: float

    @property
    def hybrid_total(self) -> float:
        return self.pv + self.battery + self.diesel + self.bos + self.epc + self.land

    def to_dict(self) -> dict[str, Any]:
        return {
            "pv": round(self.pv),
            "battery": round(self.battery),
            "diesel": round(self.diesel),
            "bos": round(self.bos),
            "epc": round(self.epc),
            "land": round(self.land),
            "hybrid_total": round(self.hybrid_total),
            "diesel_only": round(self.diesel_only),
        }


@dataclass
class CashFlowYear:
    """One row of the cost schedule.  Year 0 carries CAPEX only."""
    year: int
    hybrid_annual: float
    diesel_annual: float
    hybrid_discounted: float
    diesel_discounted: float
    hybrid_cumulative: float
    diesel_cumulative: float
    battery_replacement: bool = False

    @property
    def cumulative_savings(self) -> float:
        return self.diesel_cumulative - self.hybrid_cumulative

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "hybrid_annual": round(self.hybrid_annual),
            "diesel_annual": round(self.diesel_annual),
            "hybrid_discounted": round(self.hybrid_discounted),
            "diesel_discounted": round(self.diesel_discounted),
            "hybrid_cumulative": round(self.hybrid_cumulative),
            "diesel_cumulative": round(self.diesel_cumulative),
            "cumulative_savings": round(self.cumulative_savings),
            "battery_replacement": self.battery_replacement,
        }


@dataclass
class FinancialSummary:
    capex: CapexBreakdown
    hybrid_opex_avg: float
    diesel_opex_avg: float
    annual_savings_avg: float
    npv_hybrid: float
    npv_diesel: float
    payback_years: float
    lcoe_hybrid: float
    lcoe_diesel: float
    first_year_opex: dict[str, float] = field(default_factory=dict)
    cash_flows: list[CashFlowYear] = field(default_factory=list)

    @property
    def npv_benefit(self) -> float:
        return self.npv_diesel - self.npv_hybrid

    def to_dict(self) -> dict[str, Any]:
        payback = (
            round(self.payback_years, 1)
            if self.payback_years != float("inf") else None
        )
        return {
            "capex": self.capex.to_dict(),
            "hybrid_opex_avg": round(self.hybrid_opex_avg),
            "diesel_opex_avg": round(self.diesel_opex_avg),
            "annual_savings_avg": round(self.annual_savings_avg),
            "npv_hybrid": round(self.npv_hybrid),
            "npv_diesel": round(self.npv_diesel),
            "npv_benefit": round(self.npv_benefit),
            "payback_years": payback,
            "lcoe_hybrid": round(self.lcoe_hybrid, 3),
            "lcoe_diesel": round(self.lcoe_diesel, 3),
            "first_year_opex": {k: round(v) for k, v in self.first_year_opex.items()},
            "cash_flows": [row.to_dict() for row in self.cash_flows],
        }


# ======================================================================
# Internal helpers
# ======================================================================

def _discount_factor(rate: float, year: int) -> float:
    """Return ``1 / (1 + rate) ** year``."""
    return 1.0 / (1.0 + rate) ** year


def _escalation(rate: float, year: int) -> float:
    """Index for year *year* (1-based) of a cost escalating at *rate*."""
    return (1.0 + rate) ** (year - 1)


def _diesel_om_rate(config: SystemConfig) -> float:
    """Hybrid diesel O&M ($/kW/yr): class maintenance when auto."""
    if config.opex.diesel_om_auto:
        return config.technology.diesel_spec.maintenance_per_kw
    return config.opex.diesel_om_per_kw


def _diesel_only_capacity(config: SystemConfig) -> float:
    return config.load.peak_kw * DIESEL_ONLY_SIZING_MARGIN


def _fixed_costs(
    config: SystemConfig, sizing: SizingResult, capex: CapexBreakdown
) -> tuple[float, float]:
    """First-year non-fuel costs for (hybrid, diesel-only)."""
    opex = config.opex
    insurance = opex.insurance_pct / 100.0

    hybrid = (
        sizing.pv_kwp * opex.pv_om_per_kwp
        + sizing.battery_kwh * opex.battery_om_per_kwh
        + sizing.diesel_kw * _diesel_om_rate(config)
        + capex.hybrid_total * insurance
        + opex.fixed_site_costs
    )
    diesel = (
        _diesel_only_capacity(config)
        * config.technology.diesel_spec.maintenance_per_kw
        * DIESEL_ONLY_MAINTENANCE_FACTOR
        + capex.diesel_only * insurance
    )
    return hybrid, diesel


# ======================================================================
# CAPEX
# ======================================================================

def capex_breakdown(config: SystemConfig, sizing: SizingResult) -> CapexBreakdown:
    """Up-front cost of the hybrid plant and the diesel-only baseline."""
    c = config.capex
    pv = sizing.pv_kwp * c.pv_per_kwp
    battery = sizing.battery_kwh * c.battery_per_kwh
    diesel = sizing.diesel_kw * c.diesel_per_kw
    bos = (pv + battery) * c.bos_pct / 100.0
    epc = (pv + battery + diesel + bos) * c.epc_pct / 100.0

    diesel_only = (
        _diesel_only_capacity(config) * c.diesel_per_kw * DIESEL_ONLY_INSTALL_FACTOR
    )

    return CapexBreakdown(
        pv=pv,
        battery=battery,
        diesel=diesel,
        bos=bos,
        epc=epc,
        land=c.land_cost,
        diesel_only=diesel_only,
    )


# ======================================================================
# Year loop
# ======================================================================

def project_cash_flows(
    config: SystemConfig,
    sizing: SizingResult,
    energy: EnergySummary,
    capex: CapexBreakdown,
    fuel_price: float | None = None,
) -> list[CashFlowYear]:
    """Year-by-year cost schedule for years 0..N.

    Parameters
    ----------
    config : SystemConfig
        Run configuration (OPEX, finance and replacement inputs).
    sizing : SizingResult
        Sized capacities.
    energy : EnergySummary
        Annual fuel volumes for both systems.
    capex : CapexBreakdown
        Year-0 costs.
    fuel_price : float, optional
        $/L override; defaults to ``config.capex.fuel_price_per_l``.

    Returns
    -------
    list[CashFlowYear]
        ``N + 1`` rows; row 0 holds CAPEX as the cumulative starting point.
    """
    fin = config.finance
    price = config.capex.fuel_price_per_l if fuel_price is None else fuel_price
    r = fin.discount_rate_pct / 100.0
    inflation = fin.inflation_pct / 100.0
    fuel_esc = fin.fuel_escalation_pct / 100.0
    years = fin.project_life_years
    replacement_year = config.advanced.battery_replacement_year

    hybrid_fixed, diesel_fixed = _fixed_costs(config, sizing, capex)
    hybrid_fuel = energy.hybrid_fuel_litres * price
    diesel_fuel = energy.diesel_only_fuel_litres * price
    replacement_cost = capex.battery * BATTERY_REPLACEMENT_FRACTION

    cum_h = capex.hybrid_total
    cum_d = capex.diesel_only
    rows = [CashFlowYear(
        year=0,
        hybrid_annual=0.0,
        diesel_annual=0.0,
        hybrid_discounted=0.0,
        diesel_discounted=0.0,
        hybrid_cumulative=cum_h,
        diesel_cumulative=cum_d,
    )]

    for yr in range(1, years + 1):
        inf = _escalation(inflation, yr)
        fe = _escalation(fuel_esc, yr)
        d = _discount_factor(r, yr)

        hybrid = hybrid_fixed * inf + hybrid_fuel * fe
        diesel = diesel_fixed * inf + diesel_fuel * fe

        replaced = yr == replacement_year
        if replaced:
            hybrid += replacement_cost * inf

        cum_h += hybrid
        cum_d += diesel
        rows.append(CashFlowYear(
            year=yr,
            hybrid_annual=hybrid,
            diesel_annual=diesel,
            hybrid_discounted=hybrid * d,
            diesel_discounted=diesel * d,
            hybrid_cumulative=cum_h,
            diesel_cumulative=cum_d,
            battery_replacement=replaced,
        ))

    return rows


def net_present_costs(
    rows: list[CashFlowYear], capex: CapexBreakdown
) -> tuple[float, float]:
    """Return (hybrid NPC, diesel-only NPC) from a cost schedule."""
    npv_h = capex.hybrid_total + sum(row.hybrid_discounted for row in rows)
    npv_d = capex.diesel_only + sum(row.diesel_discounted for row in rows)
    return npv_h, npv_d


def levelised_costs(
    rows: list[CashFlowYear], annual_demand_kwh: float, years: int
) -> tuple[float, float]:
    """Return (hybrid LCOE, diesel-only LCOE) in $/kWh.

    Lifetime nominal cost over lifetime energy served; 0.0 with no demand.
    """
    lifetime_kwh = annual_demand_kwh * years
    if lifetime_kwh <= 0:
        return 0.0, 0.0
    final = rows[-1]
    return (
        final.hybrid_cumulative / lifetime_kwh,
        final.diesel_cumulative / lifetime_kwh,
    )


# ======================================================================
# Main entry point
# ======================================================================

def evaluate_financials(
    config: SystemConfig,
    sizing: SizingResult,
    energy: EnergySummary,
) -> FinancialSummary:
    """Compute CAPEX, cash flows, NPV, payback and LCOE.

    Parameters
    ----------
    config : SystemConfig
        Run configuration.
    sizing : SizingResult
        Output of the sizing stage.
    energy : EnergySummary
        Output of the energy accounting stage.

    Returns
    -------
    FinancialSummary
    """
    years = config.finance.project_life_years
    capex = capex_breakdown(config, sizing)
    rows = project_cash_flows(config, sizing, energy, capex)
    final = rows[-1]

    npv_h, npv_d = net_present_costs(rows, capex)
    lcoe_h, lcoe_d = levelised_costs(rows, energy.annual_demand_kwh, years)

    hybrid_opex_avg = (final.hybrid_cumulative - capex.hybrid_total) / years
    diesel_opex_avg = (final.diesel_cumulative - capex.diesel_only) / years
    savings_avg = final.cumulative_savings / years

    if savings_avg > 0:
        payback = (capex.hybrid_total - capex.diesel_only) / savings_avg
    else:
        payback = float("inf")

    # ------------------------------------------------------------------
    # First-year OPEX breakdown
    # ------------------------------------------------------------------
    opex = config.opex
    fuel_price = config.capex.fuel_price_per_l
    insurance = opex.insurance_pct / 100.0
    diesel_only_kw = _diesel_only_capacity(config)

    first_year = {
        "pv_om": sizing.pv_kwp * opex.pv_om_per_kwp,
        "battery_om": sizing.battery_kwh * opex.battery_om_per_kwh,
        "diesel_om": sizing.diesel_kw * _diesel_om_rate(config),
        "fuel": energy.hybrid_fuel_litres * fuel_price,
        "insurance": capex.hybrid_total * insurance,
        "site": opex.fixed_site_costs,
    }
    first_year["hybrid_total"] = sum(first_year.values())

    diesel_fuel = energy.diesel_only_fuel_litres * fuel_price
    diesel_maint = (
        diesel_only_kw
        * config.technology.diesel_spec.maintenance_per_kw
        * DIESEL_ONLY_MAINTENANCE_FACTOR
    )
    diesel_ins = capex.diesel_only * insurance
    first_year.update({
        "diesel_only_fuel": diesel_fuel,
        "diesel_only_maintenance": diesel_maint,
        "diesel_only_insurance": diesel_ins,
        "diesel_only_total": diesel_fuel + diesel_maint + diesel_ins,
    })

    return FinancialSummary(
        capex=capex,
        hybrid_opex_avg=hybrid_opex_avg,
        diesel_opex_avg=diesel_opex_avg,
        annual_savings_avg=savings_avg,
        npv_hybrid=npv_h,
        npv_diesel=npv_d,
        payback_years=payback,
        lcoe_hybrid=lcoe_h,
        lcoe_diesel=lcoe_d,
        first_year_opex=first_year,
        cash_flows=rows,
    )
