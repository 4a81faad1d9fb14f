"""Financial cash-flow model and sensitivity tables."""

from .cashflow import (
    CapexBreakdown,
    CashFlowYear,
    FinancialSummary,
    capex_breakdown,
    evaluate_financials,
    levelised_costs,
    net_present_costs,
    project_cash_flows,
)
from .sensitivity import (
    FUEL_PRICE_SCENARIOS,
    RENEWABLE_TARGET_SCENARIOS,
    FuelPricePoint,
    RenewableTargetPoint,
    SensitivityTables,
    fuel_price_sensitivity,
    renewable_target_sensitivity,
    sensitivity_analysis,
)

__all__ = [
    "CapexBreakdown",
    "CashFlowYear",
    "FinancialSummary",
    "capex_breakdown",
    "evaluate_financials",
    "levelised_costs",
    "net_present_costs",
    "project_cash_flows",
    "FUEL_PRICE_SCENARIOS",
    "RENEWABLE_TARGET_SCENARIOS",
    "FuelPricePoint",
    "RenewableTargetPoint",
    "SensitivityTables",
    "fuel_price_sensitivity",
    "renewable_target_sensitivity",
    "sensitivity_analysis",
]
