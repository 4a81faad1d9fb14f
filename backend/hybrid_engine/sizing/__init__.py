"""Deterministic capacity sizing for PV, battery storage, and diesel."""

from .capacity import (
    AUTO_DIESEL_MARGIN,
    AUTONOMY_PV_CONTINGENCY,
    SizingResult,
    battery_energy_for_storage,
    effective_yield_per_kwp,
    pv_capacity_for_target,
    size_system,
)

__all__ = [
    "AUTO_DIESEL_MARGIN",
    "AUTONOMY_PV_CONTINGENCY",
    "SizingResult",
    "battery_energy_for_storage",
    "effective_yield_per_kwp",
    "pv_capacity_for_target",
    "size_system",
]
