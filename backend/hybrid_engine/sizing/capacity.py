"""
Rule-based capacity sizing.

Sizes the PV array, battery (energy and power) and diesel fleet for a
renewable-energy target in a single deterministic pass.  Pure arithmetic:
no iteration, no simulation.  Results are clamped to the configured bounds
and any non-fatal conditions are reported as advisory strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hybrid_engine.config import SystemConfig
from hybrid_engine.solar.resource import annual_average_psh

# ---------------------------------------------------------------------------
# Sizing constants
# ---------------------------------------------------------------------------
AUTONOMY_PV_CONTINGENCY = 1.3   # extra PV margin for diesel-free days
AUTONOMY_STORAGE_HOURS = 6.0    # battery hours at the window's mean demand
AUTO_DIESEL_MARGIN = 1.2        # auto-sized diesel capacity over peak load
DAYS_PER_YEAR = 365


@dataclass
class SizingResult:
    """Sized asset capacities for one run."""
    pv_kwp: float
    inverter_kw: float
    battery_kwh: float
    battery_kw: float
    diesel_kw: float
    diesel_unit_kw: float
    diesel_units: int
    # Inputs derived during sizing, reused by later stages
    annual_demand_kwh: float
    target_renewable_kwh: float
    yield_per_kwp: float
    effective_pr: float
    autonomy_window_kwh: float
    advisories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "pv_kwp": round(self.pv_kwp, 1),
            "inverter_kw": round(self.inverter_kw, 1),
            "battery_kwh": round(self.battery_kwh, 1),
            "battery_kw": round(self.battery_kw, 1),
            "diesel_kw": round(self.diesel_kw, 1),
            "diesel_unit_kw": round(self.diesel_unit_kw, 1),
            "diesel_units": self.diesel_units,
            "annual_demand_kwh": round(self.annual_demand_kwh, 1),
            "target_renewable_kwh": round(self.target_renewable_kwh, 1),
            "yield_per_kwp": round(self.yield_per_kwp, 2),
            "effective_pr": round(self.effective_pr, 4),
            "autonomy_window_kwh": round(self.autonomy_window_kwh, 1),
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def effective_yield_per_kwp(latitude: float, effective_pr: float) -> float:
    """Annual AC energy per installed kWp (kWh/kWp/yr)."""
    return annual_average_psh(latitude) * DAYS_PER_YEAR * effective_pr


def pv_capacity_for_target(target_kwh: float, yield_per_kwp: float) -> float:
    """PV kWp needed to generate *target_kwh* per year.

    Raises ``ZeroDivisionError`` when the yield is zero.
    """
    return target_kwh / yield_per_kwp


def battery_energy_for_storage(
    average_kw: float, storage_hours: float, dod: float
) -> float:
    """Nameplate kWh that delivers *storage_hours* of average demand."""
    return average_kw * storage_hours / dod


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def size_system(config: SystemConfig) -> SizingResult:
    """Size PV, battery and diesel capacity for *config*.

    Steps:

    1. Target renewable energy = annual demand x renewable fraction.
    2. Base PV = target / effective yield per kWp.
    3. Diesel-free days add PV to cover the autonomy window with a 1.3x
       contingency.
    4. Battery energy covers ``storage_hours`` of average demand, raised to
       six hours of the window's mean demand when autonomy is requested.
    5. Battery power = min(energy x C-rate, peak x (1 + spinning reserve)).
    6. Clamp to bounds; inverter AC = PV DC / DC:AC ratio.
    7. Diesel auto-sized at 1.2x peak, or unit size x quantity.
    """
    load = config.load
    adv = config.advanced
    battery = config.technology.battery_spec
    advisories: list[str] = []

    average_kw = load.average_kw
    peak_kw = load.peak_kw
    annual_kwh = load.annual_kwh
    target_kwh = annual_kwh * config.renewable_target_pct / 100.0

    effective_pr = config.effective_performance_ratio
    yield_per_kwp = effective_yield_per_kwp(config.location.latitude, effective_pr)

    # --- PV -------------------------------------------------------------
    pv_kwp = pv_capacity_for_target(target_kwh, yield_per_kwp)

    window_kwh = 0.0
    if adv.diesel_free_days > 0:
        window_kwh = load.window_energy_kwh(
            adv.diesel_free_start_hour, adv.diesel_free_end_hour
        )
        pv_kwp += (
            window_kwh * adv.diesel_free_days * AUTONOMY_PV_CONTINGENCY / yield_per_kwp
        )
        advisories.append(f"Sized for {adv.diesel_free_days} diesel-free days")

    # --- Battery ----------------------------------------------------------
    battery_kwh = battery_energy_for_storage(average_kw, adv.storage_hours, battery.dod)
    if adv.diesel_free_days > 0:
        window_hours = (adv.diesel_free_end_hour - adv.diesel_free_start_hour) or 1
        battery_kwh = max(
            battery_kwh,
            window_kwh / window_hours * AUTONOMY_STORAGE_HOURS / battery.dod,
        )

    # Spinning reserve caps the power rating against peak load.
    battery_kw = min(
        battery_kwh * adv.c_rate,
        peak_kw * (1.0 + adv.spinning_reserve_pct / 100.0),
    )

    # --- Bounds -------------------------------------------------------------
    pv_kwp = _clamp(pv_kwp, adv.min_pv_kwp, adv.max_pv_kwp)
    inverter_kw = pv_kwp / adv.dc_ac_ratio
    battery_kwh = _clamp(battery_kwh, adv.min_battery_kwh, adv.max_battery_kwh)
    battery_kw = _clamp(battery_kw, 0.0, adv.max_battery_power_kw)

    # --- Diesel -------------------------------------------------------------
    if adv.diesel_auto_size:
        diesel_kw = peak_kw * AUTO_DIESEL_MARGIN
        diesel_units = 1
        diesel_unit_kw = diesel_kw
    else:
        diesel_units = max(1, adv.diesel_quantity)
        diesel_unit_kw = adv.diesel_unit_kw
        diesel_kw = diesel_unit_kw * diesel_units
        if diesel_kw < peak_kw:
            advisories.append(
                f"Diesel ({round(diesel_kw)}kW) < peak ({round(peak_kw)}kW)"
            )

    return SizingResult(
        pv_kwp=pv_kwp,
        inverter_kw=inverter_kw,
        battery_kwh=battery_kwh,
        battery_kw=battery_kw,
        diesel_kw=diesel_kw,
        diesel_unit_kw=diesel_unit_kw,
        diesel_units=diesel_units,
        annual_demand_kwh=annual_kwh,
        target_renewable_kwh=target_kwh,
        yield_per_kwp=yield_per_kwp,
        effective_pr=effective_pr,
        autonomy_window_kwh=window_kwh,
        advisories=advisories,
    )
