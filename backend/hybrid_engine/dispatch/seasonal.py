"""Load-following dispatch over representative seasonal days.

For each season a single representative day is simulated three times in a
row, carrying the battery state of charge across midnight, so that the
reported (final) day starts from a steady-state SOC rather than the empty
initial battery.

**Surplus priority:** PV -> load -> battery charge (policy permitting) -> curtailment
**Deficit priority:** battery discharge -> diesel

The diesel generator only follows residual load; it never charges the
battery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hybrid_engine.battery.soc_tracker import SOCTracker
from hybrid_engine.load.load_profile import HOURS_PER_DAY, LoadProfile
from hybrid_engine.sizing.capacity import SizingResult
from hybrid_engine.solar.resource import peak_sun_hours, solar_potential_kw

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# (season name, representative month index)
SEASONS: tuple[tuple[str, int], ...] = (
    ("Summer", 0),
    ("Autumn", 3),
    ("Winter", 6),
    ("Spring", 9),
)

WARMUP_CYCLES = 3
DIESEL_TOLERANCE_KW = 0.1

# Charge-source policies under which PV surplus may charge the battery.
_PV_CHARGING_POLICIES = ("pv", "both")


@dataclass
class DispatchTimestep:
    """One hour of the simulated day (all powers in kW)."""
    hour: int
    load: float
    solar: float
    battery_charge: float
    battery_discharge: float
    diesel: float
    curtailed: float
    soc: float  # fraction of capacity at the start of the hour

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "load": round(self.load, 2),
            "solar": round(self.solar, 2),
            "battery_charge": round(self.battery_charge, 2),
            "battery_discharge": round(self.battery_discharge, 2),
            "diesel": round(self.diesel, 2),
            "curtailed": round(self.curtailed, 2),
            "soc_pct": round(self.soc * 100.0, 1),
        }


@dataclass
class SeasonalProfile:
    """Final simulated day for one season plus daily totals (kWh)."""
    name: str
    month: int
    hours: list[DispatchTimestep] = field(default_factory=list)

    @property
    def total_solar(self) -> float:
        return sum(t.solar for t in self.hours)

    @property
    def total_diesel(self) -> float:
        return sum(t.diesel for t in self.hours)

    @property
    def total_load(self) -> float:
        return sum(t.load for t in self.hours)

    @property
    def total_curtailed(self) -> float:
        return sum(t.curtailed for t in self.hours)

    @property
    def total_battery_discharge(self) -> float:
        return sum(t.battery_discharge for t in self.hours)

    @property
    def renewable_fraction(self) -> float:
        load = self.total_load
        return self.total_solar / load if load > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "month": self.month,
            "hours": [t.to_dict() for t in self.hours],
            "total_solar_kwh": round(self.total_solar, 1),
            "total_diesel_kwh": round(self.total_diesel, 1),
            "total_load_kwh": round(self.total_load, 1),
            "total_curtailed_kwh": round(self.total_curtailed, 1),
            "total_battery_discharge_kwh": round(self.total_battery_discharge, 1),
            "renewable_fraction_pct": round(self.renewable_fraction * 100.0, 1),
        }


# ---------------------------------------------------------------------------
# Single time-step
# ---------------------------------------------------------------------------

def dispatch_hour(
    hour: int,
    load_kw: float,
    solar_kw: float,
    battery: SOCTracker,
    charge_source: str,
) -> DispatchTimestep:
    """Balance one hour and advance *battery* to the next hour's SOC."""
    soc_start = battery.soc_fraction
    charge = discharge = diesel = curtailed = 0.0

    net = solar_kw - load_kw  # positive = surplus, negative = deficit

    if net > 0:
        if charge_source in _PV_CHARGING_POLICIES:
            charge = battery.charge(net)
        curtailed = max(0.0, net - charge)
    elif net < 0:
        deficit = -net
        discharge = battery.discharge(deficit)
        residual = deficit - discharge
        if residual > DIESEL_TOLERANCE_KW:
            diesel = residual

    return DispatchTimestep(
        hour=hour,
        load=load_kw,
        solar=max(0.0, solar_kw),
        battery_charge=charge,
        battery_discharge=discharge,
        diesel=diesel,
        curtailed=curtailed,
        soc=soc_start,
    )


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------

def simulate_season(
    name: str,
    month: int,
    load: LoadProfile,
    sizing: SizingResult,
    latitude: float,
    dod: float,
    efficiency: float,
    charge_source: str,
    cycles: int = WARMUP_CYCLES,
) -> SeasonalProfile:
    """Simulate *cycles* consecutive days and return the last one."""
    if cycles < 1:
        raise ValueError(f"cycles must be >= 1, got {cycles}")

    psh = peak_sun_hours(month, latitude)
    load_kw = load.scaled

    # Solar is the same every day of the season; compute it once.
    solar_kw = [
        min(
            solar_potential_kw(h, sizing.pv_kwp, psh, sizing.effective_pr),
            sizing.inverter_kw,
        )
        for h in range(HOURS_PER_DAY)
    ]

    battery = SOCTracker(
        capacity_kwh=sizing.battery_kwh,
        power_kw=sizing.battery_kw,
        dod=dod,
        efficiency=efficiency,
    )

    day: list[DispatchTimestep] = []
    for _cycle in range(cycles):
        day = [
            dispatch_hour(h, float(load_kw[h]), solar_kw[h], battery, charge_source)
            for h in range(HOURS_PER_DAY)
        ]

    return SeasonalProfile(name=name, month=month, hours=day)


def simulate_seasons(
    load: LoadProfile,
    sizing: SizingResult,
    latitude: float,
    dod: float,
    efficiency: float,
    charge_source: str = "both",
) -> list[SeasonalProfile]:
    """Run :func:`simulate_season` for each of the four seasons."""
    return [
        simulate_season(
            name, month, load, sizing, latitude, dod, efficiency, charge_source
        )
        for name, month in SEASONS
    ]
