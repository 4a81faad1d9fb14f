"""Immutable configuration for a single sizing calculation.

A :class:`SystemConfig` is a snapshot of every user input: site, load,
renewable target, technology selections, cost inputs, and the advanced
engineering block.  The engine never mutates it; each run derives all of
its outputs from one snapshot.

Percentages are stored as entered (0-100) and converted to fractions by the
stages that consume them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hybrid_engine.catalog import (
    BATTERY_CHEMISTRIES,
    DIESEL_CLASSES,
    PV_TECHNOLOGIES,
    REFERENCE_SITES,
    TRACKING_SYSTEMS,
    BatteryChemistry,
    DieselClass,
    PVTechnology,
    TrackingSystem,
)
from hybrid_engine.load.load_profile import LoadProfile

CHARGE_SOURCES = ("pv", "diesel", "both")


@dataclass(frozen=True)
class SiteLocation:
    name: str
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude must be in [-90, 90], got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(
                f"longitude must be in [-180, 180], got {self.longitude}"
            )


def _default_site() -> SiteLocation:
    site = REFERENCE_SITES[0]
    return SiteLocation(site.name, site.latitude, site.longitude)


def _default_load() -> LoadProfile:
    return LoadProfile.from_pattern("commercial")


@dataclass(frozen=True)
class TechnologySelection:
    """Catalog keys for each technology choice."""

    pv_type: str = "mono_perc"
    tracking: str = "fixed_tilt"
    battery: str = "lfp"
    diesel_class: str = "medium"

    def __post_init__(self) -> None:
        for key, table, label in (
            (self.pv_type, PV_TECHNOLOGIES, "PV technology"),
            (self.tracking, TRACKING_SYSTEMS, "tracking system"),
            (self.battery, BATTERY_CHEMISTRIES, "battery chemistry"),
            (self.diesel_class, DIESEL_CLASSES, "diesel class"),
        ):
            if key not in table:
                raise ValueError(
                    f"Unknown {label} '{key}'. Choose from: {sorted(table.keys())}"
                )

    @property
    def pv_spec(self) -> PVTechnology:
        return PV_TECHNOLOGIES[self.pv_type]

    @property
    def tracking_spec(self) -> TrackingSystem:
        return TRACKING_SYSTEMS[self.tracking]

    @property
    def battery_spec(self) -> BatteryChemistry:
        return BATTERY_CHEMISTRIES[self.battery]

    @property
    def diesel_spec(self) -> DieselClass:
        return DIESEL_CLASSES[self.diesel_class]


@dataclass(frozen=True)
class CapexInputs:
    """Up-front unit costs."""

    pv_per_kwp: float = 1100.0
    battery_per_kwh: float = 800.0
    diesel_per_kw: float = 450.0
    fuel_price_per_l: float = 1.85
    bos_pct: float = 15.0      # of PV + battery
    epc_pct: float = 12.0      # of PV + battery + diesel + BOS
    land_cost: float = 0.0


@dataclass(frozen=True)
class OpexInputs:
    """Recurring operating costs in first-year dollars."""

    pv_om_per_kwp: float = 15.0
    battery_om_per_kwh: float = 10.0
    diesel_om_per_kw: float = 0.0
    diesel_om_auto: bool = True
    insurance_pct: float = 0.5
    site_management: float = 0.0
    network_fees: float = 0.0
    spares: float = 0.0
    env_compliance: float = 0.0
    water_chemistry: float = 0.0
    remote_monitoring: float = 0.0

    @property
    def fixed_site_costs(self) -> float:
        """Sum of the flat per-year site cost items."""
        return (
            self.site_management
            + self.network_fees
            + self.spares
            + self.env_compliance
            + self.water_chemistry
            + self.remote_monitoring
        )


@dataclass(frozen=True)
class FinanceInputs:
    fuel_escalation_pct: float = 3.0
    discount_rate_pct: float = 8.0
    project_life_years: int = 25
    inflation_pct: float = 2.5

    def __post_init__(self) -> None:
        if self.project_life_years < 1:
            raise ValueError(
                f"project_life_years must be >= 1, got {self.project_life_years}"
            )


@dataclass(frozen=True)
class AdvancedInputs:
    """Engineering parameters behind the sizing heuristic and dispatch."""

    performance_ratio: float = 0.82
    storage_hours: float = 4.0
    c_rate: float = 0.5
    diesel_free_days: int = 0
    diesel_free_start_hour: int = 10
    diesel_free_end_hour: int = 16
    min_pv_kwp: float = 0.0
    max_pv_kwp: float = 15000.0
    min_battery_kwh: float = 0.0
    max_battery_kwh: float = 50000.0
    max_battery_power_kw: float = 15000.0
    diesel_unit_kw: float = 0.0
    diesel_quantity: int = 1
    diesel_auto_size: bool = True
    battery_charge_source: str = "both"
    dc_ac_ratio: float = 1.2
    diesel_min_load_pct: float = 30.0
    spinning_reserve_pct: float = 10.0
    battery_replacement_year: int = 12

    def __post_init__(self) -> None:
        if self.battery_charge_source not in CHARGE_SOURCES:
            raise ValueError(
                f"battery_charge_source must be one of {CHARGE_SOURCES}, "
                f"got '{self.battery_charge_source}'"
            )
        if self.min_pv_kwp < 0 or self.min_pv_kwp > self.max_pv_kwp:
            raise ValueError(
                f"Need 0 <= min_pv_kwp <= max_pv_kwp, got "
                f"[{self.min_pv_kwp}, {self.max_pv_kwp}]"
            )
        if self.min_battery_kwh < 0 or self.min_battery_kwh > self.max_battery_kwh:
            raise ValueError(
                f"Need 0 <= min_battery_kwh <= max_battery_kwh, got "
                f"[{self.min_battery_kwh}, {self.max_battery_kwh}]"
            )
        if self.max_battery_power_kw < 0:
            raise ValueError(
                f"max_battery_power_kw must be >= 0, got {self.max_battery_power_kw}"
            )
        if self.dc_ac_ratio <= 0:
            raise ValueError(f"dc_ac_ratio must be > 0, got {self.dc_ac_ratio}")
        if self.diesel_free_days < 0:
            raise ValueError(
                f"diesel_free_days must be >= 0, got {self.diesel_free_days}"
            )


@dataclass(frozen=True)
class SystemConfig:
    """Complete input snapshot for one calculation run."""

    location: SiteLocation = field(default_factory=_default_site)
    load: LoadProfile = field(default_factory=_default_load)
    renewable_target_pct: float = 70.0
    technology: TechnologySelection = field(default_factory=TechnologySelection)
    capex: CapexInputs = field(default_factory=CapexInputs)
    opex: OpexInputs = field(default_factory=OpexInputs)
    finance: FinanceInputs = field(default_factory=FinanceInputs)
    advanced: AdvancedInputs = field(default_factory=AdvancedInputs)

    def __post_init__(self) -> None:
        if not 0.0 <= self.renewable_target_pct <= 100.0:
            raise ValueError(
                f"renewable_target_pct must be in [0, 100], "
                f"got {self.renewable_target_pct}"
            )

    @property
    def effective_performance_ratio(self) -> float:
        """Performance ratio including the tracking yield gain."""
        return self.advanced.performance_ratio * self.technology.tracking_spec.yield_factor
