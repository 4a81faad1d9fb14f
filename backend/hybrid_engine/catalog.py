"""Technology catalog, reference sites, and load-pattern presets.

Fixed, read-only tables used by the sizing and simulation engine.  Every
technology selection in a :class:`~hybrid_engine.config.SystemConfig` is a
key into one of these dicts.

Each table provides:
  - PV_TECHNOLOGIES: module efficiency, annual degradation (%/yr),
    temperature coefficient (%/degC)
  - TRACKING_SYSTEMS: annual yield gain relative to fixed tilt
  - BATTERY_CHEMISTRIES: depth of discharge, cycle life, round-trip
    efficiency, annual capacity fade (%/yr)
  - DIESEL_CLASSES: specific fuel consumption at base and partial load
    (L/kWh), maintenance cost ($/kW/yr)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PVTechnology:
    """Photovoltaic module technology."""
    name: str
    efficiency: float
    degradation_pct: float
    temp_coeff_pct: float


@dataclass(frozen=True)
class TrackingSystem:
    """PV mounting / tracking arrangement."""
    name: str
    yield_factor: float


@dataclass(frozen=True)
class BatteryChemistry:
    """Battery storage chemistry."""
    name: str
    dod: float
    cycle_life: int
    efficiency: float
    degradation_pct: float


@dataclass(frozen=True)
class DieselClass:
    """Diesel genset size class."""
    name: str
    sfc_base: float      # L/kWh at >= 50 % loading
    sfc_partial: float   # L/kWh at < 30 % loading
    maintenance_per_kw: float


@dataclass(frozen=True)
class ReferenceSite:
    """Named site offered as a starting location."""
    name: str
    latitude: float
    longitude: float


# ======================================================================
# Technology tables
# ======================================================================

PV_TECHNOLOGIES: dict[str, PVTechnology] = {
    "mono_perc": PVTechnology("Mono PERC", 0.20, 0.5, -0.35),
    "bifacial_mono_perc": PVTechnology("Bifacial Mono PERC", 0.21, 0.45, -0.35),
    "hjt": PVTechnology("HJT (Heterojunction)", 0.22, 0.4, -0.26),
    "topcon": PVTechnology("TOPCon", 0.225, 0.4, -0.30),
    "thin_film_cdte": PVTechnology("Thin Film (CdTe)", 0.17, 0.7, -0.20),
}

TRACKING_SYSTEMS: dict[str, TrackingSystem] = {
    "fixed_tilt": TrackingSystem("Fixed Tilt", 1.0),
    "single_axis": TrackingSystem("Single Axis Tracker", 1.22),
    "dual_axis": TrackingSystem("Dual Axis Tracker", 1.35),
}

BATTERY_CHEMISTRIES: dict[str, BatteryChemistry] = {
    "lfp": BatteryChemistry("LFP (Lithium Iron Phosphate)", 0.90, 6000, 0.92, 2.0),
    "nmc": BatteryChemistry("NMC (Nickel Manganese Cobalt)", 0.85, 4000, 0.94, 3.0),
    "lead_acid_agm": BatteryChemistry("Lead Acid (AGM)", 0.50, 1500, 0.82, 5.0),
    "vanadium_flow": BatteryChemistry("Vanadium Redox Flow", 0.95, 15000, 0.75, 0.5),
}

DIESEL_CLASSES: dict[str, DieselClass] = {
    "small": DieselClass("Small (<100kW)", 0.28, 0.35, 35.0),
    "medium": DieselClass("Medium (100-500kW)", 0.24, 0.30, 45.0),
    "large": DieselClass("Large (500-2000kW)", 0.21, 0.27, 55.0),
    "high_speed": DieselClass("High Speed (>2MW)", 0.20, 0.25, 70.0),
}


# ======================================================================
# Sites and load presets
# ======================================================================

REFERENCE_SITES: list[ReferenceSite] = [
    ReferenceSite("Perth, WA", -31.95, 115.86),
    ReferenceSite("Darwin, NT", -12.46, 130.84),
    ReferenceSite("Karratha, WA", -20.74, 116.85),
    ReferenceSite("Alice Springs, NT", -23.70, 133.88),
    ReferenceSite("Kalgoorlie, WA", -30.75, 121.47),
    ReferenceSite("Broome, WA", -17.96, 122.24),
    ReferenceSite("Mt Isa, QLD", -20.73, 139.49),
    ReferenceSite("Coober Pedy, SA", -29.01, 134.76),
    ReferenceSite("Townsville, QLD", -19.25, 146.77),
    ReferenceSite("Custom", -25.0, 130.0),
]

# label, 24 hourly kW values (00-23)
LOAD_PATTERNS: dict[str, tuple[str, tuple[float, ...]]] = {
    "flat": ("Flat 500kW", (500.0,) * 24),
    "commercial": ("Commercial", (
        200, 200, 200, 200, 200, 250, 400, 600, 700, 750, 800, 800,
        750, 800, 800, 750, 700, 600, 500, 400, 350, 300, 250, 200,
    )),
    "industrial": ("Industrial 24/7", (
        400, 400, 400, 400, 400, 500, 700, 900, 950, 1000, 1000, 1000,
        950, 1000, 1000, 950, 900, 700, 500, 450, 400, 400, 400, 400,
    )),
    "mining": ("Mining Camp", (
        300, 250, 250, 250, 250, 300, 500, 700, 650, 600, 600, 600,
        600, 650, 650, 600, 550, 500, 600, 700, 650, 500, 400, 350,
    )),
    "processing": ("Processing Plant", (
        800, 800, 800, 800, 800, 850, 1000, 1200, 1200, 1200, 1200, 1200,
        1200, 1200, 1200, 1200, 1000, 900, 850, 800, 800, 800, 800, 800,
    )),
    "resort": ("Remote Resort", (
        150, 120, 100, 100, 100, 120, 200, 350, 400, 350, 300, 300,
        350, 350, 300, 300, 350, 400, 500, 550, 500, 400, 300, 200,
    )),
    "telecoms": ("Telecoms Tower", (50.0,) * 24),
}


def get_site(name: str) -> ReferenceSite:
    """Return the reference site with *name*.

    Raises
    ------
    KeyError
        If no site with that name exists.
    """
    for site in REFERENCE_SITES:
        if site.name == name:
            return site
    raise KeyError(f"Unknown reference site '{name}'")


def catalog_as_dict() -> dict:
    """Serialise every table to a JSON-compatible dict."""
    return {
        "pv_technologies": {
            key: {
                "name": t.name,
                "efficiency": t.efficiency,
                "degradation_pct": t.degradation_pct,
                "temp_coeff_pct": t.temp_coeff_pct,
            }
            for key, t in PV_TECHNOLOGIES.items()
        },
        "tracking_systems": {
            key: {"name": t.name, "yield_factor": t.yield_factor}
            for key, t in TRACKING_SYSTEMS.items()
        },
        "battery_chemistries": {
            key: {
                "name": b.name,
                "dod": b.dod,
                "cycle_life": b.cycle_life,
                "efficiency": b.efficiency,
                "degradation_pct": b.degradation_pct,
            }
            for key, b in BATTERY_CHEMISTRIES.items()
        },
        "diesel_classes": {
            key: {
                "name": d.name,
                "sfc_base": d.sfc_base,
                "sfc_partial": d.sfc_partial,
                "maintenance_per_kw": d.maintenance_per_kw,
            }
            for key, d in DIESEL_CLASSES.items()
        },
        "reference_sites": [
            {"name": s.name, "latitude": s.latitude, "longitude": s.longitude}
            for s in REFERENCE_SITES
        ],
    }
