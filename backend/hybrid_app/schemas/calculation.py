from typing import Literal

from pydantic import BaseModel, Field

from hybrid_engine.config import (
    AdvancedInputs,
    CapexInputs,
    FinanceInputs,
    OpexInputs,
    SiteLocation,
    SystemConfig,
    TechnologySelection,
)
from hybrid_engine.load.load_profile import LoadProfile


class LocationIn(BaseModel):
    name: str = Field(default="Perth, WA", max_length=255)
    latitude: float = Field(default=-31.95, ge=-90, le=90)
    longitude: float = Field(default=115.86, ge=-180, le=180)


class LoadIn(BaseModel):
    hourly_kw: list[float] = Field(min_length=24, max_length=24)
    scale: float = Field(default=1.0, ge=0)


class TechnologyIn(BaseModel):
    pv_type: str = "mono_perc"
    tracking: str = "fixed_tilt"
    battery: str = "lfp"
    diesel_class: str = "medium"


class CapexIn(BaseModel):
    pv_per_kwp: float = Field(default=1100.0, ge=0)
    battery_per_kwh: float = Field(default=800.0, ge=0)
    diesel_per_kw: float = Field(default=450.0, ge=0)
    fuel_price_per_l: float = Field(default=1.85, ge=0)
    bos_pct: float = Field(default=15.0, ge=0)
    epc_pct: float = Field(default=12.0, ge=0)
    land_cost: float = Field(default=0.0, ge=0)


class OpexIn(BaseModel):
    pv_om_per_kwp: float = Field(default=15.0, ge=0)
    battery_om_per_kwh: float = Field(default=10.0, ge=0)
    diesel_om_per_kw: float = Field(default=0.0, ge=0)
    diesel_om_auto: bool = True
    insurance_pct: float = Field(default=0.5, ge=0)
    site_management: float = Field(default=0.0, ge=0)
    network_fees: float = Field(default=0.0, ge=0)
    spares: float = Field(default=0.0, ge=0)
    env_compliance: float = Field(default=0.0, ge=0)
    water_chemistry: float = Field(default=0.0, ge=0)
    remote_monitoring: float = Field(default=0.0, ge=0)


class FinanceIn(BaseModel):
    fuel_escalation_pct: float = 3.0
    discount_rate_pct: float = Field(default=8.0, gt=-100)
    project_life_years: int = Field(default=25, ge=1, le=50)
    inflation_pct: float = 2.5


class AdvancedIn(BaseModel):
    performance_ratio: float = Field(default=0.82, gt=0, le=1.5)
    storage_hours: float = Field(default=4.0, ge=0)
    c_rate: float = Field(default=0.5, ge=0)
    diesel_free_days: int = Field(default=0, ge=0, le=365)
    diesel_free_start_hour: int = Field(default=10, ge=0, le=23)
    diesel_free_end_hour: int = Field(default=16, ge=0, le=48)
    min_pv_kwp: float = Field(default=0.0, ge=0)
    max_pv_kwp: float = Field(default=15000.0, ge=0)
    min_battery_kwh: float = Field(default=0.0, ge=0)
    max_battery_kwh: float = Field(default=50000.0, ge=0)
    max_battery_power_kw: float = Field(default=15000.0, ge=0)
    diesel_unit_kw: float = Field(default=0.0, ge=0)
    diesel_quantity: int = Field(default=1, ge=1)
    diesel_auto_size: bool = True
    battery_charge_source: Literal["pv", "diesel", "both"] = "both"
    dc_ac_ratio: float = Field(default=1.2, gt=0)
    diesel_min_load_pct: float = Field(default=30.0, ge=0, le=100)
    spinning_reserve_pct: float = Field(default=10.0, ge=0)
    battery_replacement_year: int = Field(default=12, ge=0)


def _default_load() -> LoadIn:
    return LoadIn(hourly_kw=list(LoadProfile.from_pattern("commercial").hourly_kw))


class CalculationRequest(BaseModel):
    location: LocationIn = Field(default_factory=LocationIn)
    load: LoadIn = Field(default_factory=_default_load)
    renewable_target_pct: float = Field(default=70.0, ge=0, le=100)
    technology: TechnologyIn = Field(default_factory=TechnologyIn)
    capex: CapexIn = Field(default_factory=CapexIn)
    opex: OpexIn = Field(default_factory=OpexIn)
    finance: FinanceIn = Field(default_factory=FinanceIn)
    advanced: AdvancedIn = Field(default_factory=AdvancedIn)

    def to_config(self) -> SystemConfig:
        """Build the immutable engine configuration.

        Raises ``ValueError`` for combinations the engine rejects (unknown
        catalog keys, inverted bounds).
        """
        return SystemConfig(
            location=SiteLocation(**self.location.model_dump()),
            load=LoadProfile(
                hourly_kw=tuple(self.load.hourly_kw), scale=self.load.scale
            ),
            renewable_target_pct=self.renewable_target_pct,
            technology=TechnologySelection(**self.technology.model_dump()),
            capex=CapexInputs(**self.capex.model_dump()),
            opex=OpexInputs(**self.opex.model_dump()),
            finance=FinanceInputs(**self.finance.model_dump()),
            advanced=AdvancedInputs(**self.advanced.model_dump()),
        )


class CalculationTaskResponse(BaseModel):
    task_id: str
    status: str


class TaskStatusResponse(BaseModel):
    task_id: str
    status: str
    result: dict | None = None
    error: str | None = None
